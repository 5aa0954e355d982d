"""Option — the two-state result channel of every pattern.

``Some(value)`` means the pattern matched and extracted ``value``;
``NOTHING`` means it did not. ``Some(None)`` is a present result, so a
pattern may legitimately extract ``None``.

The Option union type is pattern-matchable via match/case::

    match pattern.match(x):
        case Some(value=v):
            ...
        case Nothing():
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from casematch._errors import UnwrapError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@dataclass(frozen=True, slots=True)
class Some[T]:
    """A present value."""

    value: T

    @property
    def is_some(self) -> bool:
        return True

    @property
    def is_nothing(self) -> bool:
        return False

    def map[U](self, func: Callable[[T], U]) -> Some[U]:
        return Some(func(self.value))

    def value_or(self, default: Any) -> T:
        return self.value

    def unwrap(self) -> T:
        return self.value

    def __bool__(self) -> bool:
        return True

    def __iter__(self) -> Iterator[T]:
        yield self.value


@dataclass(frozen=True, slots=True)
class Nothing:
    """An absent value. Use the ``NOTHING`` singleton."""

    @property
    def is_some(self) -> bool:
        return False

    @property
    def is_nothing(self) -> bool:
        return True

    def map(self, func: Callable[[Any], Any]) -> Nothing:
        return self

    def value_or[D](self, default: D) -> D:
        return default

    def unwrap(self) -> Any:
        msg = "called unwrap() on an absent option"
        raise UnwrapError(msg)

    def __bool__(self) -> bool:
        return False

    def __iter__(self) -> Iterator[Any]:
        return iter(())


NOTHING = Nothing()

type Option[T] = Some[T] | Nothing
