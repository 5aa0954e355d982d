"""Core protocols and type aliases for casematch.

- Pattern is the matching port: try an input, maybe extract a value
- Transform produces the output of a value expression
- Effect performs the side effect of a statement expression
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from casematch._option import Option

I = TypeVar("I", contravariant=True)  # noqa: E741
R = TypeVar("R", covariant=True)


@runtime_checkable
class Pattern(Protocol[I, R]):
    """Try to match an input, optionally extracting a derived value.

    Implementations must be pure: ``match`` may be called any number of
    times (including zero) by the engine with no observable difference.
    Returning ``NOTHING`` signals "no match"; ``Some(v)`` carries the
    extracted value to the case's output producer.

    The check is structural, so compiled ``re`` and ``re2`` objects would
    satisfy it; case builders and combinators reject those explicitly.
    """

    def match(self, value: I, /) -> Option[R]: ...


# Output producers. Both receive the value the pattern extracted.
type Transform[R, O] = Callable[[R], O]
type Effect[R] = Callable[[R], Any]
