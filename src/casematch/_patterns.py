"""Predefined patterns and logical combinators.

Every pattern is an immutable frozen dataclass with a
single ``match(value) -> Option`` method. Leaf patterns extract the input
itself (``TypeOf`` extracts it narrowed, ``Regex`` extracts the match
object). ``And``, ``Or`` and ``Not`` compose existing patterns with
short-circuit evaluation, and are also reachable through the ``&``, ``|``
and ``~`` operators.

Comparison patterns accept either a fixed value or a ``provider`` callable.
The provider is called on every ``match``, never at construction, so a
pattern closing over mutable state sees the state of each match attempt.

Regex uses ``google-re2`` for guaranteed linear-time matching. RE2 does not
support backreferences or lookahead/lookbehind, so patterns using them are
rejected at construction.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass, field
from functools import reduce
from typing import TYPE_CHECKING, Any

import re2

from casematch._errors import ArgumentError
from casematch._option import NOTHING, Some
from casematch._types import Pattern

if TYPE_CHECKING:
    from collections.abc import Callable

    from casematch._option import Option


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<unset>"


_UNSET: Any = _Unset()

# Objects with a `match` method that does not return an Option.
_FOREIGN_MATCHERS: tuple[type, ...] = (re.Pattern, type(re2.compile("")))


def _ensure_pattern(pattern: Any, name: str) -> None:
    if pattern is None:
        msg = f"{name} must not be None"
        raise ArgumentError(msg)
    if isinstance(pattern, _FOREIGN_MATCHERS):
        msg = f"{name} must be a pattern, got {type(pattern).__name__} (wrap regexes in Regex)"
        raise ArgumentError(msg)
    if not isinstance(pattern, Pattern):
        msg = f"{name} must be a pattern, got {type(pattern).__name__}"
        raise ArgumentError(msg)


def _ensure_callable(func: Any, name: str) -> None:
    if func is None:
        msg = f"{name} must not be None"
        raise ArgumentError(msg)
    if not callable(func):
        msg = f"{name} must be callable, got {type(func).__name__}"
        raise ArgumentError(msg)


class PatternOps:
    """Operator sugar shared by all predefined patterns."""

    __slots__ = ()

    def __and__(self, other: Pattern[Any, Any]) -> And:
        return And(self, other)  # type: ignore[arg-type]

    def __or__(self, other: Pattern[Any, Any]) -> Or:
        return Or(self, other)  # type: ignore[arg-type]

    def __invert__(self) -> Not:
        return Not(self)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# Comparison patterns
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class _Comparison(PatternOps):
    """Compare the input against a fixed or deferred operand.

    Exactly one of ``value`` or ``provider`` must be given.
    """

    value: Any = _UNSET
    provider: Callable[[], Any] | None = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        has_value = self.value is not _UNSET
        has_provider = self.provider is not None
        if has_value and has_provider:
            msg = f"{type(self).__name__} takes a value or a provider, got both"
            raise ArgumentError(msg)
        if not has_value and not has_provider:
            msg = f"{type(self).__name__} requires a value or a provider"
            raise ArgumentError(msg)
        if has_provider:
            _ensure_callable(self.provider, "provider")

    def operand(self) -> Any:
        """Return the operand, calling the provider if there is one."""
        if self.provider is not None:
            return self.provider()
        return self.value

    def _compare(self, value: Any, operand: Any) -> bool:
        raise NotImplementedError

    def match(self, value: Any, /) -> Option[Any]:
        if self._compare(value, self.operand()):
            return Some(value)
        return NOTHING


@dataclass(frozen=True, slots=True)
class EqualTo[T](_Comparison):
    """Matches iff the input equals the operand."""

    def _compare(self, value: Any, operand: Any) -> bool:
        return bool(value == operand)


@dataclass(frozen=True, slots=True)
class _Ordering(_Comparison):
    """Ordering comparison. Incomparable operands do not match."""

    def _compare(self, value: Any, operand: Any) -> bool:
        try:
            return bool(self._op(value, operand))
        except TypeError:
            return False

    @staticmethod
    def _op(a: Any, b: Any) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class LessThan[T](_Ordering):
    """Matches iff ``input < operand``."""

    _op = staticmethod(operator.lt)


@dataclass(frozen=True, slots=True)
class LessOrEqual[T](_Ordering):
    """Matches iff ``input <= operand``."""

    _op = staticmethod(operator.le)


@dataclass(frozen=True, slots=True)
class GreaterThan[T](_Ordering):
    """Matches iff ``input > operand``."""

    _op = staticmethod(operator.gt)


@dataclass(frozen=True, slots=True)
class GreaterOrEqual[T](_Ordering):
    """Matches iff ``input >= operand``."""

    _op = staticmethod(operator.ge)


# ═══════════════════════════════════════════════════════════════════════════════
# Other leaf patterns
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AnyValue(PatternOps):
    """Always matches. Intended as the terminal, default case."""

    def match(self, value: Any, /) -> Option[Any]:
        return Some(value)


@dataclass(frozen=True, slots=True)
class NoneValue(PatternOps):
    """Matches iff the input is ``None``. Extracts ``Some(None)``."""

    def match(self, value: Any, /) -> Option[None]:
        if value is None:
            return Some(None)
        return NOTHING


@dataclass(frozen=True, slots=True)
class TypeOf[T](PatternOps):
    """Matches iff the input is an instance of ``cls``.

    ``cls`` may be a single type or a tuple of types, exactly as accepted
    by ``isinstance``. The extracted value is the input itself, narrowed.
    """

    cls: type[T] | tuple[type, ...]

    def __post_init__(self) -> None:
        classes = self.cls if isinstance(self.cls, tuple) else (self.cls,)
        if not classes or not all(isinstance(c, type) for c in classes):
            msg = f"TypeOf requires a type or a tuple of types, got {self.cls!r}"
            raise ArgumentError(msg)

    def match(self, value: Any, /) -> Option[T]:
        if isinstance(value, self.cls):
            return Some(value)
        return NOTHING


@dataclass(frozen=True, slots=True)
class Condition[T](PatternOps):
    """Matches iff ``predicate(input)`` is truthy."""

    predicate: Callable[[T], Any]

    def __post_init__(self) -> None:
        _ensure_callable(self.predicate, "predicate")

    def match(self, value: T, /) -> Option[T]:
        if self.predicate(value):
            return Some(value)
        return NOTHING


@dataclass(frozen=True, slots=True)
class FromFunction[T, R](PatternOps):
    """Adapt a plain ``input -> Option`` function into a pattern."""

    func: Callable[[T], Option[R]]

    def __post_init__(self) -> None:
        _ensure_callable(self.func, "func")

    def match(self, value: T, /) -> Option[R]:
        return self.func(value)


@dataclass(frozen=True, slots=True)
class Regex(PatternOps):
    """Regular expression match over ``str`` inputs.

    Uses search (match anywhere) by default, ``fullmatch`` when ``full`` is
    set. The extracted value is the match object, so groups are available
    to the case's output producer. Non-string inputs never match.

    Raises:
        ArgumentError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    full: bool = False
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            msg = f'invalid regex pattern "{self.pattern}": {e}'
            raise ArgumentError(msg) from e
        object.__setattr__(self, "_compiled", compiled)

    def match(self, value: Any, /) -> Option[Any]:
        if not isinstance(value, str):
            return NOTHING
        if self.full:
            m = self._compiled.fullmatch(value)
        else:
            m = self._compiled.search(value)
        if m is None:
            return NOTHING
        return Some(m)


# ═══════════════════════════════════════════════════════════════════════════════
# Combinators
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class And[T, R](PatternOps):
    """Both patterns must match (logical AND).

    Short-circuits on the first absent result. The extracted value is the
    right-hand pattern's result.
    """

    left: Pattern[T, Any]
    right: Pattern[T, R]

    def __post_init__(self) -> None:
        _ensure_pattern(self.left, "left")
        _ensure_pattern(self.right, "right")

    def match(self, value: T, /) -> Option[R]:
        if not self.left.match(value):
            return NOTHING
        return self.right.match(value)


@dataclass(frozen=True, slots=True)
class Or[T, R](PatternOps):
    """Either pattern must match (logical OR), tried left first.

    The extracted value comes from whichever pattern matched.
    """

    left: Pattern[T, R]
    right: Pattern[T, R]

    def __post_init__(self) -> None:
        _ensure_pattern(self.left, "left")
        _ensure_pattern(self.right, "right")

    def match(self, value: T, /) -> Option[R]:
        result = self.left.match(value)
        if result:
            return result
        return self.right.match(value)


@dataclass(frozen=True, slots=True)
class Not[T](PatternOps):
    """Inverts the inner pattern (logical NOT). Extracts the input."""

    pattern: Pattern[T, Any]

    def __post_init__(self) -> None:
        _ensure_pattern(self.pattern, "pattern")

    def match(self, value: T, /) -> Option[T]:
        if self.pattern.match(value):
            return NOTHING
        return Some(value)


def all_of(*patterns: Pattern[Any, Any]) -> Pattern[Any, Any]:
    """Fold patterns into nested ``And`` with AND semantics.

    - Empty -> AnyValue (no conditions = match everything)
    - Single -> unwrapped (no wrapping overhead)
    - Multiple -> And(And(p1, p2), p3) ...; extracts the last result
    """
    if not patterns:
        return AnyValue()
    return reduce(And, patterns)


def any_of(*patterns: Pattern[Any, Any]) -> Pattern[Any, Any]:
    """Fold patterns into nested ``Or``, tried in argument order.

    Raises:
        ArgumentError: If no pattern is given.
    """
    if not patterns:
        msg = "any_of requires at least one pattern"
        raise ArgumentError(msg)
    return reduce(Or, patterns)


def _operands(p: Pattern[Any, Any], kind: type) -> list[Pattern[Any, Any]]:
    # Flattens a chain of one combinator type into its n-ary operand list.
    out: list[Pattern[Any, Any]] = []
    stack = [p]
    while stack:
        node = stack.pop()
        if type(node) is kind:
            stack.append(node.right)  # type: ignore[attr-defined]
            stack.append(node.left)  # type: ignore[attr-defined]
        else:
            out.append(node)
    return out


def pattern_depth(p: Pattern[Any, Any]) -> int:
    """Calculate the nesting depth of a pattern tree.

    A chain of the same combinator counts as one level, so
    ``all_of(p1, ..., pn)`` over leaves has depth 2 for any n.
    """
    match p:
        case And() | Or():
            return 1 + max(pattern_depth(op) for op in _operands(p, type(p)))
        case Not(pattern=inner):
            return 1 + pattern_depth(inner)
        case _:
            return 1
