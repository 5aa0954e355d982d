"""Match expressions — ordered cases evaluated with first-match-wins semantics.

An expression is an immutable, ordered list of cases. Each case pairs a
pattern with a fallthrough flag and an output producer:

- MatchExpression[I, O]: producers are transforms, execution yields values
- MatchStatement[I]: producers are effects, execution yields match counts

Building never mutates: ``case()`` returns a new expression that shares
every earlier case with its receiver, so appending is O(1) and each
intermediate expression stays valid and reusable.

Execution modes:
- single result: the first matching case wins, later cases are never tried
- fallthrough: every matching case runs, in order, until a matched case
  whose fallthrough flag is false (that case's output is included)
- strict variants raise MatchFailure when no case matched; non-strict
  variants return an absent option, an empty tuple or ``False``/``0``

INV: each case's pattern is evaluated at most once per execution, and each
matched case's producer is invoked exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

from loguru import logger

from casematch._errors import ArgumentError, MatchFailure
from casematch._option import NOTHING, Some
from casematch._patterns import TypeOf, _ensure_callable, _ensure_pattern

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from casematch._option import Option
    from casematch._types import Effect, Pattern, Transform


@dataclass(frozen=True, slots=True)
class Case[I, R, P]:
    """One case of an expression: pattern, fallthrough flag, output producer."""

    pattern: Pattern[I, R]
    fallthrough: bool
    producer: Callable[[R], P]


@dataclass(frozen=True, slots=True)
class _Node:
    """Cell of the persistent case list, newest case first."""

    case: Case[Any, Any, Any]
    prev: _Node | None
    size: int


def _unroll(node: _Node | None) -> tuple[Case[Any, Any, Any], ...]:
    cases: list[Case[Any, Any, Any]] = []
    while node is not None:
        cases.append(node.case)
        node = node.prev
    cases.reverse()
    return tuple(cases)


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class _CaseList:
    """Shared builder surface of value and statement expressions."""

    fallthrough_by_default: bool = False
    _tail: _Node | None = None
    _ordered: tuple[Case[Any, Any, Any], ...] | None = field(default=None, init=False)

    @property
    def cases(self) -> tuple[Case[Any, Any, Any], ...]:
        """The cases in declaration order."""
        ordered = self._ordered
        if ordered is None:
            # Materialized once; concurrent first calls compute the same tuple.
            ordered = _unroll(self._tail)
            object.__setattr__(self, "_ordered", ordered)
        return ordered

    def _append(self, pattern: Any, fallthrough: bool | None, producer: Any) -> Self:
        _ensure_pattern(pattern, "pattern")
        _ensure_callable(producer, "producer")
        if fallthrough is None:
            fallthrough = self.fallthrough_by_default
        elif not isinstance(fallthrough, bool):
            msg = f"fallthrough must be a bool, got {type(fallthrough).__name__}"
            raise ArgumentError(msg)
        size = self._tail.size + 1 if self._tail is not None else 1
        node = _Node(Case(pattern, fallthrough, producer), self._tail, size)
        return type(self)(self.fallthrough_by_default, node)

    def _matches(self, value: Any) -> Iterator[tuple[Case[Any, Any, Any], Any]]:
        """Yield (case, extracted) for each matching case, honoring fallthrough.

        The consumer runs the producer before asking for the next match, so
        producers and patterns interleave in declaration order.
        """
        for c in self.cases:
            match c.pattern.match(value):
                case Some(value=extracted):
                    yield c, extracted
                    if not c.fallthrough:
                        return

    def _first(self, value: Any) -> Option[tuple[Case[Any, Any, Any], Any]]:
        for c in self.cases:
            match c.pattern.match(value):
                case Some(value=extracted):
                    return Some((c, extracted))
        return NOTHING

    def _fail(self, value: Any) -> MatchFailure:
        logger.debug("no case of {} matched {!r}", self, value)
        return MatchFailure(value)

    def __repr__(self) -> str:
        size = self._tail.size if self._tail is not None else 0
        return (
            f"{type(self).__name__}(fallthrough_by_default={self.fallthrough_by_default}, "
            f"cases={size})"
        )


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class MatchExpression[I, O](_CaseList):
    """A value-producing match expression.

    >>> from casematch import AnyValue, EqualTo, MatchExpression
    >>> describe = (
    ...     MatchExpression.create()
    ...     .case(EqualTo(1), lambda _: "one")
    ...     .case(EqualTo(2), lambda _: "two")
    ...     .case(AnyValue(), str)
    ... )
    >>> describe.execute_on(2)
    'two'
    >>> describe.execute_on(5)
    '5'
    """

    @classmethod
    def create(cls, fallthrough_by_default: bool = False) -> MatchExpression[I, O]:
        """Return an empty expression with the given default fallthrough."""
        return cls(fallthrough_by_default)

    def case[R](
        self,
        pattern: Pattern[I, R],
        func: Transform[R, O],
        *,
        fallthrough: bool | None = None,
    ) -> MatchExpression[I, O]:
        """Return a new expression with ``(pattern, func)`` appended.

        ``fallthrough`` defaults to the expression's default behaviour.

        Raises:
            ArgumentError: If pattern is not a pattern or func is not callable.
        """
        return self._append(pattern, fallthrough, func)

    def case_type[T](
        self,
        cls: type[T],
        func: Transform[T, O],
        *,
        fallthrough: bool | None = None,
    ) -> MatchExpression[I, O]:
        """Append a case matching instances of ``cls``; see ``TypeOf``."""
        return self.case(TypeOf(cls), func, fallthrough=fallthrough)

    # ── Execution ──────────────────────────────────────────────────────────

    def execute_on(self, value: I) -> O:
        """Return the output of the first matching case.

        Raises:
            MatchFailure: If no case matched.
        """
        match self._first(value):
            case Some(value=(c, extracted)):
                return c.producer(extracted)
        raise self._fail(value)

    def execute_non_strict(self, value: I) -> Option[O]:
        """Return ``Some(output)`` of the first matching case, or ``NOTHING``."""
        return self._first(value).map(lambda hit: hit[0].producer(hit[1]))

    def execute_with_fallthrough(self, value: I) -> tuple[O, ...]:
        """Return the outputs of all cases reached with fallthrough.

        Raises:
            MatchFailure: If no case matched.
        """
        results = self.execute_non_strict_with_fallthrough(value)
        if not results:
            raise self._fail(value)
        return results

    def execute_non_strict_with_fallthrough(self, value: I) -> tuple[O, ...]:
        """Like ``execute_with_fallthrough`` but may return an empty tuple."""
        return tuple(c.producer(extracted) for c, extracted in self._matches(value))

    __call__ = execute_on

    # ── Function adapters ──────────────────────────────────────────────────

    def to_function(self) -> Callable[[I], O]:
        return self.execute_on

    def to_non_strict_function(self) -> Callable[[I], Option[O]]:
        return self.execute_non_strict

    def to_function_with_fallthrough(self) -> Callable[[I], tuple[O, ...]]:
        return self.execute_with_fallthrough

    def to_non_strict_function_with_fallthrough(self) -> Callable[[I], tuple[O, ...]]:
        return self.execute_non_strict_with_fallthrough


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class MatchStatement[I](_CaseList):
    """A side-effecting match expression.

    Same builder surface as MatchExpression, but each case carries an
    effect and execution reports whether (or how many) cases matched.
    """

    @classmethod
    def create(cls, fallthrough_by_default: bool = False) -> MatchStatement[I]:
        """Return an empty statement with the given default fallthrough."""
        return cls(fallthrough_by_default)

    def case[R](
        self,
        pattern: Pattern[I, R],
        action: Effect[R],
        *,
        fallthrough: bool | None = None,
    ) -> MatchStatement[I]:
        """Return a new statement with ``(pattern, action)`` appended.

        Raises:
            ArgumentError: If pattern is not a pattern or action is not callable.
        """
        return self._append(pattern, fallthrough, action)

    def case_type[T](
        self,
        cls: type[T],
        action: Effect[T],
        *,
        fallthrough: bool | None = None,
    ) -> MatchStatement[I]:
        """Append a case matching instances of ``cls``; see ``TypeOf``."""
        return self.case(TypeOf(cls), action, fallthrough=fallthrough)

    # ── Execution ──────────────────────────────────────────────────────────

    def execute_on(self, value: I) -> bool:
        """Run the action of the first matching case. Return whether one matched."""
        match self._first(value):
            case Some(value=(c, extracted)):
                c.producer(extracted)
                return True
        return False

    def execute_strict(self, value: I) -> None:
        """Run the action of the first matching case.

        Raises:
            MatchFailure: If no case matched.
        """
        if not self.execute_on(value):
            raise self._fail(value)

    def execute_with_fallthrough(self, value: I) -> int:
        """Run the actions of all cases reached with fallthrough; return their count."""
        count = 0
        for c, extracted in self._matches(value):
            c.producer(extracted)
            count += 1
        return count

    def execute_strict_with_fallthrough(self, value: I) -> int:
        """Like ``execute_with_fallthrough`` but fails when nothing matched.

        Raises:
            MatchFailure: If no case matched.
        """
        count = self.execute_with_fallthrough(value)
        if count == 0:
            raise self._fail(value)
        return count

    __call__ = execute_on

    # ── Function adapters ──────────────────────────────────────────────────

    def to_function(self) -> Callable[[I], bool]:
        return self.execute_on

    def to_strict_function(self) -> Callable[[I], None]:
        return self.execute_strict

    def to_function_with_fallthrough(self) -> Callable[[I], int]:
        return self.execute_with_fallthrough

    def to_strict_function_with_fallthrough(self) -> Callable[[I], int]:
        return self.execute_strict_with_fallthrough


def match_expression(fallthrough_by_default: bool = False) -> MatchExpression[Any, Any]:
    """Shorthand for ``MatchExpression.create()``."""
    return MatchExpression.create(fallthrough_by_default)


def match_statement(fallthrough_by_default: bool = False) -> MatchStatement[Any]:
    """Shorthand for ``MatchStatement.create()``."""
    return MatchStatement.create(fallthrough_by_default)
