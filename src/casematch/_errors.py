"""Exception hierarchy shared by every casematch module."""

from __future__ import annotations

from typing import Any


class CaseMatchError(Exception):
    """Base class for all casematch errors."""


class ArgumentError(CaseMatchError, ValueError):
    """An invalid argument was passed while building a pattern or expression.

    Raised eagerly at construction time, never while an expression executes.
    """


class MatchFailure(CaseMatchError):
    """Strict execution found no case matching the input.

    The unmatched input is kept on ``value``.
    """

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"cannot match {value!r}")


class UnwrapError(CaseMatchError):
    """``unwrap()`` was called on an absent option."""
