"""Test utilities for casematch.

Provides a recording effect for statement expressions and registry entries
for exploring config-driven expressions. These are NOT meant for
production expressions; register your own factories for real domains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from casematch._patterns import Condition

if TYPE_CHECKING:
    from casematch._registry import RegistryBuilder


@dataclass
class RecordingEffect:
    """An effect that remembers every value it was called with.

    >>> from casematch import AnyValue, MatchStatement
    >>> from casematch.testing import RecordingEffect
    >>> seen = RecordingEffect()
    >>> MatchStatement.create().case(AnyValue(), seen).execute_on(7)
    True
    >>> seen.calls
    [7]
    """

    calls: list[Any] = field(default_factory=list)

    def __call__(self, value: Any) -> None:
        self.calls.append(value)

    @property
    def call_count(self) -> int:
        return len(self.calls)


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the test-domain factories.

    - casematch.test.v1.Even (pattern): matches even integers
    - casematch.test.v1.Format (transform): ``{"template": "n={}"}``
    """
    builder.pattern("casematch.test.v1.Even", _even_factory)
    return builder.transform("casematch.test.v1.Format", _format_factory)


def _is_even(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value % 2 == 0


def _even_factory(config: dict[str, Any]) -> Condition[Any]:
    return Condition(_is_even)


def _format_factory(config: dict[str, Any]) -> Any:
    template = config.get("template")
    if not isinstance(template, str):
        msg = "Format requires a 'template' field (string)"
        raise ValueError(msg)
    return template.format
