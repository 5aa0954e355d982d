"""Conformance fixture loader for casematch.

Loads YAML fixtures from tests/fixtures/ and compiles each document's
config into a MatchExpression for parametrized testing.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from casematch import MatchExpression, RegistryBuilder, parse_match_config, register_core_types
from casematch.testing import register

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single test case from a conformance fixture."""

    fixture_name: str
    case_name: str
    expression: MatchExpression[Any, Any]
    input: Any
    expect: Any
    expect_fallthrough: list[Any] | None


def _registry() -> Any:
    return register(register_core_types(RegistryBuilder())).build()


def load_fixtures() -> list[FixtureCase]:
    """Load all conformance fixtures."""
    cases: list[FixtureCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def _load_file(path: Path) -> list[FixtureCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    registry = _registry()
    cases: list[FixtureCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            fixture_name = doc["name"]
            expression = registry.load_expression(parse_match_config(doc["config"]))
            for case in doc["cases"]:
                cases.append(
                    FixtureCase(
                        fixture_name=fixture_name,
                        case_name=case["name"],
                        expression=expression,
                        input=case["input"],
                        expect=case["expect"],
                        expect_fallthrough=case.get("expect_fallthrough"),
                    )
                )
    return cases
