"""Tests for the registry (casematch._registry).

Validates the builder → frozen registry → load_expression pipeline.
"""

import pytest

from casematch import (
    MAX_CASES,
    MAX_DEPTH,
    MAX_PATTERNS_PER_COMPOUND,
    MAX_REGEX_PATTERN_LENGTH,
    NOTHING,
    Condition,
    Constant,
    InvalidConfigError,
    MatchExpression,
    MatchFailure,
    PatternTooDeepError,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    Some,
    TooManyCasesError,
    TooManyPatternsError,
    UnknownTypeUrlError,
    parse_match_config,
    register_core_types,
)
from casematch.testing import register


def _any_case(on_match: dict | None = None) -> dict:
    return {"pattern": {"type": "any"}, "on_match": on_match or {"type": "input"}}


class TestRegistryBuilder:
    """Tests for RegistryBuilder."""

    def test_builder_registers_and_freezes(self) -> None:
        builder = RegistryBuilder()
        builder.pattern("test.Even", lambda cfg: Condition(lambda n: n % 2 == 0))
        registry = builder.build()

        assert registry.pattern_count == 1
        assert registry.contains_pattern("test.Even")
        assert not registry.contains_pattern("test.Odd")

    def test_build_snapshot_is_independent(self) -> None:
        builder = RegistryBuilder()
        registry = builder.build()
        builder.transform("test.Upper", lambda cfg: str.upper)
        assert registry.transform_count == 0
        assert builder.build().contains_transform("test.Upper")

    def test_register_helper(self) -> None:
        registry = register(RegistryBuilder()).build()
        assert registry.contains_pattern("casematch.test.v1.Even")
        assert registry.contains_transform("casematch.test.v1.Format")

    def test_core_types(self) -> None:
        registry = register_core_types(RegistryBuilder()).build()
        assert registry.contains_type("int")
        assert registry.contains_type("NoneType")
        assert "str" in registry.type_names()

    def test_introspection_type_urls(self) -> None:
        builder = RegistryBuilder()
        builder.pattern("b.Pattern", lambda cfg: Condition(bool))
        builder.pattern("a.Pattern", lambda cfg: Condition(bool))
        registry = builder.build()

        # Sorted alphabetically
        assert registry.pattern_type_urls() == ["a.Pattern", "b.Pattern"]
        assert registry.transform_type_urls() == []

    def test_empty_registry(self) -> None:
        registry = Registry()
        assert registry.pattern_count == 0
        assert registry.type_names() == []


class TestLoadExpression:
    """Tests for Registry.load_expression()."""

    def _make_registry(self) -> Registry:
        return register(register_core_types(RegistryBuilder())).build()

    def test_simple(self) -> None:
        data = {
            "cases": [
                {
                    "pattern": {"type": "equal_to", "value": "a"},
                    "on_match": {"type": "value", "value": "hit"},
                },
            ]
        }
        expr = self._make_registry().load_expression(parse_match_config(data))
        assert isinstance(expr, MatchExpression)
        assert expr.execute_on("a") == "hit"
        assert expr.execute_non_strict("b") is NOTHING

    def test_strict_failure(self) -> None:
        data = {"cases": [{"pattern": {"type": "none"}, "on_match": {"type": "input"}}]}
        expr = self._make_registry().load_expression(parse_match_config(data))
        with pytest.raises(MatchFailure):
            expr.execute_on(1)

    def test_constant_output(self) -> None:
        expr = self._make_registry().load_expression(
            parse_match_config({"cases": [_any_case({"type": "value", "value": 42})]})
        )
        assert expr.cases[0].producer == Constant(42)
        assert expr.execute_on("anything") == 42

    def test_fallthrough_flags_carried(self) -> None:
        data = {
            "fallthrough": True,
            "cases": [_any_case(), {**_any_case(), "fallthrough": False}, _any_case()],
        }
        expr = self._make_registry().load_expression(parse_match_config(data))
        assert [c.fallthrough for c in expr.cases] == [True, False, True]
        assert expr.execute_with_fallthrough("x") == ("x", "x")

    def test_type_pattern(self) -> None:
        data = {
            "cases": [
                {"pattern": {"type": "type", "name": "str"}, "on_match": {"type": "input"}},
            ]
        }
        expr = self._make_registry().load_expression(parse_match_config(data))
        assert expr.execute_non_strict("s") == Some("s")
        assert expr.execute_non_strict(1) is NOTHING

    def test_transform(self) -> None:
        data = {
            "cases": [
                _any_case(
                    {
                        "type": "transform",
                        "type_url": "casematch.test.v1.Format",
                        "config": {"template": "<{}>"},
                    }
                )
            ]
        }
        expr = self._make_registry().load_expression(parse_match_config(data))
        assert expr.execute_on(3) == "<3>"

    def test_single_child_and_is_unwrapped(self) -> None:
        data = {
            "cases": [
                {
                    "pattern": {"type": "and", "patterns": [{"type": "none"}]},
                    "on_match": {"type": "input"},
                }
            ]
        }
        expr = self._make_registry().load_expression(parse_match_config(data))
        assert expr.execute_non_strict(None) == Some(None)

    def test_empty_and_matches_everything(self) -> None:
        data = {
            "cases": [
                {"pattern": {"type": "and", "patterns": []}, "on_match": {"type": "input"}}
            ]
        }
        expr = self._make_registry().load_expression(parse_match_config(data))
        assert expr.execute_on("x") == "x"


class TestLoadErrors:
    def _load(self, data: dict) -> MatchExpression:
        registry = register(register_core_types(RegistryBuilder())).build()
        return registry.load_expression(parse_match_config(data))

    def test_unknown_pattern_type_url(self) -> None:
        data = {
            "cases": [
                {
                    "pattern": {"type": "custom", "type_url": "nope.Pattern"},
                    "on_match": {"type": "input"},
                }
            ]
        }
        with pytest.raises(UnknownTypeUrlError, match="nope.Pattern") as exc_info:
            self._load(data)
        assert "casematch.test.v1.Even" in exc_info.value.available

    def test_unknown_transform_type_url(self) -> None:
        with pytest.raises(UnknownTypeUrlError, match="unknown transform"):
            self._load({"cases": [_any_case({"type": "transform", "type_url": "nope"})]})

    def test_unknown_type_name(self) -> None:
        data = {
            "cases": [
                {"pattern": {"type": "type", "name": "Decimal"}, "on_match": {"type": "input"}}
            ]
        }
        with pytest.raises(UnknownTypeUrlError, match="unknown type"):
            self._load(data)

    def test_empty_registry_message(self) -> None:
        data = {
            "cases": [
                {"pattern": {"type": "custom", "type_url": "x"}, "on_match": {"type": "input"}}
            ]
        }
        with pytest.raises(UnknownTypeUrlError, match="no patterns are registered"):
            Registry().load_expression(parse_match_config(data))

    def test_factory_error_wrapped(self) -> None:
        data = {
            "cases": [
                _any_case({"type": "transform", "type_url": "casematch.test.v1.Format"}),
            ]
        }
        with pytest.raises(InvalidConfigError, match="template"):
            self._load(data)

    def test_invalid_regex(self) -> None:
        data = {
            "cases": [
                {"pattern": {"type": "regex", "regex": "(open"}, "on_match": {"type": "input"}}
            ]
        }
        with pytest.raises(InvalidConfigError, match="invalid regex"):
            self._load(data)

    def test_regex_too_long(self) -> None:
        data = {
            "cases": [
                {
                    "pattern": {"type": "regex", "regex": "a" * (MAX_REGEX_PATTERN_LENGTH + 1)},
                    "on_match": {"type": "input"},
                }
            ]
        }
        with pytest.raises(PatternTooLongError):
            self._load(data)

    def test_empty_or(self) -> None:
        data = {
            "cases": [{"pattern": {"type": "or", "patterns": []}, "on_match": {"type": "input"}}]
        }
        with pytest.raises(InvalidConfigError, match="at least one"):
            self._load(data)

    def test_too_many_cases(self) -> None:
        with pytest.raises(TooManyCasesError):
            self._load({"cases": [_any_case()] * (MAX_CASES + 1)})

    def test_max_cases_allowed(self) -> None:
        expr = self._load({"cases": [_any_case()] * MAX_CASES})
        assert len(expr.cases) == MAX_CASES

    def test_too_many_patterns(self) -> None:
        children = [{"type": "any"}] * (MAX_PATTERNS_PER_COMPOUND + 1)
        data = {
            "cases": [{"pattern": {"type": "and", "patterns": children}, "on_match": {"type": "input"}}]
        }
        with pytest.raises(TooManyPatternsError):
            self._load(data)

    @pytest.mark.parametrize("kind", ["and", "or"])
    def test_max_patterns_allowed(self, kind: str) -> None:
        children = [{"type": "equal_to", "value": i} for i in range(MAX_PATTERNS_PER_COMPOUND)]
        pattern = {"type": kind, "patterns": children}
        expr = self._load({"cases": [{"pattern": pattern, "on_match": {"type": "input"}}]})
        last = MAX_PATTERNS_PER_COMPOUND - 1
        expected = Some(last) if kind == "or" else NOTHING
        assert expr.execute_non_strict(last) == expected

    def test_wide_compound_under_depth_limit(self) -> None:
        children = [{"type": "not", "pattern": {"type": "equal_to", "value": i}} for i in range(40)]
        pattern = {"type": "and", "patterns": children}
        expr = self._load({"cases": [{"pattern": pattern, "on_match": {"type": "input"}}]})
        assert expr.execute_non_strict(100) == Some(100)
        assert expr.execute_non_strict(3) is NOTHING

    def test_too_deep(self) -> None:
        pattern: dict = {"type": "any"}
        for _ in range(MAX_DEPTH):
            pattern = {"type": "not", "pattern": pattern}
        with pytest.raises(PatternTooDeepError, match="exceeds maximum"):
            self._load({"cases": [{"pattern": pattern, "on_match": {"type": "input"}}]})

    def test_at_max_depth(self) -> None:
        pattern: dict = {"type": "any"}
        for _ in range(MAX_DEPTH - 1):
            pattern = {"type": "not", "pattern": pattern}
        expr = self._load({"cases": [{"pattern": pattern, "on_match": {"type": "input"}}]})
        assert len(expr.cases) == 1

    def test_factory_returning_non_pattern(self) -> None:
        registry = RegistryBuilder().pattern("bad", lambda cfg: "not a pattern").build()
        data = {
            "cases": [{"pattern": {"type": "custom", "type_url": "bad"}, "on_match": {"type": "input"}}]
        }
        with pytest.raises(InvalidConfigError, match="bad factory result must be a pattern"):
            registry.load_expression(parse_match_config(data))

    def test_nested_factory_returning_non_pattern(self) -> None:
        registry = RegistryBuilder().pattern("bad", lambda cfg: 42).build()
        custom = {"type": "custom", "type_url": "bad"}
        data = {
            "cases": [
                {
                    "pattern": {"type": "and", "patterns": [{"type": "any"}, custom]},
                    "on_match": {"type": "input"},
                }
            ]
        }
        with pytest.raises(InvalidConfigError):
            registry.load_expression(parse_match_config(data))

    def test_transform_factory_returning_non_callable(self) -> None:
        registry = RegistryBuilder().transform("bad", lambda cfg: "not callable").build()
        data = {"cases": [_any_case({"type": "transform", "type_url": "bad"})]}
        with pytest.raises(InvalidConfigError, match="callable"):
            registry.load_expression(parse_match_config(data))
