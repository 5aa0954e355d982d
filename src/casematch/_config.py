"""Config types for config-driven expression construction.

The config path turns JSON/YAML-shaped dicts into a runtime expression:
  dict → parse_match_config() → MatchConfig → Registry.load_expression() → MatchExpression

Relationship to runtime types:

| Config type            | Runtime type                                   |
|------------------------|------------------------------------------------|
| MatchConfig            | MatchExpression                                |
| CaseConfig             | Case                                           |
| ComparisonConfig       | EqualTo / LessThan / ... / GreaterOrEqual      |
| AnyConfig, NoneConfig  | AnyValue, NoneValue                            |
| TypeConfig             | TypeOf (type resolved by name in the registry) |
| RegexConfig            | Regex                                          |
| AndConfig, OrConfig    | all_of / any_of                                |
| NotConfig              | Not                                            |
| TypedConfig            | registered pattern or transform factory        |
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from casematch._errors import CaseMatchError

# ═══════════════════════════════════════════════════════════════════════════════
# Config types (frozen dataclasses)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypedConfig:
    """Reference to a registered factory with its configuration.

    - type_url identifies the registered pattern or transform factory
    - config carries the factory-specific configuration payload
    """

    type_url: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ComparisonConfig:
    """Compare the input against a literal (equal_to, less_than, ...)."""

    op: str
    value: Any


@dataclass(frozen=True, slots=True)
class AnyConfig:
    """Always matches."""


@dataclass(frozen=True, slots=True)
class NoneConfig:
    """Matches None."""


@dataclass(frozen=True, slots=True)
class TypeConfig:
    """Matches instances of a type registered under ``name``."""

    name: str


@dataclass(frozen=True, slots=True)
class RegexConfig:
    """Regular expression over string inputs."""

    regex: str
    full: bool = False


@dataclass(frozen=True, slots=True)
class AndConfig:
    """All child patterns must match (logical AND)."""

    patterns: tuple[PatternConfig, ...]


@dataclass(frozen=True, slots=True)
class OrConfig:
    """Any child pattern must match (logical OR)."""

    patterns: tuple[PatternConfig, ...]


@dataclass(frozen=True, slots=True)
class NotConfig:
    """Inverts the inner pattern (logical NOT)."""

    pattern: PatternConfig


@dataclass(frozen=True, slots=True)
class CustomConfig:
    """Pattern built by a registered factory."""

    typed_config: TypedConfig


type PatternConfig = (
    ComparisonConfig
    | AnyConfig
    | NoneConfig
    | TypeConfig
    | RegexConfig
    | AndConfig
    | OrConfig
    | NotConfig
    | CustomConfig
)


@dataclass(frozen=True, slots=True)
class ValueOutputConfig:
    """Return this constant when the case matches."""

    value: Any


@dataclass(frozen=True, slots=True)
class InputOutputConfig:
    """Return the value extracted by the pattern."""


@dataclass(frozen=True, slots=True)
class TransformOutputConfig:
    """Apply a registered transform to the extracted value."""

    typed_config: TypedConfig


type OutputConfig = ValueOutputConfig | InputOutputConfig | TransformOutputConfig


@dataclass(frozen=True, slots=True)
class CaseConfig:
    """Pairs a pattern config with an output config.

    ``fallthrough`` of None means "use the expression default".
    """

    pattern: PatternConfig
    on_match: OutputConfig
    fallthrough: bool | None = None


@dataclass(frozen=True, slots=True)
class MatchConfig:
    """Configuration for a MatchExpression.

    Deserializes from JSON/YAML dicts and can be loaded into a runtime
    expression via Registry.load_expression().
    """

    cases: tuple[CaseConfig, ...]
    fallthrough: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

COMPARISON_OPS = frozenset(
    {"equal_to", "less_than", "less_or_equal", "greater_than", "greater_or_equal"}
)


class ConfigParseError(CaseMatchError):
    """Error parsing a config dict into config types."""


def load_yaml_config(text: str) -> MatchConfig:
    """Parse a YAML document into a MatchConfig.

    Raises:
        ConfigParseError: If the text is not valid YAML or the shape is wrong.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"invalid YAML: {e}"
        raise ConfigParseError(msg) from e
    return parse_match_config(data)


def parse_match_config(data: dict[str, Any]) -> MatchConfig:
    """Parse a dict into a MatchConfig.

    This is the main entry point for config loading.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_cases = data.get("cases")
    if raw_cases is None:
        msg = "missing required field 'cases'"
        raise ConfigParseError(msg)
    if not isinstance(raw_cases, list):
        msg = f"'cases' must be a list, got {type(raw_cases).__name__}"
        raise ConfigParseError(msg)

    fallthrough = data.get("fallthrough", False)
    if not isinstance(fallthrough, bool):
        msg = f"'fallthrough' must be a bool, got {type(fallthrough).__name__}"
        raise ConfigParseError(msg)

    cases = tuple(_parse_case(c) for c in raw_cases)
    return MatchConfig(cases=cases, fallthrough=fallthrough)


def _parse_case(data: dict[str, Any]) -> CaseConfig:
    """Parse a case config dict."""
    if not isinstance(data, dict):
        msg = f"case must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "pattern" not in data:
        msg = "case missing required field 'pattern'"
        raise ConfigParseError(msg)
    if "on_match" not in data:
        msg = "case missing required field 'on_match'"
        raise ConfigParseError(msg)

    fallthrough = data.get("fallthrough")
    if fallthrough is not None and not isinstance(fallthrough, bool):
        msg = f"case 'fallthrough' must be a bool, got {type(fallthrough).__name__}"
        raise ConfigParseError(msg)

    return CaseConfig(
        pattern=_parse_pattern(data["pattern"]),
        on_match=_parse_output(data["on_match"]),
        fallthrough=fallthrough,
    )


def _parse_pattern(data: dict[str, Any]) -> PatternConfig:
    """Parse a pattern config dict.

    Uses 'type' discriminant: equal_to, less_than, less_or_equal,
    greater_than, greater_or_equal, any, none, type, regex, and, or, not,
    custom.
    """
    if not isinstance(data, dict):
        msg = f"pattern must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    pat_type = data.get("type")
    if pat_type is None:
        msg = "pattern missing required field 'type'"
        raise ConfigParseError(msg)

    if pat_type in COMPARISON_OPS:
        if "value" not in data:
            msg = f"{pat_type} pattern missing required field 'value'"
            raise ConfigParseError(msg)
        return ComparisonConfig(op=pat_type, value=data["value"])
    if pat_type == "any":
        return AnyConfig()
    if pat_type == "none":
        return NoneConfig()
    if pat_type == "type":
        name = data.get("name")
        if not isinstance(name, str):
            msg = "type pattern requires a 'name' field (string)"
            raise ConfigParseError(msg)
        return TypeConfig(name=name)
    if pat_type == "regex":
        regex = data.get("regex")
        if not isinstance(regex, str):
            msg = "regex pattern requires a 'regex' field (string)"
            raise ConfigParseError(msg)
        full = data.get("full", False)
        if not isinstance(full, bool):
            msg = f"regex 'full' must be a bool, got {type(full).__name__}"
            raise ConfigParseError(msg)
        return RegexConfig(regex=regex, full=full)
    if pat_type in ("and", "or"):
        children = data.get("patterns", [])
        if not isinstance(children, list):
            msg = f"{pat_type} 'patterns' must be a list, got {type(children).__name__}"
            raise ConfigParseError(msg)
        parsed = tuple(_parse_pattern(p) for p in children)
        return AndConfig(patterns=parsed) if pat_type == "and" else OrConfig(patterns=parsed)
    if pat_type == "not":
        if "pattern" not in data:
            msg = "not pattern missing required field 'pattern'"
            raise ConfigParseError(msg)
        return NotConfig(pattern=_parse_pattern(data["pattern"]))
    if pat_type == "custom":
        return CustomConfig(typed_config=_parse_typed_config(data))

    msg = f"unknown pattern type: {pat_type!r}"
    raise ConfigParseError(msg)


def _parse_output(data: dict[str, Any]) -> OutputConfig:
    """Parse an on_match config dict.

    Uses 'type' discriminant: value, input or transform.
    """
    if not isinstance(data, dict):
        msg = f"on_match must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    out_type = data.get("type")
    if out_type is None:
        msg = "on_match missing required field 'type'"
        raise ConfigParseError(msg)

    if out_type == "value":
        if "value" not in data:
            msg = "value on_match missing required field 'value'"
            raise ConfigParseError(msg)
        return ValueOutputConfig(value=data["value"])
    if out_type == "input":
        return InputOutputConfig()
    if out_type == "transform":
        return TransformOutputConfig(typed_config=_parse_typed_config(data))

    msg = f"unknown on_match type: {out_type!r}"
    raise ConfigParseError(msg)


def _parse_typed_config(data: dict[str, Any]) -> TypedConfig:
    """Parse the type_url/config pair of a custom pattern or transform."""
    if "type_url" not in data:
        msg = "typed config missing required field 'type_url'"
        raise ConfigParseError(msg)

    type_url = data["type_url"]
    if not isinstance(type_url, str):
        msg = f"type_url must be a string, got {type(type_url).__name__}"
        raise ConfigParseError(msg)

    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)

    return TypedConfig(type_url=type_url, config=config)
