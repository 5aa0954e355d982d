"""Type registry for config-driven expression construction.

The registry enables generic config loading: JSON/YAML config → compiled
MatchExpression without hand-written builder code.

- RegistryBuilder → .build() → Registry (immutable)
- Factories are plain callables: (config: dict) → Pattern or transform
- Named types back the ``type`` pattern (``{"type": "type", "name": "int"}``)
- load_expression() walks the config tree and constructs runtime types

Example::

    builder = register_core_types(RegistryBuilder())
    builder.pattern("acme.v1.Even", lambda cfg: Condition(lambda n: n % 2 == 0))
    registry = builder.build()

    config = parse_match_config(data)
    expression = registry.load_expression(config)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType, NoneType
from typing import TYPE_CHECKING, Any

from loguru import logger

from casematch._config import (
    AndConfig,
    AnyConfig,
    ComparisonConfig,
    CustomConfig,
    InputOutputConfig,
    NoneConfig,
    NotConfig,
    OrConfig,
    RegexConfig,
    TransformOutputConfig,
    TypeConfig,
    ValueOutputConfig,
)
from casematch._errors import ArgumentError, CaseMatchError
from casematch._expression import MatchExpression
from casematch._patterns import (
    AnyValue,
    EqualTo,
    GreaterOrEqual,
    GreaterThan,
    LessOrEqual,
    LessThan,
    NoneValue,
    Not,
    Regex,
    TypeOf,
    _ensure_pattern,
    all_of,
    any_of,
    pattern_depth,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from casematch._config import CaseConfig, MatchConfig, OutputConfig, PatternConfig
    from casematch._types import Pattern

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_CASES = 256
MAX_PATTERNS_PER_COMPOUND = 256
MAX_REGEX_PATTERN_LENGTH = 4096
MAX_DEPTH = 32

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownTypeUrlError(CaseMatchError):
    """A type_url or type name was not found in the registry."""

    def __init__(self, type_url: str, registry: str, available: list[str]) -> None:
        self.type_url = type_url
        self.registry = registry
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown {registry}: {type_url!r} (registered: {registered})"
        else:
            msg = f"unknown {registry}: {type_url!r} (no {registry}s are registered)"
        super().__init__(msg)


class InvalidConfigError(CaseMatchError):
    """A config payload was malformed or semantically invalid."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class TooManyCasesError(CaseMatchError):
    """Config has too many cases (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many cases: {count} exceeds maximum {max_}")


class TooManyPatternsError(CaseMatchError):
    """Compound pattern has too many children (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many patterns in compound: {count} exceeds maximum {max_}")


class PatternTooLongError(CaseMatchError):
    """A regex pattern exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(f"pattern length {length} exceeds maximum {max_}")


class PatternTooDeepError(CaseMatchError):
    """A pattern tree nests deeper than the depth limit."""

    def __init__(self, depth: int, max_: int) -> None:
        self.depth = depth
        self.max = max_
        super().__init__(f"pattern depth {depth} exceeds maximum allowed depth {max_}")


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type PatternFactory = Callable[[dict[str, Any]], Pattern[Any, Any]]
type TransformFactory = Callable[[dict[str, Any]], Callable[[Any], Any]]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register pattern factories, transform factories and named types, then
    call build() to produce an immutable Registry.
    """

    def __init__(self) -> None:
        self._pattern_factories: dict[str, PatternFactory] = {}
        self._transform_factories: dict[str, TransformFactory] = {}
        self._types: dict[str, type] = {}

    def pattern(self, type_url: str, factory: PatternFactory) -> RegistryBuilder:
        """Register a pattern factory with a type URL."""
        self._pattern_factories[type_url] = factory
        return self

    def transform(self, type_url: str, factory: TransformFactory) -> RegistryBuilder:
        """Register a transform factory with a type URL."""
        self._transform_factories[type_url] = factory
        return self

    def named_type(self, name: str, cls: type) -> RegistryBuilder:
        """Register a named type for ``type`` patterns."""
        self._types[name] = cls
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        return Registry(
            _pattern_factories=MappingProxyType(dict(self._pattern_factories)),
            _transform_factories=MappingProxyType(dict(self._transform_factories)),
            _types=MappingProxyType(dict(self._types)),
        )


_CORE_TYPES: dict[str, type] = {
    "bool": bool,
    "bytes": bytes,
    "dict": dict,
    "float": float,
    "int": int,
    "list": list,
    "NoneType": NoneType,
    "str": str,
    "tuple": tuple,
}


def register_core_types(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the Python builtin types under their own names."""
    for name, cls in _CORE_TYPES.items():
        builder.named_type(name, cls)
    return builder


# ═══════════════════════════════════════════════════════════════════════════════
# Output producers built from config
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Constant:
    """Output producer that ignores the extracted value."""

    value: Any

    def __call__(self, _: Any) -> Any:
        return self.value


def _identity(value: Any) -> Any:
    return value


_COMPARISONS: dict[str, type] = {
    "equal_to": EqualTo,
    "less_than": LessThan,
    "less_or_equal": LessOrEqual,
    "greater_than": GreaterThan,
    "greater_or_equal": GreaterOrEqual,
}

# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of pattern factories, transform factories and types.

    Constructed via RegistryBuilder. Use load_expression() to compile
    config into a runtime MatchExpression.
    """

    _pattern_factories: MappingProxyType[str, PatternFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _transform_factories: MappingProxyType[str, TransformFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _types: MappingProxyType[str, type] = field(default_factory=lambda: MappingProxyType({}))

    def load_expression(self, config: MatchConfig) -> MatchExpression[Any, Any]:
        """Load a MatchExpression from configuration.

        Raises:
            UnknownTypeUrlError: pattern, transform or type not registered
            InvalidConfigError: config payload malformed
            TooManyCasesError: too many cases
            TooManyPatternsError: too many compound pattern children
            PatternTooLongError: regex exceeds length limit
            PatternTooDeepError: pattern tree exceeds depth limit
        """
        if len(config.cases) > MAX_CASES:
            raise TooManyCasesError(len(config.cases), MAX_CASES)

        expression: MatchExpression[Any, Any] = MatchExpression.create(config.fallthrough)
        for case in config.cases:
            expression = self._load_case(expression, case)

        logger.debug("loaded {}", expression)
        return expression

    @property
    def pattern_count(self) -> int:
        """Number of registered pattern factories."""
        return len(self._pattern_factories)

    @property
    def transform_count(self) -> int:
        """Number of registered transform factories."""
        return len(self._transform_factories)

    def contains_pattern(self, type_url: str) -> bool:
        return type_url in self._pattern_factories

    def contains_transform(self, type_url: str) -> bool:
        return type_url in self._transform_factories

    def contains_type(self, name: str) -> bool:
        return name in self._types

    def pattern_type_urls(self) -> list[str]:
        """Return all registered pattern type URLs (sorted)."""
        return sorted(self._pattern_factories.keys())

    def transform_type_urls(self) -> list[str]:
        """Return all registered transform type URLs (sorted)."""
        return sorted(self._transform_factories.keys())

    def type_names(self) -> list[str]:
        """Return all registered type names (sorted)."""
        return sorted(self._types.keys())

    # ── Private loading methods ────────────────────────────────────────────

    def _load_case(
        self, expression: MatchExpression[Any, Any], config: CaseConfig
    ) -> MatchExpression[Any, Any]:
        pattern = self._load_pattern(config.pattern)
        depth = pattern_depth(pattern)
        if depth > MAX_DEPTH:
            raise PatternTooDeepError(depth, MAX_DEPTH)
        producer = self._load_output(config.on_match)
        try:
            return expression.case(pattern, producer, fallthrough=config.fallthrough)
        except ArgumentError as e:
            raise InvalidConfigError(str(e)) from e

    def _load_pattern(self, config: PatternConfig) -> Pattern[Any, Any]:
        match config:
            case ComparisonConfig(op=op, value=value):
                return _COMPARISONS[op](value)
            case AnyConfig():
                return AnyValue()
            case NoneConfig():
                return NoneValue()
            case TypeConfig(name=name):
                cls = self._types.get(name)
                if cls is None:
                    raise UnknownTypeUrlError(name, "type", list(self._types.keys()))
                return TypeOf(cls)
            case RegexConfig(regex=regex, full=full):
                if len(regex) > MAX_REGEX_PATTERN_LENGTH:
                    raise PatternTooLongError(len(regex), MAX_REGEX_PATTERN_LENGTH)
                try:
                    return Regex(regex, full=full)
                except CaseMatchError as e:
                    raise InvalidConfigError(str(e)) from e
            case AndConfig(patterns=children):
                return all_of(*self._load_children(children))
            case OrConfig(patterns=children):
                if not children:
                    msg = "or pattern requires at least one child pattern"
                    raise InvalidConfigError(msg)
                return any_of(*self._load_children(children))
            case NotConfig(pattern=inner):
                return Not(self._load_pattern(inner))
            case CustomConfig(typed_config=tc):
                factory = self._pattern_factories.get(tc.type_url)
                if factory is None:
                    raise UnknownTypeUrlError(
                        tc.type_url, "pattern", list(self._pattern_factories.keys())
                    )
                try:
                    pattern = factory(tc.config)
                    _ensure_pattern(pattern, f"{tc.type_url} factory result")
                except Exception as e:
                    raise InvalidConfigError(str(e)) from e
                return pattern
            case _:  # pragma: no cover
                msg = f"unknown pattern config type: {type(config).__name__}"
                raise InvalidConfigError(msg)

    def _load_children(self, children: tuple[PatternConfig, ...]) -> list[Pattern[Any, Any]]:
        if len(children) > MAX_PATTERNS_PER_COMPOUND:
            raise TooManyPatternsError(len(children), MAX_PATTERNS_PER_COMPOUND)
        return [self._load_pattern(p) for p in children]

    def _load_output(self, config: OutputConfig) -> Callable[[Any], Any]:
        match config:
            case ValueOutputConfig(value=value):
                return Constant(value)
            case InputOutputConfig():
                return _identity
            case TransformOutputConfig(typed_config=tc):
                factory = self._transform_factories.get(tc.type_url)
                if factory is None:
                    raise UnknownTypeUrlError(
                        tc.type_url, "transform", list(self._transform_factories.keys())
                    )
                try:
                    return factory(tc.config)
                except Exception as e:
                    raise InvalidConfigError(str(e)) from e
            case _:  # pragma: no cover
                msg = f"unknown on_match config type: {type(config).__name__}"
                raise InvalidConfigError(msg)
