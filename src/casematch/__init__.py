"""casematch — composable match expressions for Python.

All public types are exported from this module for flat imports:

    from casematch import MatchExpression, EqualTo, AnyValue

Logging goes through loguru and is disabled for this package by default;
call ``logger.enable("casematch")`` to see debug records.
"""

from loguru import logger

__version__ = "0.1.0"

# Config types — see casematch._config for details
from casematch._config import (
    AndConfig,
    AnyConfig,
    CaseConfig,
    ComparisonConfig,
    ConfigParseError,
    CustomConfig,
    InputOutputConfig,
    MatchConfig,
    NoneConfig,
    NotConfig,
    OrConfig,
    OutputConfig,
    PatternConfig,
    RegexConfig,
    TransformOutputConfig,
    TypeConfig,
    TypedConfig,
    ValueOutputConfig,
    load_yaml_config,
    parse_match_config,
)

# Errors
from casematch._errors import ArgumentError, CaseMatchError, MatchFailure, UnwrapError

# Expressions
from casematch._expression import (
    Case,
    MatchExpression,
    MatchStatement,
    match_expression,
    match_statement,
)

# Option
from casematch._option import NOTHING, Nothing, Option, Some

# Patterns
from casematch._patterns import (
    And,
    AnyValue,
    Condition,
    EqualTo,
    FromFunction,
    GreaterOrEqual,
    GreaterThan,
    LessOrEqual,
    LessThan,
    NoneValue,
    Not,
    Or,
    PatternOps,
    Regex,
    TypeOf,
    all_of,
    any_of,
    pattern_depth,
)

# Registry — see casematch._registry for details
from casematch._registry import (
    MAX_CASES,
    MAX_DEPTH,
    MAX_PATTERNS_PER_COMPOUND,
    MAX_REGEX_PATTERN_LENGTH,
    Constant,
    InvalidConfigError,
    PatternTooDeepError,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    TooManyCasesError,
    TooManyPatternsError,
    UnknownTypeUrlError,
    register_core_types,
)
from casematch._types import Effect, Pattern, Transform

logger.disable("casematch")

__all__ = [
    # Protocols
    "Pattern",
    "Transform",
    "Effect",
    # Option
    "Option",
    "Some",
    "Nothing",
    "NOTHING",
    # Patterns
    "PatternOps",
    "EqualTo",
    "LessThan",
    "LessOrEqual",
    "GreaterThan",
    "GreaterOrEqual",
    "AnyValue",
    "NoneValue",
    "TypeOf",
    "Condition",
    "FromFunction",
    "Regex",
    "And",
    "Or",
    "Not",
    "all_of",
    "any_of",
    "pattern_depth",
    # Expressions
    "Case",
    "MatchExpression",
    "MatchStatement",
    "match_expression",
    "match_statement",
    # Errors
    "CaseMatchError",
    "ArgumentError",
    "MatchFailure",
    "UnwrapError",
    # Config types
    "TypedConfig",
    "ComparisonConfig",
    "AnyConfig",
    "NoneConfig",
    "TypeConfig",
    "RegexConfig",
    "AndConfig",
    "OrConfig",
    "NotConfig",
    "CustomConfig",
    "PatternConfig",
    "ValueOutputConfig",
    "InputOutputConfig",
    "TransformOutputConfig",
    "OutputConfig",
    "CaseConfig",
    "MatchConfig",
    "ConfigParseError",
    "parse_match_config",
    "load_yaml_config",
    # Registry
    "RegistryBuilder",
    "Registry",
    "Constant",
    "register_core_types",
    "UnknownTypeUrlError",
    "InvalidConfigError",
    "TooManyCasesError",
    "TooManyPatternsError",
    "PatternTooLongError",
    "PatternTooDeepError",
    "MAX_CASES",
    "MAX_PATTERNS_PER_COMPOUND",
    "MAX_REGEX_PATTERN_LENGTH",
    "MAX_DEPTH",
]
