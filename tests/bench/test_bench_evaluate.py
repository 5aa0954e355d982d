"""Evaluate benchmarks for casematch.

Measures the hot path: first-match-wins scanning, miss-heavy workloads,
combinator overhead and fallthrough collection.

Run: uv run pytest tests/bench/test_bench_evaluate.py --benchmark-only
"""

from __future__ import annotations

from casematch import (
    NOTHING,
    AnyValue,
    EqualTo,
    GreaterThan,
    LessThan,
    MatchExpression,
    MatchStatement,
    Regex,
    TypeOf,
)

# ── Fixtures ─────────────────────────────────────────────────────────────────


def _make_n_case_expression(n: int, *, include_target: bool) -> MatchExpression[str, str]:
    expr: MatchExpression[str, str] = MatchExpression.create()
    for i in range(n - (1 if include_target else 0)):
        expr = expr.case(EqualTo(f"case_{i}"), lambda _, i=i: f"action_{i}")
    if include_target:
        expr = expr.case(EqualTo("target"), lambda _: "found")
    return expr


# ── Core scenarios ───────────────────────────────────────────────────────────


def test_bench_equal_to_hit_evaluate(benchmark):
    expr = MatchExpression.create().case(EqualTo("/api"), lambda _: "api_backend")
    result = benchmark(expr.execute_on, "/api")
    assert result == "api_backend"


def test_bench_equal_to_miss_evaluate(benchmark):
    expr = MatchExpression.create().case(EqualTo("/api"), lambda _: "api_backend")
    result = benchmark(expr.execute_non_strict, "/other")
    assert result is NOTHING


def test_bench_type_dispatch_evaluate(benchmark):
    expr = (
        MatchExpression.create()
        .case_type(int, lambda n: n + 1)
        .case_type(str, len)
        .case(AnyValue(), lambda _: 0)
    )
    assert benchmark(expr.execute_on, "hello") == 5


def test_bench_regex_hit_evaluate(benchmark):
    expr = MatchExpression.create().case(
        Regex(r"^/api/v\d+/users/(\d+)$"), lambda m: m.group(1)
    )
    assert benchmark(expr.execute_on, "/api/v2/users/12345") == "12345"


# ── Pattern composition ─────────────────────────────────────────────────────


def test_bench_and_all_match_evaluate(benchmark):
    expr = MatchExpression.create().case(
        TypeOf(int) & GreaterThan(0) & LessThan(100), lambda _: "in_range"
    )
    assert benchmark(expr.execute_on, 50) == "in_range"


def test_bench_or_first_matches_evaluate(benchmark):
    expr = MatchExpression.create().case(EqualTo("hello") | EqualTo("world"), str)
    assert benchmark(expr.execute_on, "hello") == "hello"


def test_bench_deferred_provider_evaluate(benchmark):
    limit = {"value": 10}
    expr = MatchExpression.create().case(
        LessThan(provider=lambda: limit["value"]), lambda _: "below"
    )
    assert benchmark(expr.execute_on, 5) == "below"


# ── Scaling: case count ─────────────────────────────────────────────────────


def test_bench_case_count_10_last_match_evaluate(benchmark):
    expr = _make_n_case_expression(10, include_target=True)
    assert benchmark(expr.execute_on, "target") == "found"


def test_bench_case_count_100_last_match_evaluate(benchmark):
    expr = _make_n_case_expression(100, include_target=True)
    assert benchmark(expr.execute_on, "target") == "found"


def test_bench_case_count_200_last_match_evaluate(benchmark):
    expr = _make_n_case_expression(200, include_target=True)
    assert benchmark(expr.execute_on, "target") == "found"


def test_bench_case_count_100_miss_evaluate(benchmark):
    expr = _make_n_case_expression(100, include_target=False)
    assert benchmark(expr.execute_non_strict, "no_match") is NOTHING


# ── Fallthrough ──────────────────────────────────────────────────────────────


def test_bench_fallthrough_10_cases_evaluate(benchmark):
    expr: MatchExpression[int, int] = MatchExpression.create(fallthrough_by_default=True)
    for i in range(10):
        expr = expr.case(GreaterThan(i), lambda n, i=i: n - i)
    assert len(benchmark(expr.execute_with_fallthrough, 20)) == 10


def test_bench_statement_fallthrough_10_cases_evaluate(benchmark):
    stmt: MatchStatement[int] = MatchStatement.create(fallthrough_by_default=True)
    for _ in range(10):
        stmt = stmt.case(AnyValue(), lambda _: None)
    assert benchmark(stmt.execute_with_fallthrough, 1) == 10
