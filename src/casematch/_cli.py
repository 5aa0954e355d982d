"""Command-line entry point: evaluate YAML-configured match expressions.

Usage:
    casematch eval rules.yaml 1 2 hello [--fallthrough] [--non-strict] [--verbose]
    casematch check rules.yaml

Each VALUE is parsed as a YAML scalar, so ``5`` is an int, ``2.5`` a float
and ``hello`` a string.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click
import yaml
from loguru import logger

from casematch._config import load_yaml_config
from casematch._errors import CaseMatchError
from casematch._registry import RegistryBuilder, register_core_types

NO_MATCH = "<no match>"


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    logger.enable("casematch")


def _load(config_file: Path) -> Any:
    registry = register_core_types(RegistryBuilder()).build()
    config = load_yaml_config(config_file.read_text())
    return registry.load_expression(config)


def _parse_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Evaluate match expressions described in YAML."""
    _configure_logging(verbose)


@main.command("eval")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("values", nargs=-1)
@click.option("--fallthrough", is_flag=True, help="Print every result reached by fallthrough")
@click.option("--non-strict", is_flag=True, help=f"Print {NO_MATCH} instead of failing")
def eval_command(
    config_file: Path, values: tuple[str, ...], fallthrough: bool, non_strict: bool
) -> None:
    """Evaluate CONFIG_FILE against each VALUE, one output line per value."""
    try:
        expression = _load(config_file)
    except CaseMatchError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    for raw in values:
        value = _parse_value(raw)
        logger.debug("evaluating {!r}", value)
        try:
            if fallthrough:
                if non_strict:
                    results = expression.execute_non_strict_with_fallthrough(value)
                else:
                    results = expression.execute_with_fallthrough(value)
                line = ", ".join(str(r) for r in results) if results else NO_MATCH
            elif non_strict:
                line = str(expression.execute_non_strict(value).value_or(NO_MATCH))
            else:
                line = str(expression.execute_on(value))
        except CaseMatchError as e:
            click.echo(f"error: {e}", err=True)
            sys.exit(1)
        click.echo(line)


@main.command("check")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check_command(config_file: Path) -> None:
    """Validate CONFIG_FILE and report how many cases it defines."""
    try:
        expression = _load(config_file)
    except CaseMatchError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)
    click.echo(f"{config_file}: {len(expression.cases)} cases")


if __name__ == "__main__":
    main()
