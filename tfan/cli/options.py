"""Options shared by commands that take an engine configuration."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import click
from rich.console import Console

from tfan.core.config import EngineInputs, load_inputs_json, parse_assignment
from tfan.utils.validation import ValidationResult, validate_engine_inputs


def engine_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--config`` and repeatable ``--set key=value`` to a command."""
    func = click.option(
        "--set",
        "assignments",
        multiple=True,
        metavar="KEY=VALUE",
        help="Override one engine input, e.g. --set tt4=1700 --set afterburner_on=off --set \"altitude=36089 ft\".",
    )(func)
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Engine inputs JSON (flat mapping or design file).",
    )(func)
    return func


def build_inputs(config_path: str | None, assignments: tuple[str, ...]) -> EngineInputs:
    """Resolve defaults ← config file ← ``--set`` assignments.

    Raises:
        click.BadParameter: For an unreadable config or a bad assignment.
    """
    try:
        inputs = load_inputs_json(config_path) if config_path else EngineInputs()
    except (ValueError, TypeError) as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc

    changes: dict[str, Any] = {}
    for expr in assignments:
        try:
            key, value = parse_assignment(expr)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--set") from exc
        changes[key] = value
    return replace(inputs, **changes) if changes else inputs


def print_validation(console: Console, checks: ValidationResult) -> None:
    for msg in checks.errors:
        console.print(f"[red]Error:[/red] {msg.message}")
    for msg in checks.warnings:
        console.print(f"[yellow]Warning:[/yellow] {msg.message}")


def checked_inputs(ctx: click.Context, config_path: str | None, assignments: tuple[str, ...]) -> EngineInputs:
    """Build inputs, print validation findings and abort on errors."""
    console: Console = ctx.obj.get("console", Console())
    inputs = build_inputs(config_path, assignments)
    checks = validate_engine_inputs(inputs)
    print_validation(console, checks)
    if not checks.is_valid:
        raise click.ClickException("Engine inputs are invalid; not solving.")
    return inputs
