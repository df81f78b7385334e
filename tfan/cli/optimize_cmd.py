"""CLI commands for cycle design optimisation."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from tfan.cli.options import checked_inputs, engine_options
from tfan.core.config import EngineInputs
from tfan.cycle.solver import RESULT_KEYS
from tfan.optimization.optimizer import (
    Constraint,
    CycleOptimizer,
    DesignVariable,
    Objective,
    engine_eval_function,
)

_DEFAULT_VARIABLES = (("hpc_pressure_ratio", 2.0, 15.0), ("bypass_ratio", 0.0, 2.0))


def _build_optimizer(
    inputs: EngineInputs,
    variables: tuple[tuple[str, float, float], ...],
    objective: str,
    maximize: bool,
    min_fs: float | None,
) -> CycleOptimizer:
    opt = CycleOptimizer(result_keys=RESULT_KEYS)
    try:
        for name, lo, hi in variables or _DEFAULT_VARIABLES:
            initial = min(max(float(getattr(inputs, name, 0.5 * (lo + hi))), lo), hi)
            opt.add_variable(DesignVariable(name, lo, hi, initial=initial))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--var") from exc
    try:
        opt.add_objective(Objective(objective, direction="maximize" if maximize else "minimize"))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--objective") from exc
    opt.add_constraint(Constraint("is_valid", lower=1.0))
    if min_fs is not None:
        opt.add_constraint(Constraint("Fs", lower=min_fs))
    return opt


@click.group("optimize")
@click.pass_context
def optimize(ctx: click.Context) -> None:
    """Design optimisation commands."""
    pass


@optimize.command("cycle")
@engine_options
@click.option(
    "--var",
    "variables",
    type=(str, float, float),
    multiple=True,
    metavar="NAME LOW HIGH",
    help="Design variable and bounds (default: hpc_pressure_ratio 2-15, bypass_ratio 0-2).",
)
@click.option(
    "--objective",
    type=click.Choice(RESULT_KEYS),
    default="SFC",
    show_default=True,
    help="Result key to optimise.",
)
@click.option("--maximize", is_flag=True, help="Maximise the objective instead of minimising.")
@click.option("--min-fs", type=float, default=None, help="Minimum specific thrust [N·s/kg].")
@click.option(
    "--method",
    type=click.Choice(["nelder-mead", "powell", "l-bfgs-b", "differential_evolution"]),
    default="differential_evolution",
    show_default=True,
    help="Optimisation method.",
)
@click.option("--max-iter", type=int, default=50, show_default=True, help="Maximum iterations.")
@click.option("--seed", type=int, default=42, show_default=True, help="Random seed.")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file (JSON).")
@click.pass_context
def optimize_cycle(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    variables: tuple[tuple[str, float, float], ...],
    objective: str,
    maximize: bool,
    min_fs: float | None,
    method: str,
    max_iter: int,
    seed: int,
    output: str | None,
) -> None:
    """Optimise cycle parameters for one performance figure."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)
    opt = _build_optimizer(inputs, variables, objective, maximize, min_fs)

    result = opt.optimize(engine_eval_function(inputs), method=method, max_iter=max_iter, seed=seed)

    console.print("\n[bold]TFAN — Cycle Optimisation[/bold]\n")
    if result.best is None:
        console.print("[red]No design points evaluated.[/red]")
        return

    table = Table(title="Optimal Design Point")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for name, val in result.best.variables.items():
        table.add_row(name, f"{val:.4f}")
    for key in ("Fs", "SFC", "eta_p", "Tt3"):
        style = "bold" if key == objective else ""
        val = result.best.result.get(key)
        if val is not None:
            table.add_row(f"[{style}]{key}[/{style}]" if style else key, f"{val:.5g}")
    console.print(table)

    status = "[green]feasible[/green]" if result.best.feasible else "[red]infeasible[/red]"
    console.print(f"\n{status}, {result.n_evaluations} evaluations, converged: {result.converged}")

    if output:
        data = {
            "variables": result.best.variables,
            "result": result.best.result,
            "feasible": result.best.feasible,
            "n_evaluations": result.n_evaluations,
            "converged": result.converged,
        }
        with open(output, "w") as f:
            json.dump(data, f, indent=2)
        console.print(f"[dim]Saved to {output}[/dim]")


@optimize.command("sensitivity")
@engine_options
@click.option(
    "--var",
    "variables",
    type=(str, float, float),
    multiple=True,
    metavar="NAME LOW HIGH",
    help="Variable and range (default: hpc_pressure_ratio 2-15, bypass_ratio 0-2).",
)
@click.option(
    "--objective",
    "objectives",
    type=click.Choice(RESULT_KEYS),
    multiple=True,
    default=("Fs", "SFC"),
    show_default=True,
    help="Result keys to report.",
)
@click.option("--perturbation", type=float, default=0.05, show_default=True, help="Fraction of range.")
@click.pass_context
def optimize_sensitivity(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    variables: tuple[tuple[str, float, float], ...],
    objectives: tuple[str, ...],
    perturbation: float,
) -> None:
    """One-at-a-time sensitivity of performance to cycle parameters."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)
    opt = _build_optimizer(inputs, variables, objectives[0], False, None)
    for key in objectives[1:]:
        opt.add_objective(Objective(key))

    sens = opt.sensitivity(engine_eval_function(inputs), perturbation=perturbation)

    table = Table(title="Normalised Sensitivity (Δf/f) / (Δx/range)")
    table.add_column("Variable", style="cyan")
    for key in objectives:
        table.add_column(key, justify="right", style="green")
    for var, row in sens.items():
        table.add_row(var, *(f"{row.get(k, 0.0):+.4f}" for k in objectives))
    console.print(table)
