"""CLI commands for parametric sweeps and envelope maps."""

from __future__ import annotations

import json
from pathlib import Path

import click
import numpy as np
from matplotlib.figure import Figure
from rich.console import Console
from rich.table import Table

from tfan.cli.options import checked_inputs, engine_options
from tfan.core.config import DesignState, _NumpyEncoder, save_design_json
from tfan.optimization.sweeps import (
    SweepResult,
    flight_envelope,
    sweep_bypass_ratio,
    sweep_overall_pressure_ratio,
    sweep_turbine_inlet_temperature,
)
from tfan.reports.plots import envelope_figure, save_figure, sweep_figure


@click.group("sweep")
@click.pass_context
def sweep(ctx: click.Context) -> None:
    """Parametric sweeps and flight-envelope maps."""
    pass


def _grid(start: float | None, stop: float | None, step: float | None) -> np.ndarray | None:
    if start is None and stop is None and step is None:
        return None
    if start is None or stop is None or step is None:
        raise click.UsageError("--start, --stop and --step must be given together.")
    if step <= 0:
        raise click.BadParameter("step must be positive", param_hint="--step")
    return np.arange(start, stop + 0.5 * step, step)


def _grid_options(func):
    func = click.option("--step", type=float, default=None, help="Grid step.")(func)
    func = click.option("--stop", type=float, default=None, help="Last grid value.")(func)
    func = click.option("--start", type=float, default=None, help="First grid value.")(func)
    return func


def _print_sweep(console: Console, result: SweepResult, x_label: str, every: int) -> None:
    table = Table(title=f"Sweep: {x_label}")
    table.add_column(x_label, style="cyan", justify="right")
    table.add_column("Fs [N·s/kg]", style="green", justify="right")
    table.add_column("SFC [kg/(N·h)]", style="green", justify="right")
    table.add_column("η_p", justify="right")
    table.add_column("Tt3 [K]", style="dim", justify="right")
    for i, p in enumerate(result.points):
        if i % every and i != len(result.points) - 1:
            continue
        table.add_row(f"{p.x:g}", f"{p.Fs:.1f}", f"{p.SFC:.5f}", f"{p.eta_p:.4f}", f"{p.Tt3:.1f}")
    console.print(table)

    if result.minimum is not None:
        console.print(f"Minimum SFC: [bold]{result.minimum.SFC:.5f}[/bold] at {x_label} = {result.minimum.x:g}")
    else:
        console.print("[yellow]No point with positive thrust.[/yellow]")
    if result.current is not None:
        console.print(f"Current design: {x_label} = {result.current.x:g}, SFC = {result.current.SFC:.5f}")


def _save_sweep(console: Console, result: SweepResult, output: str | None) -> None:
    if not output:
        return
    with open(output, "w") as f:
        json.dump(result.to_dict(), f, indent=2, cls=_NumpyEncoder)
    console.print(f"\n[dim]Saved to {output}[/dim]")


def _save_plot(console: Console, fig: Figure, path: str | Path) -> None:
    save_figure(fig, path)
    console.print(f"[dim]Chart saved to {path}[/dim]")


@sweep.command("opr")
@engine_options
@_grid_options
@click.option("--every", type=int, default=5, show_default=True, help="Print every n-th point.")
@click.option("--plot", type=click.Path(), default=None, help="Save a chart (PNG, SVG or PDF).")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file (JSON).")
@click.pass_context
def sweep_opr(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    start: float | None,
    stop: float | None,
    step: float | None,
    every: int,
    plot: str | None,
    output: str | None,
) -> None:
    """SFC against overall pressure ratio (fan ratio held)."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)
    result = sweep_overall_pressure_ratio(inputs, _grid(start, stop, step))
    _print_sweep(console, result, "OPR", max(every, 1))
    _save_sweep(console, result, output)
    if plot:
        _save_plot(console, sweep_figure(result), plot)


@sweep.command("bypass")
@engine_options
@_grid_options
@click.option("--every", type=int, default=2, show_default=True, help="Print every n-th point.")
@click.option("--plot", type=click.Path(), default=None, help="Save a chart (PNG, SVG or PDF).")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file (JSON).")
@click.pass_context
def sweep_bypass(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    start: float | None,
    stop: float | None,
    step: float | None,
    every: int,
    plot: str | None,
    output: str | None,
) -> None:
    """SFC and propulsive efficiency against bypass ratio."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)
    result = sweep_bypass_ratio(inputs, _grid(start, stop, step))
    _print_sweep(console, result, "B", max(every, 1))
    _save_sweep(console, result, output)
    if plot:
        _save_plot(console, sweep_figure(result), plot)


@sweep.command("tt4")
@engine_options
@_grid_options
@click.option("--every", type=int, default=2, show_default=True, help="Print every n-th point.")
@click.option("--plot", type=click.Path(), default=None, help="Save a chart (PNG, SVG or PDF).")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file (JSON).")
@click.pass_context
def sweep_tt4(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    start: float | None,
    stop: float | None,
    step: float | None,
    every: int,
    plot: str | None,
    output: str | None,
) -> None:
    """SFC and specific thrust against turbine-inlet temperature."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)
    result = sweep_turbine_inlet_temperature(inputs, _grid(start, stop, step))
    _print_sweep(console, result, "Tt4 [K]", max(every, 1))
    _save_sweep(console, result, output)
    if plot:
        _save_plot(console, sweep_figure(result), plot)


@sweep.command("envelope")
@engine_options
@click.option("--max-mach", type=float, default=3.5, show_default=True, help="Upper Mach limit.")
@click.option("--max-alt", type=float, default=20.0, show_default=True, help="Upper altitude [km].")
@click.option("--mach-steps", type=click.IntRange(min=1), default=60, show_default=True, help="Mach grid points.")
@click.option("--alt-steps", type=click.IntRange(min=1), default=50, show_default=True, help="Altitude grid points.")
@click.option("--workers", type=int, default=None, help="Worker processes (0 = all CPUs).")
@click.option(
    "--plot",
    type=click.Path(),
    default=None,
    help="Save heat maps; writes <stem>_sfc and <stem>_thrust with the given suffix.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Output design file (JSON); grids go to a companion .npz.",
)
@click.pass_context
def sweep_envelope(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    max_mach: float,
    max_alt: float,
    mach_steps: int,
    alt_steps: int,
    workers: int | None,
    plot: str | None,
    output: str | None,
) -> None:
    """Map SFC and net thrust over altitude and Mach."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)

    env = flight_envelope(
        inputs,
        altitudes=np.linspace(0.0, max_alt, alt_steps),
        machs=np.linspace(0.0, max_mach, mach_steps),
        max_workers=workers,
    )
    summary = env.summary()

    table = Table(title=f"Flight Envelope ({alt_steps} × {mach_steps})")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Unit", style="dim")
    table.add_row("Thermally valid cells", f"{summary['thermally_valid']} / {summary['cells']}", "—")
    table.add_row("SFC cells", str(summary["sfc_cells"]), "—")
    for key, unit in (("sfc_min", "kg/(N·h)"), ("sfc_max", "kg/(N·h)"), ("thrust_min", "kN"), ("thrust_max", "kN")):
        val = summary[key]
        table.add_row(key.replace("_", " "), "—" if val is None else f"{val:.4f}", unit)
    console.print(table)

    if output:
        state = DesignState(inputs=inputs.to_dict())
        state.sweeps["envelope"] = summary
        state._array_data = env.arrays()
        save_design_json(state, output)
        console.print(f"\n[dim]Saved to {output} (+ {Path(output).with_suffix('.npz').name})[/dim]")

    if plot:
        target = Path(plot)
        for metric in ("sfc", "thrust"):
            fig = envelope_figure(env, metric, current=(inputs.mach, inputs.altitude))
            _save_plot(console, fig, target.with_name(f"{target.stem}_{metric}{target.suffix or '.png'}"))
