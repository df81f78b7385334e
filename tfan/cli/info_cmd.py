"""CLI commands for inspecting defaults and design files."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from tfan.core.config import EngineInputs, load_design_json, save_inputs_json
from tfan.cycle.stations import StationId


@click.group("info")
@click.pass_context
def info(ctx: click.Context) -> None:
    """Inspect default inputs and design files."""
    pass


@info.command("defaults")
@click.option("--output", "-o", type=click.Path(), default=None, help="Write the defaults as a config JSON.")
@click.pass_context
def info_defaults(ctx: click.Context, output: str | None) -> None:
    """List default engine inputs (the textbook reference case)."""
    console: Console = ctx.obj.get("console", Console())
    defaults = EngineInputs()

    table = Table(title="Default Engine Inputs")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for key, value in defaults.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    if output:
        save_inputs_json(defaults, output)
        console.print(f"\n[dim]Saved to {output}[/dim]")


@info.command("design")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def info_design(ctx: click.Context, path: str) -> None:
    """Display a summary of a design file."""
    console: Console = ctx.obj.get("console", Console())
    try:
        state = load_design_json(path)
    except (ValueError, TypeError) as exc:
        raise click.ClickException(f"Cannot read design file: {exc}") from exc

    tree = Tree(f"[bold]{state.meta.name}[/bold]")
    meta = tree.add("[cyan]Metadata[/cyan]")
    meta.add(f"Author: {state.meta.author or '—'}")
    meta.add(f"Version: {state.meta.version}")
    meta.add(f"Modified: {state.meta.modified or '—'}")

    inputs = state.engine_inputs()
    op = tree.add("[cyan]Operating Point[/cyan]")
    op.add(f"Altitude: {inputs.altitude:g} km")
    op.add(f"Mach: {inputs.mach:g}")
    op.add(f"Bypass ratio: {inputs.bypass_ratio:g}")
    op.add(f"OPR: {inputs.fan_pressure_ratio * inputs.hpc_pressure_ratio:.2f}")
    op.add(f"Tt4: {inputs.tt4:g} K")
    op.add(f"Afterburner: {'on' if inputs.afterburner_on else 'off'}")

    if state.performance:
        perf = tree.add("[cyan]Performance[/cyan]")
        for k, v in state.performance.items():
            perf.add(f"{k}: {v:.5g}" if isinstance(v, float) else f"{k}: {v}")

    if state.stations:
        st = tree.add("[cyan]Stations[/cyan]")
        for sid in StationId:
            data = state.stations.get(sid.value)
            if data:
                st.add(f"{sid.value} {sid.label}: Pt {data['Pt'] / 1e3:.2f} kPa, Tt {data['Tt']:.1f} K")

    if state.sweeps:
        sw = tree.add("[cyan]Sweeps[/cyan]")
        for k in state.sweeps:
            sw.add(k)

    if state._array_data:
        arr = tree.add("[cyan]Arrays[/cyan]")
        for k, v in state._array_data.items():
            arr.add(f"{k}: shape {v.shape}")

    console.print(tree)
