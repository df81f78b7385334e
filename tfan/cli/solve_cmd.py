"""CLI command for a single cycle solve."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from tfan.cli.options import checked_inputs, engine_options, print_validation
from tfan.core.config import DesignState, EngineInputs, ProjectMeta, save_design_json
from tfan.cycle.solver import EngineResult, solve_engine
from tfan.cycle.stations import StationId
from tfan.reports.summary import reference_deltas
from tfan.utils.units import UNIT_SYSTEMS, sfc_from_si, thrust_from_si
from tfan.utils.validation import check_result


def _performance_table(result: EngineResult, units: str) -> Table:
    table = Table(title="Performance")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Unit", style="dim")

    if units == "imperial":
        thrust = thrust_from_si(result.net_thrust, "lbf")
        sfc = sfc_from_si(result.SFC, "lb/(lbf*hour)")
        table.add_row("Net Thrust", f"{thrust:,.0f}", "lbf")
        table.add_row("SFC", f"{sfc:.4f}", "lb/(lbf·h)")
    else:
        table.add_row("Net Thrust", f"{result.net_thrust / 1e3:.2f}", "kN")
        table.add_row("SFC", f"{result.SFC:.5f}", "kg/(N·h)")

    table.add_row("Specific Thrust", f"{result.Fs:.2f}", "N·s/kg")
    table.add_row("Actual Mass Flow", f"{result.mass_flow_actual:.2f}", "kg/s")
    table.add_row("Fuel Fraction", f"{result.fuel_fraction:.5f}", "—")
    table.add_row("Exit Velocity V9", f"{result.V9:.1f}", "m/s")
    table.add_row("Overall Pressure Ratio", f"{result.pi_total:.2f}", "—")
    table.add_row("Propulsive Efficiency", f"{result.eta_p:.4f}", "—")
    return table


def _station_table(result: EngineResult) -> Table:
    table = Table(title="Station States")
    table.add_column("Station", style="cyan")
    table.add_column("Name")
    table.add_column("Pt [kPa]", justify="right", style="green")
    table.add_column("Tt [K]", justify="right", style="green")
    table.add_column("m/m_core", justify="right")
    table.add_column("f", justify="right", style="dim")

    for sid in StationId:
        st = result.stations[sid]
        table.add_row(
            sid.value,
            sid.label,
            f"{st.Pt / 1e3:.2f}",
            f"{st.Tt:.1f}",
            f"{st.m_rel:.4f}" if st.m_rel is not None else "—",
            f"{st.f:.5f}" if st.f is not None else "—",
        )
    return table


def _reference_table(inputs: EngineInputs, result: EngineResult) -> Table:
    mode = "wet" if inputs.afterburner_on else "dry"
    table = Table(title=f"Reference Comparison ({mode})")
    table.add_column("Quantity", style="cyan")
    table.add_column("Computed", justify="right", style="green")
    table.add_column("Reference", justify="right")
    table.add_column("Δ", justify="right")
    table.add_column("Δ %", justify="right", style="dim")
    for d in reference_deltas(inputs, result):
        table.add_row(d.name, f"{d.computed:.4f}", f"{d.reference:.4f}", f"{d.delta:+.4f}", f"{d.percent:+.2f}")
    return table


@click.command("solve")
@engine_options
@click.option(
    "--units",
    type=click.Choice(UNIT_SYSTEMS, case_sensitive=False),
    default="si",
    show_default=True,
    help="Display units for thrust and SFC.",
)
@click.option("--stations/--no-stations", default=True, show_default=True, help="Show the station table.")
@click.option("--name", default="Untitled", help="Design name stored in the output file.")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output design file (JSON).")
@click.pass_context
def solve(
    ctx: click.Context,
    config_path: str | None,
    assignments: tuple[str, ...],
    units: str,
    stations: bool,
    name: str,
    output: str | None,
) -> None:
    """Solve the engine cycle at one operating point."""
    console: Console = ctx.obj.get("console", Console())
    inputs = checked_inputs(ctx, config_path, assignments)

    result = solve_engine(inputs)

    mode = "afterburner on" if inputs.afterburner_on else "dry"
    console.print(
        f"\n[bold]TFAN — Cycle Solve[/bold] "
        f"(H = {inputs.altitude:g} km, Ma = {inputs.mach:g}, {mode})\n"
    )
    console.print(_performance_table(result, units.lower()))
    if stations:
        console.print(_station_table(result))
    console.print(_reference_table(inputs, result))
    print_validation(console, check_result(inputs, result))

    if output:
        state = DesignState(
            meta=ProjectMeta(name=name),
            inputs=inputs.to_dict(),
            performance=result.as_dict(),
            stations=result.stations_dict(),
        )
        save_design_json(state, output)
        console.print(f"\n[dim]Saved to {output}[/dim]")
