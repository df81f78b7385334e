"""TFAN command-line interface.

Entry point for the ``tfan`` CLI tool.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from tfan import __app_name__, __version__

console = Console()


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    root = logging.getLogger("tfan")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=console, show_path=False, rich_tracebacks=True))


@click.group()
@click.version_option(version=__version__, prog_name=__app_name__)
@click.option("-v", "--verbose", count=True, help="Log progress (-v) or solver detail (-vv).")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """TFAN: mixed-exhaust turbofan cycle analysis.

    Station-by-station performance of a dual-spool afterburning
    turbofan, with parametric sweeps, flight-envelope maps and design
    optimisation.
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console
    _configure_logging(verbose)


# Import and register sub-command groups
from tfan.cli.info_cmd import info  # noqa: E402
from tfan.cli.optimize_cmd import optimize  # noqa: E402
from tfan.cli.report_cmd import report  # noqa: E402
from tfan.cli.solve_cmd import solve  # noqa: E402
from tfan.cli.sweep_cmd import sweep  # noqa: E402

cli.add_command(solve)
cli.add_command(sweep)
cli.add_command(optimize)
cli.add_command(report)
cli.add_command(info)


def main() -> None:
    """Convenience wrapper for entry-point scripts."""
    cli()
