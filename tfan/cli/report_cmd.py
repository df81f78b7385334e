"""CLI command for report generation."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from tfan.core.config import load_design_json
from tfan.reports.summary import (
    generate_text_report,
    save_html_report,
    save_text_report,
)


@click.command("report")
@click.option(
    "--design",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Input design JSON (from `tfan solve -o`).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "html", "both"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Report format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Output file path; text reports print to the console when omitted.",
)
@click.pass_context
def report(ctx: click.Context, design: str, fmt: str, output: str | None) -> None:
    """Generate a cycle summary report from a design file."""
    console: Console = ctx.obj.get("console", Console())
    try:
        state = load_design_json(design)
    except (ValueError, TypeError) as exc:
        raise click.ClickException(f"Cannot read design file: {exc}") from exc

    fmt = fmt.lower()
    if fmt == "text" and not output:
        console.print(generate_text_report(state), highlight=False)
        return

    base = Path(output) if output else Path("report")
    if fmt in ("text", "both"):
        out_txt = base if fmt == "text" else base.with_suffix(".txt")
        save_text_report(state, out_txt)
        console.print(f"[green]Text report saved:[/green] {out_txt}")
    if fmt in ("html", "both"):
        out_html = base if (fmt == "html" and output) else base.with_suffix(".html")
        save_html_report(state, out_html)
        console.print(f"[green]HTML report saved:[/green] {out_html}")
