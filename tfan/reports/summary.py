"""Cycle summary reports for TFAN.

Text and HTML reports are rendered from the same section model built
out of a ``DesignState``: operating point, performance, the comparison
against the configured reference figures, and the station table.
"""

from __future__ import annotations

import html as html_mod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from tfan import __version__
from tfan.core.config import DesignState, EngineInputs
from tfan.cycle.stations import StationId

Row = tuple[str, str, str]


@dataclass(frozen=True)
class ReferenceDelta:
    """Computed value against a reference figure."""

    name: str
    computed: float
    reference: float

    @property
    def delta(self) -> float:
        return self.computed - self.reference

    @property
    def percent(self) -> float:
        """Relative deviation in percent, 0 for a zero reference."""
        if self.reference == 0:
            return 0.0
        return 100.0 * self.delta / self.reference


def _metric(result: Any, key: str) -> float:
    if isinstance(result, Mapping):
        return float(result[key])
    return float(getattr(result, key))


def reference_deltas(inputs: EngineInputs, result: Any) -> list[ReferenceDelta]:
    """Compare Fs and SFC against the reference figures.

    The wet pair applies when the afterburner is lit, the dry pair
    otherwise.

    Args:
        inputs: Configuration holding the reference figures.
        result: ``EngineResult`` or a performance mapping with
            ``Fs`` and ``SFC`` entries.
    """
    if inputs.afterburner_on:
        ref_fs, ref_sfc = inputs.ref_fs_wet, inputs.ref_sfc_wet
    else:
        ref_fs, ref_sfc = inputs.ref_fs_dry, inputs.ref_sfc_dry
    return [
        ReferenceDelta("Fs", _metric(result, "Fs"), ref_fs),
        ReferenceDelta("SFC", _metric(result, "SFC"), ref_sfc),
    ]


# --- Section model ---

_PERFORMANCE_ROWS = (
    ("Specific Thrust", "Fs", "N·s/kg", 1.0, "{:.2f}"),
    ("SFC", "SFC", "kg/(N·h)", 1.0, "{:.5f}"),
    ("Net Thrust", "net_thrust", "kN", 1e-3, "{:.2f}"),
    ("Actual Mass Flow", "mass_flow_actual", "kg/s", 1.0, "{:.2f}"),
    ("Fuel Fraction", "fuel_fraction", "", 1.0, "{:.5f}"),
    ("Exit Velocity", "V9", "m/s", 1.0, "{:.1f}"),
    ("Overall PR", "pi_total", "", 1.0, "{:.2f}"),
    ("Propulsive Eff.", "eta_p", "", 1.0, "{:.4f}"),
    ("HPC Exit Tt", "Tt3", "K", 1.0, "{:.1f}"),
)


def _fmt(value: Any, pattern: str = "{:.4f}") -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        return pattern.format(value)
    return str(value)


def _sections(state: DesignState) -> list[tuple[str, list[Row]]]:
    inputs = state.engine_inputs()
    sections: list[tuple[str, list[Row]]] = []

    sections.append((
        "Operating Point",
        [
            ("Altitude", f"{inputs.altitude:.2f}", "km"),
            ("Mach", f"{inputs.mach:.2f}", ""),
            ("Bypass Ratio", f"{inputs.bypass_ratio:.3f}", ""),
            ("Fan PR", f"{inputs.fan_pressure_ratio:.3f}", ""),
            ("HPC PR", f"{inputs.hpc_pressure_ratio:.3f}", ""),
            ("Tt4", f"{inputs.tt4:.0f}", "K"),
            ("Afterburner", "on" if inputs.afterburner_on else "off", ""),
            ("Afterburner Tt", f"{inputs.tt_ab:.0f}", "K"),
            ("Textbook Mode", "on" if inputs.textbook_mode else "off", ""),
        ],
    ))

    perf = state.performance
    if perf:
        rows = [
            (label, _fmt(perf[key] * scale, pattern), unit)
            for label, key, unit, scale, pattern in _PERFORMANCE_ROWS
            if key in perf
        ]
        for flag in ("combustion_limited", "hpt_floor_active", "lpt_floor_active"):
            if perf.get(flag):
                rows.append((flag.replace("_", " ").title(), "yes", ""))
        sections.append(("Performance", rows))

        if "Fs" in perf and "SFC" in perf:
            rows = []
            for d in reference_deltas(inputs, perf):
                rows.append((f"{d.name} (computed)", _fmt(d.computed, "{:.4f}"), ""))
                rows.append((f"{d.name} (reference)", _fmt(d.reference, "{:.4f}"), ""))
                rows.append((f"{d.name} deviation", f"{d.delta:+.4f} ({d.percent:+.2f}%)", ""))
            title = "Reference Comparison (" + ("wet" if inputs.afterburner_on else "dry") + ")"
            sections.append((title, rows))

    if state.stations:
        rows = []
        for sid in StationId:
            st = state.stations.get(sid.value)
            if st is None:
                continue
            rows.append((
                f"{sid.value} {sid.label}",
                f"{st['Pt'] / 1e3:.2f} kPa / {st['Tt']:.1f} K",
                "Pt / Tt",
            ))
        sections.append(("Stations", rows))

    return sections


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


# --- Plain-text report ---


def generate_text_report(state: DesignState) -> str:
    """Plain-text cycle report.

    Args:
        state: Design with inputs and, optionally, solved performance
            and station data.

    Returns:
        Multi-line report string.
    """
    hr = "=" * 64
    lines = [hr, "  TFAN Cycle Report", f"  {state.meta.name}", hr, ""]
    for title, rows in _sections(state):
        lines.append(title.upper())
        lines.append("-" * 44)
        for label, value, unit in rows:
            unit_str = f" {unit}" if unit else ""
            lines.append(f"  {label:<24s} {value:>18}{unit_str}")
        lines.append("")
    lines += [hr, f"  Generated: {_timestamp()}", f"  TFAN v{__version__}", hr]
    return "\n".join(lines)


# --- HTML report ---

_CSS = """
body { font-family: -apple-system, "Segoe UI", Roboto, sans-serif;
       max-width: 820px; margin: 2em auto; padding: 0 1em; color: #222; }
h1 { color: #1a365d; border-bottom: 2px solid #2b6cb0; padding-bottom: 0.3em; }
h2 { color: #2b6cb0; margin-top: 1.5em; }
table { width: 100%; border-collapse: collapse; margin: 0.5em 0 1.5em; }
th, td { text-align: left; padding: 0.4em 0.8em; border-bottom: 1px solid #e2e8f0; }
th { background: #ebf4ff; color: #1a365d; }
td:nth-child(2) { text-align: right; font-family: monospace; }
td:nth-child(3) { color: #718096; font-size: 0.9em; }
.footer { margin-top: 2em; color: #a0aec0; font-size: 0.85em; }
"""


def generate_html_report(state: DesignState) -> str:
    """Self-contained HTML cycle report with inline CSS."""
    esc = html_mod.escape
    title = esc(state.meta.name)
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        f'<head><meta charset="utf-8"><title>TFAN &mdash; {title}</title><style>{_CSS}</style></head>',
        "<body>",
        "<h1>TFAN Cycle Report</h1>",
        f"<p><strong>{title}</strong></p>",
    ]
    for section, rows in _sections(state):
        parts.append(f"<h2>{esc(section)}</h2>")
        parts.append("<table>")
        parts.append("<tr><th>Parameter</th><th>Value</th><th>Unit</th></tr>")
        for label, value, unit in rows:
            parts.append(f"<tr><td>{esc(label)}</td><td>{esc(value)}</td><td>{esc(unit)}</td></tr>")
        parts.append("</table>")
    parts.append(f'<div class="footer">Generated: {_timestamp()} &middot; TFAN v{esc(__version__)}</div>')
    parts.append("</body>\n</html>")
    return "\n".join(parts)


def save_text_report(state: DesignState, filepath: str | Path) -> None:
    """Generate and save a plain-text report."""
    Path(filepath).write_text(generate_text_report(state), encoding="utf-8")


def save_html_report(state: DesignState, filepath: str | Path) -> None:
    """Generate and save an HTML report."""
    Path(filepath).write_text(generate_html_report(state), encoding="utf-8")
