"""Matplotlib chart export for sweeps and envelope maps.

Figures are built on ``matplotlib.figure.Figure`` directly (no pyplot
state), so they render headless and can be saved from worker code.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from matplotlib.figure import Figure

from tfan.optimization.sweeps import EnvelopeMap, SweepResult

_AXIS_LABELS = {
    "overall_pressure_ratio": "Overall pressure ratio π_c",
    "bypass_ratio": "Bypass ratio B",
    "tt4": "Turbine-inlet temperature Tt4 [K]",
}


def _style(ax, xlabel: str, ylabel: str, title: str) -> None:
    ax.set_xlabel(xlabel, fontsize=9)
    ax.set_ylabel(ylabel, fontsize=9)
    ax.set_title(title, fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.tick_params(labelsize=8)


def sweep_figure(sweep: SweepResult, figsize: tuple[float, float] = (6.0, 4.0)) -> Figure:
    """SFC curve of a sweep with the minimum and current points marked.

    Bypass sweeps add propulsive efficiency on a secondary axis; Tt4
    sweeps add specific thrust.
    """
    fig = Figure(figsize=figsize, dpi=100)
    ax = fig.add_subplot(111)
    xlabel = _AXIS_LABELS.get(sweep.parameter, sweep.parameter)
    ax.plot(sweep.x, sweep.SFC, color="steelblue", linewidth=1.5, label="SFC")
    _style(ax, xlabel, "SFC [kg/(N·h)]", f"SFC vs {xlabel}")

    if sweep.minimum is not None:
        ax.scatter([sweep.minimum.x], [sweep.minimum.SFC], c="seagreen", s=30, zorder=3, label="minimum")
    if sweep.current is not None and sweep.current.Fs > 0:
        ax.scatter([sweep.current.x], [sweep.current.SFC], c="coral", s=30, zorder=3, label="current")

    second = {"bypass_ratio": ("eta_p", "Propulsive efficiency η_p"), "tt4": ("Fs", "Fs [N·s/kg]")}
    if sweep.parameter in second:
        attr, label = second[sweep.parameter]
        ax2 = ax.twinx()
        ax2.plot(sweep.x, getattr(sweep, attr), color="goldenrod", linewidth=1.2, linestyle="--")
        ax2.set_ylabel(label, fontsize=9)
        ax2.tick_params(labelsize=8)

    ax.legend(fontsize=8, loc="best")
    fig.tight_layout()
    return fig


def envelope_figure(
    env: EnvelopeMap,
    metric: str = "sfc",
    current: tuple[float, float] | None = None,
    figsize: tuple[float, float] = (6.5, 4.5),
) -> Figure:
    """Heat map of an envelope metric (``"sfc"`` or ``"thrust"``).

    Args:
        env: Envelope grid.
        metric: Which map to draw.
        current: Optional ``(mach, altitude_km)`` marker.
    """
    if metric not in ("sfc", "thrust"):
        raise ValueError(f"metric must be 'sfc' or 'thrust', got '{metric}'")
    data = np.ma.masked_invalid(getattr(env, metric))

    fig = Figure(figsize=figsize, dpi=100)
    ax = fig.add_subplot(111)
    mesh = ax.pcolormesh(env.machs, env.altitudes, data, shading="nearest", cmap="viridis_r" if metric == "sfc" else "viridis")
    cbar = fig.colorbar(mesh, ax=ax)
    cbar.set_label("SFC [kg/(N·h)]" if metric == "sfc" else "Net thrust [kN]", fontsize=9)
    if current is not None:
        ax.scatter([current[0]], [current[1]], c="white", edgecolors="black", s=40, zorder=3)
    _style(ax, "Mach", "Altitude [km]", "Flight envelope: " + ("SFC" if metric == "sfc" else "thrust"))
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path) -> None:
    """Write a figure; the format follows the file suffix."""
    fig.savefig(Path(path))
