"""Parametric sweeps and flight-envelope maps.

Each driver varies one quantity around a base ``EngineInputs`` through
the solver's override map, so the base configuration is never touched.
The envelope map varies altitude and Mach instead and can spread its
rows over a process pool since every solve is independent.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Sequence

import numpy as np

from tfan.core.config import EngineInputs
from tfan.cycle.solver import solve_engine
from tfan.utils.constants import N_TO_KN

logger = logging.getLogger(__name__)

# Acceptance limits for plotted points
OPR_SFC_LIMIT = 15.0
ENVELOPE_SFC_LIMIT = 5.0

ENVELOPE_MAX_MACH = 3.5
ENVELOPE_MAX_ALTITUDE = 20.0  # km
ENVELOPE_MACH_STEPS = 60
ENVELOPE_ALTITUDE_STEPS = 50


@dataclass
class SweepPoint:
    """One accepted point of a 1-D sweep."""

    x: float
    Fs: float  # N/(kg/s)
    SFC: float  # kg/(N·h)
    eta_p: float
    Tt3: float  # K


@dataclass
class SweepResult:
    """Accepted points of a 1-D sweep plus its marked points."""

    parameter: str
    points: list[SweepPoint] = field(default_factory=list)
    current: SweepPoint | None = None
    minimum: SweepPoint | None = None  # lowest SFC among accepted points

    @property
    def x(self) -> np.ndarray:
        return np.array([p.x for p in self.points])

    @property
    def Fs(self) -> np.ndarray:
        return np.array([p.Fs for p in self.points])

    @property
    def SFC(self) -> np.ndarray:
        return np.array([p.SFC for p in self.points])

    @property
    def eta_p(self) -> np.ndarray:
        return np.array([p.eta_p for p in self.points])

    def to_dict(self) -> dict:
        def _pt(p: SweepPoint | None) -> dict | None:
            return None if p is None else {"x": p.x, "Fs": p.Fs, "SFC": p.SFC, "eta_p": p.eta_p, "Tt3": p.Tt3}

        return {
            "parameter": self.parameter,
            "x": self.x.tolist(),
            "Fs": self.Fs.tolist(),
            "SFC": self.SFC.tolist(),
            "eta_p": self.eta_p.tolist(),
            "current": _pt(self.current),
            "minimum": _pt(self.minimum),
        }


def _point(x: float, inputs: EngineInputs, overrides: dict[str, float] | None = None) -> SweepPoint:
    res = solve_engine(inputs, overrides)
    return SweepPoint(x=x, Fs=res.Fs, SFC=res.SFC, eta_p=res.eta_p, Tt3=res.station("3").Tt)


def _mark_minimum(sweep: SweepResult) -> None:
    if sweep.points:
        sweep.minimum = min(sweep.points, key=lambda p: p.SFC)


def sweep_overall_pressure_ratio(
    inputs: EngineInputs,
    values: Sequence[float] | None = None,
) -> SweepResult:
    """SFC and thrust against overall pressure ratio at fixed fan ratio.

    The HPC ratio is set to OPR / π_fan. Points needing an HPC ratio
    below 1 are skipped; a point is kept when Fs > 0 and SFC is under
    the plotting limit.

    Args:
        inputs: Base configuration.
        values: OPR values (default 5 to 80 in steps of 1).

    Returns:
        SweepResult with ``x`` = OPR, the minimum-SFC point and the
        current design point.
    """
    if values is None:
        values = np.arange(5.0, 81.0, 1.0)

    sweep = SweepResult(parameter="overall_pressure_ratio")
    for opr in values:
        pi_h = float(opr) / inputs.fan_pressure_ratio
        if pi_h < 1.0:
            continue
        pt = _point(float(opr), inputs, {"hpc_pressure_ratio": pi_h})
        if pt.Fs > 0 and pt.SFC < OPR_SFC_LIMIT:
            sweep.points.append(pt)

    _mark_minimum(sweep)
    sweep.current = _point(inputs.fan_pressure_ratio * inputs.hpc_pressure_ratio, inputs)

    if sweep.minimum is not None:
        logger.info(
            "OPR sweep: %d points, minimum SFC %.4f at OPR %.1f",
            len(sweep.points), sweep.minimum.SFC, sweep.minimum.x,
        )
    else:
        logger.info("OPR sweep: no points with positive thrust")
    return sweep


def sweep_bypass_ratio(
    inputs: EngineInputs,
    values: Sequence[float] | None = None,
) -> SweepResult:
    """SFC and propulsive efficiency against bypass ratio.

    Args:
        inputs: Base configuration.
        values: Bypass ratios (default 0 to 12 in steps of 0.5).
    """
    if values is None:
        values = np.arange(0.0, 12.5, 0.5)

    sweep = SweepResult(parameter="bypass_ratio")
    for b in values:
        pt = _point(float(b), inputs, {"bypass_ratio": float(b)})
        if pt.Fs > 0:
            sweep.points.append(pt)

    _mark_minimum(sweep)
    sweep.current = _point(inputs.bypass_ratio, inputs)
    logger.info("Bypass sweep: %d of %d points with positive thrust", len(sweep.points), len(values))
    return sweep


def sweep_turbine_inlet_temperature(
    inputs: EngineInputs,
    values: Sequence[float] | None = None,
) -> SweepResult:
    """SFC and specific thrust against turbine-inlet temperature.

    Args:
        inputs: Base configuration.
        values: Tt4 values in K (default 1000 to 2500 in steps of 50).
    """
    if values is None:
        values = np.arange(1000.0, 2550.0, 50.0)

    sweep = SweepResult(parameter="tt4")
    for tt4 in values:
        pt = _point(float(tt4), inputs, {"tt4": float(tt4)})
        if pt.Fs > 0:
            sweep.points.append(pt)

    _mark_minimum(sweep)
    sweep.current = _point(inputs.tt4, inputs)
    logger.info("Tt4 sweep: %d of %d points with positive thrust", len(sweep.points), len(values))
    return sweep


# --- Flight envelope ---


@dataclass
class EnvelopeMap:
    """SFC and thrust over an altitude × Mach grid.

    Arrays are indexed ``[altitude_index, mach_index]``; cells that fail
    the acceptance rules hold NaN.
    """

    altitudes: np.ndarray  # km
    machs: np.ndarray
    sfc: np.ndarray  # kg/(N·h)
    thrust: np.ndarray  # kN
    Tt3: np.ndarray  # K
    thermally_valid: np.ndarray  # bool, Tt3 ≤ Tt4

    @property
    def shape(self) -> tuple[int, int]:
        return self.sfc.shape

    def arrays(self) -> dict[str, np.ndarray]:
        """Arrays keyed for ``.npz`` storage."""
        return {
            "envelope_altitudes": self.altitudes,
            "envelope_machs": self.machs,
            "envelope_sfc": self.sfc,
            "envelope_thrust": self.thrust,
            "envelope_Tt3": self.Tt3,
            "envelope_thermally_valid": self.thermally_valid,
        }

    def summary(self) -> dict[str, float | int]:
        def _finite(a: np.ndarray, fn) -> float | None:
            return float(fn(a)) if np.isfinite(a).any() else None

        return {
            "cells": int(self.sfc.size),
            "thermally_valid": int(self.thermally_valid.sum()),
            "sfc_cells": int(np.isfinite(self.sfc).sum()),
            "thrust_cells": int(np.isfinite(self.thrust).sum()),
            "sfc_min": _finite(self.sfc, np.nanmin),
            "sfc_max": _finite(self.sfc, np.nanmax),
            "thrust_min": _finite(self.thrust, np.nanmin),
            "thrust_max": _finite(self.thrust, np.nanmax),
        }


def _envelope_row(
    inputs: EngineInputs, altitude: float, machs: np.ndarray
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Evaluate one altitude row. Module level so it pickles for workers."""
    n = len(machs)
    sfc = np.full(n, np.nan)
    thrust = np.full(n, np.nan)
    tt3 = np.empty(n)
    valid = np.zeros(n, dtype=bool)

    for j, mach in enumerate(machs):
        res = solve_engine(replace(inputs, altitude=float(altitude), mach=float(mach)))
        tt3[j] = res.station("3").Tt
        valid[j] = tt3[j] <= inputs.tt4
        if not valid[j] or res.Fs <= 0:
            continue
        if res.SFC < ENVELOPE_SFC_LIMIT:
            sfc[j] = res.SFC
        thrust[j] = res.net_thrust * N_TO_KN
    return sfc, thrust, tt3, valid


def flight_envelope(
    inputs: EngineInputs,
    altitudes: Sequence[float] | None = None,
    machs: Sequence[float] | None = None,
    max_workers: int | None = None,
) -> EnvelopeMap:
    """Map SFC and net thrust over altitude and Mach.

    A cell is rejected when the compressor exit temperature exceeds the
    configured Tt4. The SFC map further needs Fs > 0 and SFC under the
    plotting limit; the thrust map needs Fs > 0.

    Args:
        inputs: Base configuration; only altitude and Mach are varied.
        altitudes: Altitude grid in km (default 50 points over 0-20 km).
        machs: Mach grid (default 60 points over 0-3.5).
        max_workers: Worker processes for row evaluation. ``None`` or 1
            evaluates serially in this process; 0 uses all CPUs.

    Returns:
        EnvelopeMap with ``[altitude, mach]`` arrays.

    Raises:
        ValueError: If either grid is empty.
    """
    alt = np.asarray(
        altitudes if altitudes is not None
        else np.linspace(0.0, ENVELOPE_MAX_ALTITUDE, ENVELOPE_ALTITUDE_STEPS),
        dtype=float,
    )
    ma = np.asarray(
        machs if machs is not None
        else np.linspace(0.0, ENVELOPE_MAX_MACH, ENVELOPE_MACH_STEPS),
        dtype=float,
    )
    if alt.size == 0 or ma.size == 0:
        raise ValueError("Envelope grid needs at least one altitude and one Mach number")

    if max_workers == 0:
        max_workers = os.cpu_count() or 1

    if max_workers is None or max_workers <= 1:
        rows = [_envelope_row(inputs, h, ma) for h in alt]
    else:
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(_envelope_row, inputs, float(h), ma) for h in alt]
            rows = [f.result() for f in futures]

    env = EnvelopeMap(
        altitudes=alt,
        machs=ma,
        sfc=np.vstack([r[0] for r in rows]),
        thrust=np.vstack([r[1] for r in rows]),
        Tt3=np.vstack([r[2] for r in rows]),
        thermally_valid=np.vstack([r[3] for r in rows]),
    )
    logger.info(
        "Envelope %dx%d: %d thermally valid cells",
        len(alt), len(ma), int(env.thermally_valid.sum()),
    )
    return env
