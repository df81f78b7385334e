"""Station-by-station cycle solver for the mixed-exhaust turbofan.

Gas path (station ids in brackets):

    free stream [0] → intake [2] → fan [2.5] → HPC [3] → burner [4]
    → HPT [4.5] → LPT [5] → mixer [6] → afterburner [7] → nozzle [9]

Each station depends only on stations upstream of it, so a solve is a
single straight-line pass with no iteration. The solver never raises for
numeric inputs: infeasible combustion, degenerate turbine expansions and
non-positive thrust degrade to clamped or sentinel values that are
visible in the returned ``EngineResult``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any, Callable, Mapping

from tfan.core.atmosphere import free_stream
from tfan.core.config import EngineInputs
from tfan.cycle.components.afterburner import afterburn, nozzle_gas_properties
from tfan.cycle.components.combustor import burn
from tfan.cycle.components.compressor import compress, core_flow_fraction
from tfan.cycle.components.inlet import compute_inlet
from tfan.cycle.components.mixer import mix
from tfan.cycle.components.nozzle import (
    expand_nozzle,
    net_thrust,
    propulsive_efficiency,
    specific_fuel_consumption,
)
from tfan.cycle.components.turbine import expand, hpt_work, lpt_work
from tfan.cycle.stations import StationId, StationResult

logger = logging.getLogger(__name__)

# Inputs a caller may vary per solve without building new EngineInputs
OVERRIDE_KEYS = ("hpc_pressure_ratio", "bypass_ratio", "tt4")

# Keys of EngineResult.as_dict, the quantities an optimiser may target
RESULT_KEYS = (
    "Fs", "SFC", "fuel_fraction", "mass_flow_actual", "net_thrust", "V9", "pi_total", "eta_p",
    "tt4_requested", "Tt3", "combustion_limited", "hpt_floor_active", "lpt_floor_active", "is_valid",
)


@dataclass(frozen=True)
class EngineResult:
    """Aggregate cycle performance for one operating point."""

    stations: dict[StationId, StationResult]
    Fs: float  # N/(kg/s), specific thrust
    SFC: float  # kg/(N·h)
    fuel_fraction: float  # burner + afterburner fuel per unit core intake flow
    mass_flow_actual: float  # kg/s
    net_thrust: float  # N
    V9: float  # m/s, nozzle exit velocity
    pi_total: float  # overall pressure ratio
    eta_p: float  # propulsive efficiency
    tt4_requested: float  # K
    combustion_limited: bool = False
    hpt_floor_active: bool = False
    lpt_floor_active: bool = False
    overrides: dict[str, float] = field(default_factory=dict)

    @property
    def thrust_positive(self) -> bool:
        return self.net_thrust > 0.0

    @property
    def is_valid(self) -> bool:
        """Positive thrust at a thermally feasible point."""
        return self.thrust_positive and not self.combustion_limited

    def station(self, station_id: StationId | str) -> StationResult:
        return self.stations[StationId(station_id)]

    def as_dict(self) -> dict[str, Any]:
        """Scalar metrics and flags, suitable for JSON or optimiser input."""
        return {
            "Fs": self.Fs,
            "SFC": self.SFC,
            "fuel_fraction": self.fuel_fraction,
            "mass_flow_actual": self.mass_flow_actual,
            "net_thrust": self.net_thrust,
            "V9": self.V9,
            "pi_total": self.pi_total,
            "eta_p": self.eta_p,
            "tt4_requested": self.tt4_requested,
            "Tt3": self.station(StationId.HPC_EXIT).Tt,
            "combustion_limited": self.combustion_limited,
            "hpt_floor_active": self.hpt_floor_active,
            "lpt_floor_active": self.lpt_floor_active,
            "is_valid": self.is_valid,
        }

    def stations_dict(self) -> dict[str, dict[str, Any]]:
        return {sid.value: st.to_dict() for sid, st in self.stations.items()}


def apply_overrides(inputs: EngineInputs, overrides: Mapping[str, float] | None) -> EngineInputs:
    """Return *inputs* with the override values substituted.

    Raises:
        ValueError: If *overrides* contains a key outside OVERRIDE_KEYS.
    """
    if not overrides:
        return inputs
    unknown = sorted(set(overrides) - set(OVERRIDE_KEYS))
    if unknown:
        raise ValueError(
            f"Unknown override(s): {', '.join(unknown)}. "
            f"Allowed: {', '.join(OVERRIDE_KEYS)}"
        )
    return replace(inputs, **{k: float(v) for k, v in overrides.items()})


def solve_engine(
    inputs: EngineInputs,
    overrides: Mapping[str, float] | None = None,
) -> EngineResult:
    """Solve the cycle at one operating point.

    Args:
        inputs: Engine configuration. Never modified.
        overrides: Optional values for ``hpc_pressure_ratio``,
            ``bypass_ratio`` and/or ``tt4`` used in place of the fields
            of *inputs*, so sweeps can vary one axis at a time.

    Returns:
        EngineResult with all ten stations populated.

    Raises:
        ValueError: Only for unknown override keys.
    """
    inp = apply_overrides(inputs, overrides)
    B = inp.bypass_ratio
    stations: dict[StationId, StationResult] = {}

    # Atmosphere and free stream
    fs = free_stream(inp.altitude, inp.mach, inp.mass_flow_design)
    amb = fs.ambient
    stations[StationId.FREE_STREAM] = StationResult(
        StationId.FREE_STREAM, Pt=fs.Pt0, Tt=fs.Tt0, P=amb.P, T=amb.T, V=fs.c0
    )

    # Intake
    inlet = compute_inlet(fs, inp.sigma_i, inp.textbook_mode)
    stations[StationId.FAN_INLET] = StationResult(StationId.FAN_INLET, Pt=inlet.Pt, Tt=inlet.Tt)

    # Fan and HPC
    fan = compress(inlet.Pt, inlet.Tt, inp.fan_pressure_ratio, inp.eta_cL)
    stations[StationId.FAN_EXIT] = StationResult(StationId.FAN_EXIT, Pt=fan.Pt, Tt=fan.Tt)

    hpc = compress(fan.Pt, fan.Tt, inp.hpc_pressure_ratio, inp.eta_cH)
    m3 = core_flow_fraction(inp.beta, inp.delta_1, inp.delta_2)
    stations[StationId.HPC_EXIT] = StationResult(StationId.HPC_EXIT, Pt=hpc.Pt, Tt=hpc.Tt, m_rel=m3)

    # Burner
    comb = burn(hpc.Pt, hpc.Tt, inp.tt4, m3, inp.eta_b, inp.sigma_b)
    if comb.limited:
        logger.debug("Tt3 %.1f K >= requested Tt4 %.1f K; no fuel added", hpc.Tt, inp.tt4)
    stations[StationId.COMBUSTOR_EXIT] = StationResult(
        StationId.COMBUSTOR_EXIT, Pt=comb.Pt, Tt=comb.Tt, f=comb.f, m_rel=comb.m_rel
    )

    # HPT drives the HPC, LPT drives the fan and accessories
    hpt = expand(
        comb.Pt, comb.Tt, comb.m_rel, inp.delta_1, hpc.Tt,
        work=hpt_work(hpc), eta_m=inp.eta_m, eta_t=inp.eta_tH, Tt_floor=fs.Tt0,
    )
    stations[StationId.HPT_EXIT] = StationResult(StationId.HPT_EXIT, Pt=hpt.Pt, Tt=hpt.Tt, m_rel=hpt.m_rel)

    lpt = expand(
        hpt.Pt, hpt.Tt, hpt.m_rel, inp.delta_2, hpc.Tt,
        work=lpt_work(fan, B, inp.eta_m), eta_m=inp.eta_m, eta_t=inp.eta_tL, Tt_floor=fs.Tt0,
    )
    stations[StationId.LPT_EXIT] = StationResult(StationId.LPT_EXIT, Pt=lpt.Pt, Tt=lpt.Tt, m_rel=lpt.m_rel)
    if hpt.floor_active or lpt.floor_active:
        logger.debug(
            "Turbine exit temperature floored (HPT=%s, LPT=%s)", hpt.floor_active, lpt.floor_active
        )

    # Mixer
    mixed = mix(lpt.m_rel, lpt.Tt, lpt.Pt, B, fan.Tt, fan.Pt, inp.sigma_bypass, inp.sigma_m)
    stations[StationId.MIXER_EXIT] = StationResult(
        StationId.MIXER_EXIT, Pt=mixed.Pt, Tt=mixed.Tt, m_rel=mixed.m_total,
        cp=mixed.cp, gamma=mixed.gamma,
    )

    # Afterburner
    ab = afterburn(mixed, inp.afterburner_on, inp.tt_ab, inp.sigma_ab_dry, inp.sigma_ab_wet)
    cp_noz, gamma_noz = nozzle_gas_properties(inp.afterburner_on, inp.textbook_mode, mixed)
    stations[StationId.AFTERBURNER_EXIT] = StationResult(
        StationId.AFTERBURNER_EXIT, Pt=ab.Pt, Tt=ab.Tt,
        f=ab.fuel_fraction / mixed.m_total if ab.lit else None,
        m_rel=ab.m_rel, cp=cp_noz, gamma=gamma_noz,
    )

    # Nozzle
    noz = expand_nozzle(ab.Pt, ab.Tt, inp.sigma_e, amb.P, gamma_noz)
    stations[StationId.NOZZLE_EXIT] = StationResult(
        StationId.NOZZLE_EXIT, Pt=noz.Pt, Tt=noz.Tt, P=noz.P, T=noz.T, V=noz.V,
        m_rel=ab.m_rel, cp=cp_noz, gamma=gamma_noz,
    )

    # Performance
    m_in = 1.0 + B
    F = net_thrust(ab.m_rel, noz.V, m_in, fs.c0)
    Fs = F / m_in
    f_total = comb.f * m3 + ab.fuel_fraction

    return EngineResult(
        stations=stations,
        Fs=Fs,
        SFC=specific_fuel_consumption(f_total, F),
        fuel_fraction=f_total,
        mass_flow_actual=fs.mass_flow_actual,
        net_thrust=Fs * fs.mass_flow_actual,
        V9=noz.V,
        pi_total=inp.fan_pressure_ratio * inp.hpc_pressure_ratio,
        eta_p=propulsive_efficiency(F, fs.c0, ab.m_rel, noz.V, m_in),
        tt4_requested=inp.tt4,
        combustion_limited=comb.limited,
        hpt_floor_active=hpt.floor_active,
        lpt_floor_active=lpt.floor_active,
        overrides=dict(overrides) if overrides else {},
    )


def make_cached_solver(maxsize: int = 1024) -> Callable[..., EngineResult]:
    """Build a memoising wrapper around :func:`solve_engine`.

    The cache belongs to the returned callable, so callers that want
    memoisation (interactive front ends re-drawing the same sweep) own
    it explicitly and ``solve_engine`` itself stays stateless.
    """

    @lru_cache(maxsize=maxsize)
    def _cached(inputs: EngineInputs, items: tuple[tuple[str, float], ...]) -> EngineResult:
        return solve_engine(inputs, dict(items) or None)

    def solve(inputs: EngineInputs, overrides: Mapping[str, float] | None = None) -> EngineResult:
        return _cached(inputs, tuple(sorted((overrides or {}).items())))

    solve.cache_info = _cached.cache_info  # type: ignore[attr-defined]
    solve.cache_clear = _cached.cache_clear  # type: ignore[attr-defined]
    return solve
