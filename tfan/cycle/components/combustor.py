"""Main burner model: station 3 → station 4.

The fuel-air ratio comes from the enthalpy balance

    f = (cp_g·Tt4 − cp_a·Tt3) / (η_b·H_u − cp_g·Tt4)

When the requested Tt4 is at or below the compressor exit temperature no
heat can be added: fuel is zero and Tt4 is capped at Tt3.
"""

from __future__ import annotations

from dataclasses import dataclass

from tfan.utils.constants import CP_AIR, CP_GAS, FUEL_LHV


@dataclass(frozen=True)
class CombustorResult:
    """Burner exit state."""

    Pt: float  # Pa
    Tt: float  # K, effective (possibly capped) exit temperature
    f: float  # fuel-air ratio
    m_rel: float  # flow relative to core intake flow, fuel included
    limited: bool  # requested Tt4 not reachable


def fuel_air_ratio(Tt_in: float, Tt_out: float, eta_b: float) -> float:
    """Burner fuel-air ratio, clamped at zero."""
    f = (CP_GAS * Tt_out - CP_AIR * Tt_in) / (eta_b * FUEL_LHV - CP_GAS * Tt_out)
    return max(f, 0.0)


def burn(
    Pt_in: float,
    Tt_in: float,
    tt4: float,
    m_in: float,
    eta_b: float,
    sigma_b: float,
) -> CombustorResult:
    """Heat the core stream to *tt4*.

    Args:
        Pt_in: HPC exit total pressure [Pa].
        Tt_in: HPC exit total temperature [K].
        tt4: Requested turbine-inlet total temperature [K].
        m_in: Core flow fraction entering the burner.
        eta_b: Burner efficiency.
        sigma_b: Burner total-pressure recovery.
    """
    limited = tt4 <= Tt_in
    if limited:
        f = 0.0
        Tt_out = Tt_in
    else:
        f = fuel_air_ratio(Tt_in, tt4, eta_b)
        Tt_out = tt4
    return CombustorResult(
        Pt=Pt_in * sigma_b,
        Tt=Tt_out,
        f=f,
        m_rel=m_in * (1.0 + f),
        limited=limited,
    )
