"""Cooled turbine model with shaft-work balance.

Cooling air bled from the HPC exit is mixed into the hot stream ahead of
the rotor (mass-weighted enthalpy average). The rotor then extracts
exactly the work its compressor needs:

    Tt_out = Tt_mix − W / (ṁ · cp_g · η_m)

floored at the free-stream total temperature. Exit total pressure
follows from inverting the turbine efficiency relation.
"""

from __future__ import annotations

from dataclasses import dataclass

from tfan.core.thermo import turbine_pressure_ratio
from tfan.cycle.components.compressor import CompressorResult
from tfan.utils.constants import ACCESSORY_POWER, CP_AIR, CP_GAS, GAMMA_GAS


@dataclass(frozen=True)
class TurbineResult:
    """Turbine exit state."""

    Pt: float  # Pa
    Tt: float  # K
    Tt_mixed: float  # K, rotor inlet after cooling-air mixing
    m_rel: float  # flow through the rotor, cooling air included
    pressure_ratio: float | None  # Pt_in/Pt_out, None when degenerate
    floor_active: bool  # exit temperature held at the floor


def mix_cooling_air(m_gas: float, Tt_gas: float, m_cool: float, Tt_cool: float) -> float:
    """Total temperature after mixing cooling air into hot gas."""
    return (m_gas * CP_GAS * Tt_gas + m_cool * CP_AIR * Tt_cool) / ((m_gas + m_cool) * CP_GAS)


def hpt_work(hpc: CompressorResult) -> float:
    """Work the HPT must deliver per unit core intake flow."""
    return hpc.specific_work


def lpt_work(fan: CompressorResult, bypass_ratio: float, eta_m: float) -> float:
    """Work the LPT must deliver: fan work on the full intake flow plus
    the accessory power draw.
    """
    return (1.0 + bypass_ratio) * (fan.specific_work + ACCESSORY_POWER / eta_m)


def expand(
    Pt_in: float,
    Tt_gas: float,
    m_gas: float,
    m_cool: float,
    Tt_cool: float,
    work: float,
    eta_m: float,
    eta_t: float,
    Tt_floor: float,
) -> TurbineResult:
    """Expand the hot stream through a cooled turbine.

    Args:
        Pt_in: Turbine inlet total pressure [Pa].
        Tt_gas: Hot-gas total temperature ahead of cooling-air mixing [K].
        m_gas: Hot-gas flow fraction.
        m_cool: Cooling-air flow fraction mixed in.
        Tt_cool: Cooling-air total temperature [K].
        work: Required shaft work per unit core intake flow [J/kg].
        eta_m: Mechanical efficiency.
        eta_t: Turbine efficiency.
        Tt_floor: Lowest admissible exit total temperature [K].

    Returns:
        TurbineResult. When no finite expansion gives the temperature
        drop the exit pressure is held at the inlet value.
    """
    m = m_gas + m_cool
    Tt_mixed = mix_cooling_air(m_gas, Tt_gas, m_cool, Tt_cool)
    Tt_out = Tt_mixed - work / (m * CP_GAS * eta_m)
    floor_active = Tt_out < Tt_floor
    if floor_active:
        Tt_out = Tt_floor

    pr = turbine_pressure_ratio(Tt_out / Tt_mixed, eta_t, GAMMA_GAS)
    Pt_out = Pt_in / pr if pr is not None else Pt_in

    return TurbineResult(
        Pt=Pt_out,
        Tt=Tt_out,
        Tt_mixed=Tt_mixed,
        m_rel=m,
        pressure_ratio=pr,
        floor_active=floor_active,
    )
