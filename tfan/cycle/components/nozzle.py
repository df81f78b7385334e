"""Nozzle expansion and thrust/efficiency aggregation.

The nozzle is taken as fully expanded to ambient static pressure.

    F = ṁ9·V9 − ṁ0·c0       (per unit core intake flow)
    Fs = F / (1 + B)
    SFC = 3600·f_total / F
    η_p = F·c0 / (½ṁ9·V9² − ½ṁ0·c0²)
"""

from __future__ import annotations

from dataclasses import dataclass

from tfan.core.thermo import mach_from_pressure_ratio, speed_of_sound, total_temperature_ratio
from tfan.utils.constants import R_AIR, SECONDS_PER_HOUR, SFC_PENALTY


@dataclass(frozen=True)
class NozzleResult:
    """Nozzle exit state."""

    Pt: float  # Pa
    Tt: float  # K
    P: float  # Pa, static, equal to ambient
    T: float  # K, static
    M: float
    V: float  # m/s


def expand_nozzle(Pt_in: float, Tt_in: float, sigma_e: float, P_amb: float, gamma: float) -> NozzleResult:
    """Expand to ambient pressure.

    Exit total pressure is floored at ambient static pressure, which also
    keeps the expansion ratio at or above 1.
    """
    Pt9 = max(Pt_in * sigma_e, P_amb)
    M9 = mach_from_pressure_ratio(Pt9 / P_amb, gamma)
    T9 = Tt_in / total_temperature_ratio(M9, gamma)
    return NozzleResult(
        Pt=Pt9,
        Tt=Tt_in,
        P=P_amb,
        T=T9,
        M=M9,
        V=M9 * speed_of_sound(T9, gamma, R_AIR),
    )


def net_thrust(m_out: float, V_out: float, m_in: float, c0: float) -> float:
    """Momentum-flux thrust per unit core intake flow [N/(kg/s)]."""
    return m_out * V_out - m_in * c0


def specific_fuel_consumption(fuel_fraction: float, thrust: float) -> float:
    """SFC [kg/(N·h)], or the penalty value for non-positive thrust."""
    if thrust <= 0.0:
        return SFC_PENALTY
    return fuel_fraction * SECONDS_PER_HOUR / thrust


def propulsive_efficiency(thrust: float, c0: float, m_out: float, V_out: float, m_in: float) -> float:
    """Thrust power over kinetic-energy addition.

    Zero for non-positive thrust, for a static engine (c0 = 0), and when
    no kinetic energy is added.
    """
    if thrust <= 0.0 or c0 <= 0.0:
        return 0.0
    added_ke = 0.5 * m_out * V_out**2 - 0.5 * m_in * c0**2
    if added_ke <= 0.0:
        return 0.0
    return thrust * c0 / added_ke
