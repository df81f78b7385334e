"""Gas-dynamic relations shared by the cycle components.

Ideal-gas, calorically perfect relations with the specific-heat ratio
passed explicitly, so the same helpers serve the cold (air) and hot
(combustion products) sections.
"""

from __future__ import annotations

import math


def total_temperature_ratio(M: float, gamma: float) -> float:
    """Tt/T at Mach number M."""
    return 1.0 + 0.5 * (gamma - 1.0) * M**2


def total_pressure_ratio(M: float, gamma: float) -> float:
    """Isentropic Pt/P at Mach number M."""
    return total_temperature_ratio(M, gamma) ** (gamma / (gamma - 1.0))


def speed_of_sound(T: float, gamma: float, R: float) -> float:
    """Speed of sound [m/s] at static temperature T [K]."""
    return math.sqrt(gamma * R * T)


def compressor_temperature_ratio(pressure_ratio: float, efficiency: float, gamma: float) -> float:
    """Tt_out/Tt_in of a compressor stage.

    ΔT/T_in = (π^((γ-1)/γ) − 1) / η
    """
    return 1.0 + (pressure_ratio ** ((gamma - 1.0) / gamma) - 1.0) / efficiency


def turbine_pressure_ratio(temperature_ratio: float, efficiency: float, gamma: float) -> float | None:
    """Pt_in/Pt_out of a turbine from its known temperature ratio.

    Inverts ``1 − τ = η (1 − π^((1−γ)/γ))`` where τ = Tt_out/Tt_in.

    Returns:
        The expansion ratio, or None when the base
        ``1 − (1 − τ)/η`` is non-positive (no finite expansion gives
        that temperature drop).
    """
    base = 1.0 - (1.0 - temperature_ratio) / efficiency
    if base <= 0.0:
        return None
    return base ** (gamma / (1.0 - gamma))


def mach_from_pressure_ratio(pressure_ratio: float, gamma: float) -> float:
    """Mach number of an isentropic expansion through Pt/P.

    Ratios below 1.0 are clipped to 1.0 (M = 0) instead of producing a
    negative radicand.
    """
    ratio = max(pressure_ratio, 1.0)
    return math.sqrt((2.0 / (gamma - 1.0)) * (ratio ** ((gamma - 1.0) / gamma) - 1.0))


def gamma_from_cp(cp: float, R: float) -> float:
    """Specific-heat ratio γ = cp / (cp − R)."""
    return cp / (cp - R)
