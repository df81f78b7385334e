"""Standard atmosphere and free-stream conditions.

Two-layer ISA model up to 20 km:

- Troposphere (h ≤ 11 km): T = 288.15 − 6.5·h,
  P = 101325·(1 − h/44.308)^5.25588
- Stratosphere (h > 11 km): T = 216.65 K,
  P = 22632·exp(−0.1577·(h − 11))

Within 0.1 km above the tropopause the stratospheric pressure is held at
the 11 km reference value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from tfan.core.thermo import speed_of_sound, total_pressure_ratio, total_temperature_ratio
from tfan.utils.constants import (
    BAROMETRIC_EXPONENT,
    GAMMA_AIR,
    LAPSE_RATE,
    P_SL,
    P_TROPOPAUSE,
    R_AIR,
    STRATOSPHERE_DECAY,
    T_SL,
    T_TROPOPAUSE,
    TROPO_SCALE_HEIGHT,
    TROPOPAUSE_ALTITUDE,
    TROPOPAUSE_GUARD,
)


@dataclass(frozen=True)
class AmbientState:
    """Static ambient conditions at altitude."""

    altitude: float  # km
    T: float  # K
    P: float  # Pa


@dataclass(frozen=True)
class FreeStream:
    """Free-stream state seen by the intake."""

    ambient: AmbientState
    mach: float
    a0: float  # m/s, speed of sound
    c0: float  # m/s, flight velocity
    Tt0: float  # K
    Pt0: float  # Pa
    theta: float  # T/T_SL
    delta: float  # P/P_SL
    mass_flow_actual: float  # kg/s


def standard_atmosphere(h: float) -> AmbientState:
    """Ambient static temperature and pressure at altitude *h* [km]."""
    if h <= TROPOPAUSE_ALTITUDE:
        T = T_SL - LAPSE_RATE * h
        P = P_SL * (1.0 - h / TROPO_SCALE_HEIGHT) ** BAROMETRIC_EXPONENT
    else:
        T = T_TROPOPAUSE
        if abs(h - TROPOPAUSE_ALTITUDE) >= TROPOPAUSE_GUARD:
            P = P_TROPOPAUSE * math.exp(-STRATOSPHERE_DECAY * (h - TROPOPAUSE_ALTITUDE))
        else:
            P = P_TROPOPAUSE
    return AmbientState(altitude=h, T=T, P=P)


def actual_mass_flow(mass_flow_design: float, theta: float, delta: float) -> float:
    """Physical intake flow from the sea-level corrected design flow.

    ṁ = ṁ_corr · δ / √θ, zero when θ is not positive.
    """
    if theta <= 0.0:
        return 0.0
    return mass_flow_design * delta / math.sqrt(theta)


def free_stream(h: float, mach: float, mass_flow_design: float) -> FreeStream:
    """Resolve free-stream static/total state and actual mass flow."""
    amb = standard_atmosphere(h)
    theta = amb.T / T_SL
    delta = amb.P / P_SL
    a0 = speed_of_sound(amb.T, GAMMA_AIR, R_AIR)
    return FreeStream(
        ambient=amb,
        mach=mach,
        a0=a0,
        c0=mach * a0,
        Tt0=amb.T * total_temperature_ratio(mach, GAMMA_AIR),
        Pt0=amb.P * total_pressure_ratio(mach, GAMMA_AIR),
        theta=theta,
        delta=delta,
        mass_flow_actual=actual_mass_flow(mass_flow_design, theta, delta),
    )
