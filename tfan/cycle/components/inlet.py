"""Intake model: free stream (station 0) to fan face (station 2).

The intake is adiabatic, so total temperature is carried through
unchanged; total pressure is reduced by a recovery factor σ_i.
"""

from __future__ import annotations

from dataclasses import dataclass

from tfan.core.atmosphere import FreeStream

SUBSONIC_RECOVERY = 0.97


@dataclass(frozen=True)
class InletResult:
    """Fan-face state."""

    Pt: float  # Pa
    Tt: float  # K
    sigma: float  # applied recovery


def empirical_recovery(mach: float) -> float:
    """Mach-dependent recovery: 0.97 up to Mach 1, then
    0.97·(1 − 0.075·(M − 1)^1.35) for supersonic flight.
    """
    if mach <= 1.0:
        return SUBSONIC_RECOVERY
    return SUBSONIC_RECOVERY * (1.0 - 0.075 * (mach - 1.0) ** 1.35)


def inlet_recovery(mach: float, sigma_i: float, textbook_mode: bool) -> float:
    """Recovery policy: fixed σ_i in textbook mode, empirical otherwise."""
    return sigma_i if textbook_mode else empirical_recovery(mach)


def compute_inlet(fs: FreeStream, sigma_i: float, textbook_mode: bool) -> InletResult:
    sigma = inlet_recovery(fs.mach, sigma_i, textbook_mode)
    return InletResult(Pt=fs.Pt0 * sigma, Tt=fs.Tt0, sigma=sigma)
