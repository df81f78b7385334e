"""Compressor stage model (fan 2→2.5, HPC 2.5→3)."""

from __future__ import annotations

from dataclasses import dataclass

from tfan.core.thermo import compressor_temperature_ratio
from tfan.utils.constants import CP_AIR, GAMMA_AIR


@dataclass(frozen=True)
class CompressorResult:
    """Compressor exit state and absorbed work."""

    Pt: float  # Pa
    Tt: float  # K
    pressure_ratio: float
    specific_work: float  # J/kg of compressed flow


def compress(Pt_in: float, Tt_in: float, pressure_ratio: float, efficiency: float) -> CompressorResult:
    """Apply a pressure ratio with the efficiency-based temperature rise.

    Args:
        Pt_in: Inlet total pressure [Pa].
        Tt_in: Inlet total temperature [K].
        pressure_ratio: Stage total-pressure ratio π.
        efficiency: Stage efficiency η.

    Returns:
        CompressorResult with exit state and cp·ΔTt work.
    """
    Tt_out = Tt_in * compressor_temperature_ratio(pressure_ratio, efficiency, GAMMA_AIR)
    return CompressorResult(
        Pt=Pt_in * pressure_ratio,
        Tt=Tt_out,
        pressure_ratio=pressure_ratio,
        specific_work=CP_AIR * (Tt_out - Tt_in),
    )


def core_flow_fraction(beta: float, delta_1: float, delta_2: float) -> float:
    """Core flow left at the burner after bleed and turbine cooling offtakes."""
    return 1.0 - beta - delta_1 - delta_2
