"""Afterburner: station 6 → station 7."""

from __future__ import annotations

from dataclasses import dataclass

from tfan.cycle.components.mixer import MixerResult
from tfan.utils.constants import CP_GAS, ETA_AFTERBURNER, FUEL_LHV, GAMMA_GAS


@dataclass(frozen=True)
class AfterburnerResult:
    """Afterburner exit state."""

    Pt: float  # Pa
    Tt: float  # K
    fuel_fraction: float  # afterburner fuel relative to core intake flow
    m_rel: float  # flow entering the nozzle
    lit: bool


def afterburn(
    mixed: MixerResult,
    afterburner_on: bool,
    tt_ab: float,
    sigma_dry: float,
    sigma_wet: float,
) -> AfterburnerResult:
    """Reheat the mixed stream to *tt_ab* when lit.

    Unlit, the duct only applies its dry recovery and temperature is
    unchanged.
    """
    if not afterburner_on:
        return AfterburnerResult(
            Pt=mixed.Pt * sigma_dry,
            Tt=mixed.Tt,
            fuel_fraction=0.0,
            m_rel=mixed.m_total,
            lit=False,
        )

    fuel = mixed.m_total * (CP_GAS * tt_ab - mixed.cp * mixed.Tt) / (ETA_AFTERBURNER * FUEL_LHV)
    fuel = max(fuel, 0.0)
    return AfterburnerResult(
        Pt=mixed.Pt * sigma_wet,
        Tt=tt_ab,
        fuel_fraction=fuel,
        m_rel=mixed.m_total + fuel,
        lit=True,
    )


def nozzle_gas_properties(
    afterburner_on: bool, textbook_mode: bool, mixed: MixerResult
) -> tuple[float, float]:
    """(cp, γ) used downstream of the afterburner.

    Hot-gas values when lit or in textbook mode, mixed-stream values
    otherwise.
    """
    if afterburner_on or textbook_mode:
        return CP_GAS, GAMMA_GAS
    return mixed.cp, mixed.gamma
