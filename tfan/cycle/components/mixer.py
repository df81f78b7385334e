"""Mixer: LPT-exit core stream + bypass duct stream → station 6."""

from __future__ import annotations

from dataclasses import dataclass

from tfan.core.thermo import gamma_from_cp
from tfan.utils.constants import CP_AIR, CP_GAS, R_AIR


@dataclass(frozen=True)
class MixerResult:
    """Mixed-exhaust state."""

    Pt: float  # Pa
    Tt: float  # K
    cp: float  # J/(kg·K)
    gamma: float
    m_core: float
    m_bypass: float

    @property
    def m_total(self) -> float:
        return self.m_core + self.m_bypass


def mix(
    m_core: float,
    Tt_core: float,
    Pt_core: float,
    m_bypass: float,
    Tt_bypass: float,
    Pt_bypass: float,
    sigma_bypass: float,
    sigma_m: float,
) -> MixerResult:
    """Mass-weighted mixing of the core and bypass streams.

    The bypass stream only loses pressure in its duct (σ_bypass); the
    mixed stream loses a further σ_m. Mixed cp is the mass-weighted
    average and γ follows from cp and R.
    """
    m_total = m_core + m_bypass
    cp_mix = (m_core * CP_GAS + m_bypass * CP_AIR) / m_total
    Tt = (m_core * CP_GAS * Tt_core + m_bypass * CP_AIR * Tt_bypass) / (m_total * cp_mix)
    Pt = ((m_core * Pt_core + m_bypass * Pt_bypass * sigma_bypass) / m_total) * sigma_m
    return MixerResult(
        Pt=Pt,
        Tt=Tt,
        cp=cp_mix,
        gamma=gamma_from_cp(cp_mix, R_AIR),
        m_core=m_core,
        m_bypass=m_bypass,
    )
