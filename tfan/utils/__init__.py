"""Utility modules for TFAN."""

from tfan.utils.constants import CP_AIR, CP_GAS, P_SL, R_AIR, T_SL
from tfan.utils.units import convert, get_unit_registry

__all__ = ["CP_AIR", "CP_GAS", "P_SL", "R_AIR", "T_SL", "convert", "get_unit_registry"]
