"""Unit conversion utilities for TFAN.

Thin layer over pint with helpers for the quantities the cycle model
reports (thrust and specific fuel consumption) and parsing of
quantities given with units on the command line.
"""

from __future__ import annotations

from functools import lru_cache

import pint

_ureg = pint.UnitRegistry()


def get_unit_registry() -> pint.UnitRegistry:
    """Return the shared pint UnitRegistry instance."""
    return _ureg


Q_ = _ureg.Quantity

UNIT_SYSTEMS = ("si", "imperial")


def quantity_to(expr: str, unit: str) -> float:
    """Parse a quantity string such as ``"36089 ft"`` and return its magnitude in *unit*.

    Raises:
        ValueError: If *expr* is not a quantity with the dimension of *unit*.
    """
    try:
        return float(Q_(expr).to(unit).magnitude)
    except (pint.errors.PintError, TypeError, ValueError) as exc:
        raise ValueError(f"Cannot read '{expr}' as a quantity in {unit}: {exc}") from None


def thrust_from_si(value_n: float, unit: str) -> float:
    """Convert thrust from Newtons to target unit (e.g. "kN", "lbf")."""
    return Q_(value_n, "N").to(unit).magnitude


def sfc_from_si(value: float, unit: str) -> float:
    """Convert SFC from kg/(N·h) to target unit.

    ``"lb/(lbf*hour)"`` gives the customary imperial figure (1 kg/(N·h) is
    about 9.81 lb/(lbf·h)).
    """
    return Q_(value, "kg/(N*hour)").to(unit).magnitude


@lru_cache(maxsize=256)
def convert(value: float, from_unit: str, to_unit: str) -> float:
    """General-purpose unit conversion.

    Args:
        value: Numeric value in *from_unit*.
        from_unit: Source unit string.
        to_unit: Target unit string.

    Returns:
        Converted numeric value.
    """
    return Q_(value, from_unit).to(to_unit).magnitude
