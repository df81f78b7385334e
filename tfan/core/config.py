"""Engine configuration and design-file I/O for TFAN.

``EngineInputs`` is the immutable parameter set handed to the cycle
solver. ``DesignState`` bundles inputs with solved results for saving as
JSON; envelope grids and other array data go to a companion ``.npz``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from tfan.utils.units import quantity_to

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineInputs:
    """Operating point and component coefficients for one solve.

    Defaults reproduce the textbook afterburning mixed-flow turbofan case
    (11 km, Mach 1.6). Frozen, so instances are hashable and safe to share
    between sweep workers.
    """

    # Flight condition
    altitude: float = 11.0  # km
    mach: float = 1.6

    # Reference figures (display deltas only)
    ref_fs_wet: float = 1095.0  # N/(kg/s)
    ref_sfc_wet: float = 0.1740  # kg/(N·h)
    ref_fs_dry: float = 643.0  # N/(kg/s)
    ref_sfc_dry: float = 0.1275  # kg/(N·h)

    # Cycle
    mass_flow_design: float = 100.0  # kg/s, sea-level corrected flow
    bypass_ratio: float = 0.4
    fan_pressure_ratio: float = 3.8
    hpc_pressure_ratio: float = 4.474
    tt4: float = 1800.0  # K, turbine-inlet total temperature
    afterburner_on: bool = True
    tt_ab: float = 2000.0  # K, afterburner exit total temperature
    textbook_mode: bool = True  # fixed inlet recovery and hot-gas nozzle properties

    # Component efficiencies
    eta_cL: float = 0.868  # fan
    eta_cH: float = 0.878  # HPC
    eta_tH: float = 0.89  # HPT
    eta_tL: float = 0.91  # LPT
    eta_m: float = 0.98  # mechanical
    eta_b: float = 0.98  # burner

    # Total-pressure recovery coefficients
    sigma_i: float = 0.97  # inlet (textbook mode)
    sigma_b: float = 0.97  # burner
    sigma_bypass: float = 0.98  # bypass duct
    sigma_m: float = 0.97  # mixer
    sigma_e: float = 0.98  # nozzle
    sigma_ab_dry: float = 0.98  # afterburner duct, unlit
    sigma_ab_wet: float = 0.95  # afterburner duct, lit

    # Flow splits (fractions of core intake flow)
    beta: float = 0.01  # overboard bleed
    delta_1: float = 0.05  # HPT cooling air
    delta_2: float = 0.05  # LPT cooling air

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineInputs:
        """Build inputs from a mapping, rejecting unknown keys.

        Missing keys take their default values.

        Raises:
            ValueError: If *data* contains keys that are not input fields.
        """
        known = field_names()
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown engine input(s): {', '.join(unknown)}")
        return cls(**data)


def field_names() -> set[str]:
    """Names of all EngineInputs fields."""
    return {f.name for f in fields(EngineInputs)}


def field_type(name: str) -> type:
    """Python type (bool or float) of an EngineInputs field."""
    for f in fields(EngineInputs):
        if f.name == name:
            return bool if f.type in (bool, "bool") else float
    raise ValueError(f"Unknown engine input: {name}")


# Native unit of inputs that may also be given as a quantity string
_FIELD_UNITS = {"altitude": "km", "mass_flow_design": "kg/s"}


def parse_assignment(expr: str) -> tuple[str, float | bool]:
    """Parse a ``key=value`` override expression against EngineInputs.

    Booleans accept true/false, yes/no, on/off and 1/0. Altitude and
    design mass flow also accept a quantity with units, e.g.
    ``altitude=36089 ft``.

    Raises:
        ValueError: For a malformed expression, unknown key or bad value.
    """
    if "=" not in expr:
        raise ValueError(f"Expected key=value, got '{expr}'")
    key, raw = (s.strip() for s in expr.split("=", 1))
    kind = field_type(key)
    if kind is bool:
        lowered = raw.lower()
        if lowered in ("true", "yes", "on", "1"):
            return key, True
        if lowered in ("false", "no", "off", "0"):
            return key, False
        raise ValueError(f"Invalid boolean for {key}: '{raw}'")
    try:
        return key, float(raw)
    except ValueError:
        if key not in _FIELD_UNITS:
            raise ValueError(f"Invalid number for {key}: '{raw}'") from None
    return key, quantity_to(raw, _FIELD_UNITS[key])


# --- Project metadata ---


@dataclass
class ProjectMeta:
    """Top-level design-file metadata."""

    name: str = "Untitled"
    description: str = ""
    author: str = ""
    version: str = "0.1.0"
    created: str = ""
    modified: str = ""

    def touch(self) -> None:
        """Update the modified timestamp."""
        self.modified = datetime.now(timezone.utc).isoformat()


@dataclass
class DesignState:
    """A saved engine design: inputs plus whatever results were computed."""

    meta: ProjectMeta = field(default_factory=ProjectMeta)
    inputs: dict[str, Any] = field(default_factory=lambda: EngineInputs().to_dict())

    # Aggregate performance (populated from EngineResult.as_dict)
    performance: dict[str, Any] = field(default_factory=dict)

    # Per-station states keyed by station id
    stations: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Sweep summaries (populated by sweep commands)
    sweeps: dict[str, Any] = field(default_factory=dict)

    # Array data stored separately in .npz
    _array_data: dict[str, np.ndarray] = field(default_factory=dict, repr=False)

    def engine_inputs(self) -> EngineInputs:
        return EngineInputs.from_dict(self.inputs)


# --- JSON serialization ---


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        if isinstance(obj, (np.bool_,)):
            return bool(obj)
        return super().default(obj)


def save_design_json(state: DesignState, path: str | Path) -> None:
    """Save design state to a JSON file.

    Arrays stored in ``_array_data`` are written to a companion ``.npz``.
    """
    path = Path(path)
    if not state.meta.created:
        state.meta.created = datetime.now(timezone.utc).isoformat()
    state.meta.touch()

    data = asdict(state)
    data.pop("_array_data", None)

    with open(path, "w") as f:
        json.dump(data, f, indent=2, cls=_NumpyEncoder)

    logger.info("Saved design to %s", path)

    if state._array_data:
        save_arrays_npz(state._array_data, path.with_suffix(".npz"))


def load_design_json(path: str | Path) -> DesignState:
    """Load design state from a JSON file.

    If a companion ``.npz`` file exists, array data is also loaded.

    Raises:
        ValueError: If the stored inputs contain unknown keys.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    meta = ProjectMeta(**data.pop("meta", {}))
    state = DesignState(meta=meta, **data)
    # Fail early on a hand-edited file with bad input names
    state.engine_inputs()

    npz_path = path.with_suffix(".npz")
    if npz_path.exists():
        state._array_data = load_arrays_npz(npz_path)

    return state


def load_inputs_json(path: str | Path) -> EngineInputs:
    """Load EngineInputs from either a bare inputs mapping or a design file."""
    with open(Path(path)) as f:
        data = json.load(f)
    if "inputs" in data and isinstance(data["inputs"], dict):
        data = data["inputs"]
    return EngineInputs.from_dict(data)


def save_inputs_json(inputs: EngineInputs, path: str | Path) -> None:
    """Write EngineInputs as a flat JSON mapping."""
    path = Path(path)
    with open(path, "w") as f:
        json.dump(inputs.to_dict(), f, indent=2)
    logger.info("Saved engine inputs to %s", path)


# --- Array storage ---


def save_arrays_npz(arrays: dict[str, np.ndarray], path: str | Path) -> None:
    """Save a dictionary of numpy arrays to a compressed ``.npz``."""
    path = Path(path)
    np.savez_compressed(path, **arrays)
    logger.info("Saved %d arrays to %s", len(arrays), path)


def load_arrays_npz(path: str | Path) -> dict[str, np.ndarray]:
    """Load all arrays from an ``.npz`` file into a dictionary."""
    with np.load(Path(path)) as data:
        return {key: data[key] for key in data.files}
