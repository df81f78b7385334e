"""Gas-path station identifiers and per-station state."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


class StationId(str, Enum):
    """Gas-path stations in flow order.

    Members compare equal to their string id, so ``stations["3"]`` and
    ``stations[StationId.HPC_EXIT]`` address the same entry.
    """

    FREE_STREAM = "0"
    FAN_INLET = "2"
    FAN_EXIT = "2.5"
    HPC_EXIT = "3"
    COMBUSTOR_EXIT = "4"
    HPT_EXIT = "4.5"
    LPT_EXIT = "5"
    MIXER_EXIT = "6"
    AFTERBURNER_EXIT = "7"
    NOZZLE_EXIT = "9"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def index(self) -> int:
        """Position in flow order."""
        return list(StationId).index(self)


_LABELS = {
    StationId.FREE_STREAM: "Free stream",
    StationId.FAN_INLET: "Fan inlet",
    StationId.FAN_EXIT: "Fan exit",
    StationId.HPC_EXIT: "HPC exit",
    StationId.COMBUSTOR_EXIT: "Combustor exit",
    StationId.HPT_EXIT: "HPT exit",
    StationId.LPT_EXIT: "LPT exit",
    StationId.MIXER_EXIT: "Mixer exit",
    StationId.AFTERBURNER_EXIT: "Afterburner exit",
    StationId.NOZZLE_EXIT: "Nozzle exit",
}


@dataclass(frozen=True)
class StationResult:
    """State at one gas-path station.

    Only the fields meaningful at the station are populated; the rest
    stay None.
    """

    station: StationId
    Pt: float  # Pa, total pressure
    Tt: float  # K, total temperature
    P: float | None = None  # Pa, static pressure
    T: float | None = None  # K, static temperature
    V: float | None = None  # m/s
    f: float | None = None  # fuel-air ratio
    m_rel: float | None = None  # mass flow relative to core intake flow
    cp: float | None = None  # J/(kg·K)
    gamma: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Populated fields only, with the station id as a plain string."""
        out: dict[str, Any] = {"station": self.station.value}
        for f in fields(self):
            if f.name == "station":
                continue
            val = getattr(self, f.name)
            if val is not None:
                out[f.name] = val
        return out
