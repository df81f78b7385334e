"""Turbofan cycle analysis for TFAN.

Provides the per-component models (inlet, compressor, combustor, turbine,
mixer, afterburner, nozzle) and the station-by-station cycle solver.
"""

from tfan.cycle.solver import EngineResult, solve_engine
from tfan.cycle.stations import StationId, StationResult

__all__ = ["EngineResult", "StationId", "StationResult", "solve_engine"]
