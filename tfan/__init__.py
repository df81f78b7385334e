"""TFAN: mixed-exhaust turbofan cycle analysis.

Zero-dimensional, station-by-station performance model of a dual-spool,
mixed-exhaust turbofan with optional afterburner, plus sweep drivers,
optimisation, reports and a command-line interface.
"""

__app_name__ = "tfan"
__version__ = "0.1.0"
