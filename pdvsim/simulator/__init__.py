"""Flight simulation engine.

Exports:
    FlightSimulator: Drives a PDV along a path with RTH look-ahead.
    FlightResult: Outcome of one run.
    FlightLeg, ChargeRecord, LegKind: Flight and IPT log records.
    FlightAnalyzer: Summaries across repeated runs.
"""

from .analyzer import FlightAnalyzer
from .flight import FlightSimulator
from .result import ChargeRecord, FlightLeg, FlightResult, LegKind

__all__ = [
    "ChargeRecord",
    "FlightAnalyzer",
    "FlightLeg",
    "FlightResult",
    "FlightSimulator",
    "LegKind",
]
