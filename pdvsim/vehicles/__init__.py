"""PDV vehicle model.

Exports:
    PDV: Powered Delivery Vehicle with state machine-driven flight phases.
    FlightState: Flight phase enumeration.
    PdvStatus: Immutable snapshot of the PDV state.
"""

from .pdv import PDV, FlightState, PdvStatus

__all__ = ["PDV", "FlightState", "PdvStatus"]
