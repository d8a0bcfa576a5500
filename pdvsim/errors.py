"""Exception hierarchy for the PDV flight simulator.

All errors raised by pdvsim derive from PdvSimError so callers can catch the
whole family at once. Errors raised after a run has been accepted carry the
partial FlightResult in their ``result`` attribute.

Energy exhaustion during Return-to-Home is not an exception: the run still
terminates cleanly and the condition is reported through
FlightResult.energy_exhausted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdvsim.simulator.result import FlightResult


class PdvSimError(Exception):
    """Base class for every error raised by the simulator.

    Attributes:
        result (FlightResult | None): Partial result of the run, when one exists.
    """

    def __init__(self, msg: str = "", result: FlightResult | None = None):
        super().__init__(msg)
        self.result = result


class InvalidArgumentError(PdvSimError, ValueError):
    """Raised at entry when an input violates a numeric or structural invariant.

    Examples are non-finite coordinates, a non-positive capacitance, a voltage
    above v_max or a cruise speed that is not strictly positive. No state is
    mutated when this error is raised.
    """


class EmptyPathError(PdvSimError):
    """Raised when a flight is requested with zero waypoints."""


class InsufficientRequestsError(PdvSimError):
    """Raised when fewer nodes request service than the launch threshold.

    Attributes:
        requests (int): Number of nodes requesting service.
        minimum (int): Launch threshold from the PDV parameters.
    """

    def __init__(self, requests: int, minimum: int, result: FlightResult | None = None):
        msg = f"Only {requests} node(s) request service, at least {minimum} required"
        super().__init__(msg, result)
        self.requests = requests
        self.minimum = minimum


class IllegalTransitionError(PdvSimError, ValueError):
    """Raised by the state machine when a transition is not in its graph."""
