"""Result records produced by a flight simulation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pdvsim.geo import Point
from pdvsim.vehicles import FlightState


class LegKind(Enum):
    """Purpose of a flight leg."""

    OUTBOUND = "outbound"
    HOME = "home"


@dataclass(frozen=True)
class FlightLeg:
    """One flown (or attempted) leg of the mission.

    Attributes:
        kind (LegKind): Outbound leg to a waypoint or the homebound leg.
        start (Point): Leg start [m].
        end (Point): Leg end [m].
        distance (float): Leg length [m].
        time (float): Flight time [h].
        energy_cost (float): Energy the leg requires [Wh].
        energy_drawn (float): Energy actually drawn, lower than the cost only
            when the battery ran dry on the way home [Wh].
    """

    kind: LegKind
    start: Point
    end: Point
    distance: float
    time: float
    energy_cost: float
    energy_drawn: float


@dataclass(frozen=True)
class ChargeRecord:
    """IPT energy spent on one node [Wh]."""

    node_id: int
    energy: float


@dataclass
class FlightResult:
    """Outcome of a flight simulation run.

    Attributes:
        serviced (list[int]): Ids of initially requesting nodes serviced, in visit order.
        initial_requests (int): Nodes requesting service at launch time.
        charged_energy (float): Total IPT energy spent on nodes [Wh].
        flight_time (float): Total flight time [h].
        flight_distance (float): Total flight distance [m].
        initial_energy (float): PDV energy at launch [Wh].
        remaining_energy (float): PDV energy at the end of the run [Wh].
        terminal_state (FlightState): PDV state when the run ended.
        energy_exhausted (bool): The return leg could not be covered and the
            battery was drained to zero.
        rth_triggered (bool): The RTH policy aborted the path before it was exhausted.
        legs (list[FlightLeg]): Flight log.
        charges (list[ChargeRecord]): IPT log.
    """

    serviced: list[int] = field(default_factory=list)
    initial_requests: int = 0
    charged_energy: float = 0.0
    flight_time: float = 0.0
    flight_distance: float = 0.0
    initial_energy: float = 0.0
    remaining_energy: float = 0.0
    terminal_state: FlightState = FlightState.IDLE
    energy_exhausted: bool = False
    rth_triggered: bool = False
    legs: list[FlightLeg] = field(default_factory=list)
    charges: list[ChargeRecord] = field(default_factory=list)

    @property
    def serviced_count(self) -> int:
        return len(self.serviced)

    @property
    def completion_ratio(self) -> float:
        """Serviced requesting nodes over initial requesting nodes [%], in [0, 100]."""
        if self.initial_requests <= 0:
            return 0.0
        ratio = 100.0 * self.serviced_count / self.initial_requests
        return min(100.0, max(0.0, ratio))

    @property
    def energy_consumed(self) -> float:
        """Energy drawn from the battery over the run [Wh]."""
        return self.initial_energy - self.remaining_energy

    @property
    def accounted_energy(self) -> float:
        """Sum of the energy booked on flight legs and IPT transfers [Wh]."""
        return sum(leg.energy_drawn for leg in self.legs) + sum(c.energy for c in self.charges)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the flight result."""
        return {
            "terminal_state": self.terminal_state.name,
            "serviced": self.serviced_count,
            "initial_requests": self.initial_requests,
            "completion_ratio": self.completion_ratio,
            "charged_energy": self.charged_energy,
            "flight_time": self.flight_time,
            "flight_distance": self.flight_distance,
            "remaining_energy": self.remaining_energy,
            "energy_exhausted": self.energy_exhausted,
            "rth_triggered": self.rth_triggered,
        }

    def __repr__(self) -> str:
        return (
            f"FlightResult(state={self.terminal_state.name}, "
            f"serviced={self.serviced_count}/{self.initial_requests}, "
            f"completion={self.completion_ratio:.2f}%, "
            f"charged={self.charged_energy:.4f}Wh, t={self.flight_time:.4f}h)"
        )
