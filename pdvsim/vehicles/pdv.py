"""Powered Delivery Vehicle state with state machine-driven flight phases.

The PDV is a mutable record of where the drone is, how long and how far it
has flown and how much energy it has left, plus the fixed parameters that
characterise its flight. Parameters are held by composition in a
PdvParameters record; sensor nodes are independent entities the PDV never
owns.

State Machine:
    FlightState drives the PDV through one mission::

        IDLE -> EN_ROUTE -> CHARGING -> EN_ROUTE -> ... -> RTH -> DONE
        IDLE -> DONE            (launch refused)
        DONE -> IDLE            (reset between runs)

    reset() is accepted only in IDLE or DONE. Requesting it in any other
    state raises IllegalTransitionError and leaves the PDV untouched.

Mutation:
    Only the simulation driver mutates a PDV, through fly_to(), strand_at()
    and transfer_energy(). Each method is all-or-nothing: fly_to() and
    transfer_energy() refuse a draw the battery cannot cover without changing
    any field.

Example:
    >>> from pdvsim.config import PdvParameters
    >>> pdv = PDV(PdvParameters())
    >>> pdv.state
    <FlightState.IDLE: 1>
    >>> pdv.remaining_energy
    187.0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
import logging

from pdvsim.config import PdvParameters
from pdvsim.energy import BatteryStatus, LegCost
from pdvsim.errors import IllegalTransitionError
from pdvsim.geo import Point
from pdvsim.state import Action, StateMachine

logger = logging.getLogger(__name__)


class FlightState(Enum):
    """Flight phases of a PDV mission.

    States:
        IDLE: On the ground at base, ready to launch.
        EN_ROUTE: Flying towards the next waypoint.
        CHARGING: Hovering over a node and transferring energy over IPT.
        RTH: Returning straight to base.
        DONE: Mission over, back at base (or launch refused).
    """

    IDLE = auto()
    EN_ROUTE = auto()
    CHARGING = auto()
    RTH = auto()
    DONE = auto()


@dataclass(frozen=True)
class PdvStatus:
    """Immutable snapshot of the PDV's mutable state.

    Attributes:
        state (FlightState): Current flight phase.
        position (Point): Current position [m].
        flight_time (float): Elapsed flight time [h].
        flight_distance (float): Accumulated flight distance [m].
        remaining_energy (float): Remaining battery energy [Wh].
    """

    state: FlightState
    position: Point
    flight_time: float
    flight_distance: float
    remaining_energy: float


class PDV:
    """Powered Delivery Vehicle.

    Attributes:
        params (PdvParameters): Fixed flight and IPT parameters.
        battery (BatteryStatus): On-board energy store.
        position (Point): Current position [m].
        flight_time (float): Elapsed flight time [h].
        flight_distance (float): Accumulated flight distance [m].
    """

    params: PdvParameters
    battery: BatteryStatus
    position: Point
    flight_time: float
    flight_distance: float

    def __init__(self, params: PdvParameters | None = None, initial_energy: float | None = None):
        """Create a PDV at base with zero time and distance.

        Args:
            params (PdvParameters | None): Fixed parameters. Defaults to PdvParameters().
            initial_energy (float | None): Energy at launch [Wh]. Defaults to
                ``params.full_energy``; must not exceed it.

        Raises:
            InvalidArgumentError: If the initial energy is negative or above full energy.
        """
        self.params = params if params is not None else PdvParameters()
        self._initial_energy = (
            self.params.full_energy if initial_energy is None else float(initial_energy)
        )
        self.battery = BatteryStatus(self.params.full_energy, self._initial_energy)
        self.position = self.params.base
        self.flight_time = 0.0
        self.flight_distance = 0.0

        self._state_machine = StateMachine(
            FlightState.IDLE,
            {
                FlightState.IDLE: [
                    Action(FlightState.EN_ROUTE),
                    Action(FlightState.DONE),
                ],
                FlightState.EN_ROUTE: [
                    Action(FlightState.CHARGING),
                    Action(FlightState.RTH),
                ],
                FlightState.CHARGING: [Action(FlightState.EN_ROUTE)],
                FlightState.RTH: [Action(FlightState.DONE)],
                FlightState.DONE: [Action(FlightState.IDLE, self._restore)],
            },
        )

    @property
    def state(self) -> FlightState:
        return self._state_machine.current

    @property
    def remaining_energy(self) -> float:
        """Remaining battery energy [Wh]."""
        return self.battery.current

    @property
    def initial_energy(self) -> float:
        return self._initial_energy

    @property
    def speed(self) -> float:
        """Cruise speed [m/h]."""
        return self.params.cruise_speed

    @property
    def altitude(self) -> float:
        """Flight altitude [m], metadata only."""
        return self.params.flight_altitude

    def transition_to(self, state: FlightState) -> None:
        """Move to ``state`` through the flight state machine.

        Raises:
            IllegalTransitionError: If the transition is not allowed from the current state.
        """
        previous = self.state
        self._state_machine.request_transition(state)
        logger.debug("PDV %s -> %s", previous.name, state.name)

    def reset(self) -> None:
        """Restore the launch state: base position, initial energy, zero time and distance.

        Raises:
            IllegalTransitionError: If the PDV is neither IDLE nor DONE.
        """
        if self.state is FlightState.IDLE:
            self._restore()
        elif self.state is FlightState.DONE:
            self.transition_to(FlightState.IDLE)
        else:
            msg = f"Cannot reset PDV while {self.state.name}"
            raise IllegalTransitionError(msg)

    def _restore(self) -> None:
        self.battery = BatteryStatus(self.params.full_energy, self._initial_energy)
        self.position = self.params.base
        self.flight_time = 0.0
        self.flight_distance = 0.0

    def fly_to(self, destination: Point, cost: LegCost) -> bool:
        """Fly the leg to ``destination`` and book its cost.

        Args:
            destination (Point): End of the leg.
            cost (LegCost): Precomputed cost of the leg from the current position.

        Returns:
            bool: True if the leg was flown, False if the battery cannot cover
                it (nothing is changed in that case).
        """
        if not self.battery.consume_energy(cost.energy):
            return False
        self.position = destination
        self.flight_distance += cost.distance
        self.flight_time += cost.time
        return True

    def strand_at(self, destination: Point, cost: LegCost) -> float:
        """Book an attempted leg the battery cannot cover.

        Distance and time of the leg are recorded, the battery is drained to
        zero and the PDV is placed at ``destination``.

        Returns:
            float: Energy actually drawn, i.e. what was left in the battery [Wh].
        """
        drawn = self.battery.drain()
        self.position = destination
        self.flight_distance += cost.distance
        self.flight_time += cost.time
        return drawn

    def transfer_energy(self, energy: float) -> bool:
        """Spend ``energy`` Wh on inductive power transfer.

        Returns:
            bool: True if the energy was drawn, False if the battery cannot cover it.
        """
        return self.battery.consume_energy(energy)

    def get_status(self) -> PdvStatus:
        return PdvStatus(
            state=self.state,
            position=self.position,
            flight_time=self.flight_time,
            flight_distance=self.flight_distance,
            remaining_energy=self.remaining_energy,
        )

    def __repr__(self) -> str:
        return (
            f"PDV(state={self.state.name}, pos={self.position}, "
            f"t={self.flight_time:.4f}h, d={self.flight_distance:.1f}m, "
            f"e={self.remaining_energy:.3f}Wh)"
        )
