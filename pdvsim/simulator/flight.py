"""Flight simulation driver for IPT recharging missions.

The driver takes a PDV, a sensor catalog and a precomputed path, and folds
the path into a FlightResult. It is single-threaded and deterministic: no
operation suspends, and a run is bounded by the number of waypoints.

Simulation Flow:
    1. Entry checks: the path is non-empty and every input satisfies its
       invariants. A failure here raises before anything is mutated.
    2. Task check: at least ``min_requests`` nodes must request service,
       otherwise the launch is refused (IDLE -> DONE) and
       InsufficientRequestsError is raised with a 0 % result.
    3. Waypoint loop (IDLE -> EN_ROUTE): for each waypoint the RTH policy
       runs its energy look-ahead. On continue the waypoint is serviced as a
       whole: flight leg booked, EN_ROUTE -> CHARGING, IPT energy spent, node
       marked charged, CHARGING -> EN_ROUTE. On RTH the loop stops and the
       waypoint is left untouched.
    4. Return home (EN_ROUTE -> RTH -> DONE). If the battery cannot cover the
       return leg the attempt is still booked, the battery is drained to zero,
       the PDV is placed at base and the result is flagged energy_exhausted.

Per-waypoint atomicity:
    The look-ahead covers the outbound leg and the IPT transfer, so once the
    policy says continue both draws succeed. A waypoint is therefore either
    fully serviced (position, time, distance, energy and node state updated)
    or untouched.

Example:
    >>> from pdvsim import PDV, PdvParameters, Point, SensorCatalog, SensorNode
    >>> catalog = SensorCatalog([SensorNode(0, Point(100, 0), capacitance=1.0, v_max=3.0)])
    >>> sim = FlightSimulator(PDV(PdvParameters(min_requests=1)))
    >>> result = sim.flight_simulation(catalog, [Point(100, 0)])
    >>> result.completion_ratio
    100.0
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from pdvsim.energy import LegCost, leg_cost
from pdvsim.errors import (
    EmptyPathError,
    IllegalTransitionError,
    InsufficientRequestsError,
    InvalidArgumentError,
    PdvSimError,
)
from pdvsim.geo import Point
from pdvsim.mission import RthDecision, RthPolicy
from pdvsim.sensors import SensorCatalog, SensorNode
from pdvsim.vehicles import PDV, FlightState

from .result import ChargeRecord, FlightLeg, FlightResult, LegKind

logger = logging.getLogger(__name__)


@dataclass
class _RunLedger:
    """Accumulators of one run, turned into a FlightResult at the end."""

    initial_requests: int
    requesting_ids: frozenset[int]
    initial_energy: float
    serviced: list[int] = field(default_factory=list)
    charged_energy: float = 0.0
    energy_exhausted: bool = False
    rth_triggered: bool = False
    legs: list[FlightLeg] = field(default_factory=list)
    charges: list[ChargeRecord] = field(default_factory=list)


class FlightSimulator:
    """Drives a PDV along a path, recharging the sensor nodes it visits.

    Attributes:
        pdv (PDV): Vehicle driven by the simulator. The simulator has exclusive
            write access to it for the duration of a run.
        policy (RthPolicy): Continue/RTH look-ahead, built from the PDV
            parameters unless given.
    """

    def __init__(self, pdv: PDV, policy: RthPolicy | None = None):
        self.pdv = pdv
        self.policy = policy if policy is not None else RthPolicy(pdv.params)

    def task_check(self, catalog: SensorCatalog) -> bool:
        """Check that enough nodes request service to justify a launch.

        Returns:
            bool: True if the number of requesting nodes reaches ``min_requests``.
        """
        return catalog.requesting_count() >= self.pdv.params.min_requests

    def flight_simulation(self, catalog: SensorCatalog, path: Sequence[Point]) -> FlightResult:
        """Simulate a full mission along ``path`` and return to base.

        Args:
            catalog (SensorCatalog): Sensor nodes; serviced nodes are updated in place.
            path (Sequence[Point]): Intended visit order, base excluded.

        Returns:
            FlightResult: Outcome of the run.

        Raises:
            EmptyPathError: If ``path`` is empty. Nothing is mutated.
            InvalidArgumentError: If a waypoint or node is invalid. Nothing is mutated.
            IllegalTransitionError: If the PDV is mid-flight.
            InsufficientRequestsError: If too few nodes request service; the
                PDV ends in DONE and ``.result`` reports 0 % completion.
        """
        return self._run(catalog, path, max_waypoints=None)

    def single_stage_flight(self, catalog: SensorCatalog, path: Sequence[Point]) -> FlightResult:
        """Simulate one outbound leg to the head of ``path``, one IPT and the return.

        Same checks, formulas and policy as flight_simulation(); waypoints
        after the first are ignored.
        """
        return self._run(catalog, path, max_waypoints=1)

    def _run(
        self, catalog: SensorCatalog, path: Sequence[Point], max_waypoints: int | None
    ) -> FlightResult:
        waypoints = list(path)
        if not waypoints:
            msg = "Flight requested with an empty path"
            raise EmptyPathError(msg, result=self._snapshot_result())
        self._validate_inputs(catalog, waypoints)
        self._prepare_pdv()

        requesting = catalog.requesting_nodes()
        ledger = _RunLedger(
            initial_requests=len(requesting),
            requesting_ids=frozenset(node.node_id for node in requesting),
            initial_energy=self.pdv.remaining_energy,
        )

        if not self.task_check(catalog):
            self.pdv.transition_to(FlightState.DONE)
            result = self._make_result(ledger)
            logger.info(
                "Launch refused: %d requesting node(s), %d required",
                ledger.initial_requests,
                self.pdv.params.min_requests,
            )
            raise InsufficientRequestsError(
                ledger.initial_requests, self.pdv.params.min_requests, result
            )

        logger.info(
            "Launching PDV with %.3f Wh for %d waypoint(s), %d requesting node(s)",
            ledger.initial_energy,
            len(waypoints) if max_waypoints is None else min(len(waypoints), max_waypoints),
            ledger.initial_requests,
        )
        self.pdv.transition_to(FlightState.EN_ROUTE)

        queue = deque(waypoints)
        visited = 0
        while queue and (max_waypoints is None or visited < max_waypoints):
            waypoint = queue.popleft()
            node = catalog.node_at(waypoint)
            decision = self.policy.evaluate(self.pdv, waypoint, node)
            if not decision.proceed:
                ledger.rth_triggered = True
                logger.warning(
                    "RTH before %s: %.6f Wh required, %.6f Wh available",
                    waypoint,
                    decision.required,
                    decision.available,
                )
                break
            self._service_waypoint(waypoint, node, decision, ledger)
            visited += 1

        self._return_home(ledger)
        result = self._make_result(ledger)
        logger.info("Run finished: %r", result)
        return result

    def _validate_inputs(self, catalog: SensorCatalog, waypoints: list[Point]) -> None:
        for i, waypoint in enumerate(waypoints):
            if not isinstance(waypoint, Point):
                msg = f"Waypoint {i} is not a Point: {waypoint!r}"
                raise InvalidArgumentError(msg)
        catalog.validate()

    def _prepare_pdv(self) -> None:
        state = self.pdv.state
        if state is FlightState.DONE:
            self.pdv.reset()
        elif state is not FlightState.IDLE:
            msg = f"Cannot start a run while the PDV is {state.name}"
            raise IllegalTransitionError(msg)

    def _service_waypoint(
        self,
        waypoint: Point,
        node: SensorNode | None,
        decision: RthDecision,
        ledger: _RunLedger,
    ) -> None:
        start = self.pdv.position
        outbound = decision.outbound
        if not self.pdv.fly_to(waypoint, outbound):
            msg = f"Battery refused the leg to {waypoint} cleared by the RTH policy"
            raise PdvSimError(msg, result=self._make_result(ledger))
        ledger.legs.append(self._leg(LegKind.OUTBOUND, start, waypoint, outbound, outbound.energy))
        logger.debug("Reached %s after %.1f m", waypoint, outbound.distance)

        if node is None:
            return

        self.pdv.transition_to(FlightState.CHARGING)
        energy = decision.charge_energy
        if not self.pdv.transfer_energy(energy):
            msg = f"Battery refused the IPT transfer to node {node.node_id}"
            raise PdvSimError(msg, result=self._make_result(ledger))
        node.mark_charged()
        ledger.charged_energy += energy
        ledger.charges.append(ChargeRecord(node.node_id, energy))
        if node.node_id in ledger.requesting_ids and node.node_id not in ledger.serviced:
            ledger.serviced.append(node.node_id)
        logger.debug("Charged node %d with %.6f Wh", node.node_id, energy)
        self.pdv.transition_to(FlightState.EN_ROUTE)

    def _return_home(self, ledger: _RunLedger) -> None:
        self.pdv.transition_to(FlightState.RTH)
        base = self.pdv.params.base
        start = self.pdv.position
        cost = leg_cost(start, base, self.pdv.params)

        if self.pdv.fly_to(base, cost):
            drawn = cost.energy
        else:
            drawn = self.pdv.strand_at(base, cost)
            ledger.energy_exhausted = True
            logger.warning(
                "Energy exhausted on the way home from %s: %.6f Wh needed, %.6f Wh left",
                start,
                cost.energy,
                drawn,
            )
        ledger.legs.append(self._leg(LegKind.HOME, start, base, cost, drawn))
        self.pdv.transition_to(FlightState.DONE)

    @staticmethod
    def _leg(kind: LegKind, start: Point, end: Point, cost: LegCost, drawn: float) -> FlightLeg:
        return FlightLeg(
            kind=kind,
            start=start,
            end=end,
            distance=cost.distance,
            time=cost.time,
            energy_cost=cost.energy,
            energy_drawn=drawn,
        )

    def _make_result(self, ledger: _RunLedger) -> FlightResult:
        return FlightResult(
            serviced=list(ledger.serviced),
            initial_requests=ledger.initial_requests,
            charged_energy=ledger.charged_energy,
            flight_time=self.pdv.flight_time,
            flight_distance=self.pdv.flight_distance,
            initial_energy=ledger.initial_energy,
            remaining_energy=self.pdv.remaining_energy,
            terminal_state=self.pdv.state,
            energy_exhausted=ledger.energy_exhausted,
            rth_triggered=ledger.rth_triggered,
            legs=list(ledger.legs),
            charges=list(ledger.charges),
        )

    def _snapshot_result(self) -> FlightResult:
        return FlightResult(
            flight_time=self.pdv.flight_time,
            flight_distance=self.pdv.flight_distance,
            initial_energy=self.pdv.remaining_energy,
            remaining_energy=self.pdv.remaining_energy,
            terminal_state=self.pdv.state,
        )
