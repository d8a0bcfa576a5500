"""Return-to-Home policy.

Before each waypoint the PDV checks that its remaining energy covers the
whole look-ahead: flying to the waypoint, charging the node there, flying
from that node back to base, plus a configured safety margin. If it does
not, the PDV aborts and returns home from where it is.

The comparison is inclusive: exactly enough energy means continue.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from pdvsim.config import PdvParameters
from pdvsim.energy import LegCost, ipt_energy_cost, leg_cost
from pdvsim.geo import Point
from pdvsim.sensors import SensorNode
from pdvsim.vehicles import PDV

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RthDecision:
    """Outcome of the energy look-ahead for one waypoint.

    Attributes:
        outbound (LegCost): Leg from the PDV position to the waypoint.
        charge_energy (float): IPT energy needed at the waypoint [Wh], 0 without a node.
        homebound (LegCost): Leg from the waypoint back to base.
        safety_margin (float): Reserve energy added to the requirement [Wh].
        available (float): PDV remaining energy at decision time [Wh].
    """

    outbound: LegCost
    charge_energy: float
    homebound: LegCost
    safety_margin: float
    available: float

    @property
    def required(self) -> float:
        """Total energy needed to service the waypoint and still get home [Wh]."""
        return (
            self.outbound.energy + self.charge_energy + self.homebound.energy + self.safety_margin
        )

    @property
    def proceed(self) -> bool:
        """True to continue to the waypoint, False to return home."""
        return self.available >= self.required


class RthPolicy:
    """Decides between continuing to the next waypoint and returning home."""

    def __init__(self, params: PdvParameters):
        self.params = params

    def evaluate(self, pdv: PDV, waypoint: Point, node: SensorNode | None = None) -> RthDecision:
        """Run the energy look-ahead for ``waypoint``.

        Args:
            pdv (PDV): Vehicle whose position and remaining energy are checked.
            waypoint (Point): Proposed next waypoint.
            node (SensorNode | None): Node located at the waypoint, if any.

        Returns:
            RthDecision: The costs considered and the resulting decision.
        """
        outbound = leg_cost(pdv.position, waypoint, self.params)
        charge = 0.0 if node is None else ipt_energy_cost(node, self.params.rf2dc_efficiency)
        homebound = leg_cost(waypoint, self.params.base, self.params)
        decision = RthDecision(
            outbound=outbound,
            charge_energy=charge,
            homebound=homebound,
            safety_margin=self.params.safety_margin,
            available=pdv.remaining_energy,
        )
        logger.debug(
            "Look-ahead to %s: required %.6f Wh, available %.6f Wh -> %s",
            waypoint,
            decision.required,
            decision.available,
            "continue" if decision.proceed else "RTH",
        )
        return decision
