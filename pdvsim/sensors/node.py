"""Sensor node model for the IPT recharging mission."""

from __future__ import annotations

from dataclasses import dataclass, field
import math

from pdvsim.errors import InvalidArgumentError
from pdvsim.geo import Point


@dataclass
class SensorNode:
    """A ground sensor node powered by a supercapacitor.

    The node's capacitor is topped up from ``v_current`` to ``v_max`` when the
    PDV hovers over it. The service request stays raised until a visit clears
    it through mark_charged().

    Attributes:
        node_id (int): Identifier, unique within a catalog.
        position (Point): Node position [m].
        capacitance (float): Capacitor capacitance [F], strictly positive.
        v_max (float): Capacitor target voltage [V].
        v_current (float): Capacitor voltage before the visit [V], in [0, v_max].
        residual_energy (float): Residual energy reported by the node [Wh].
        requests_service (bool): Whether the node asked to be recharged.
        charged (bool): Set once the PDV has serviced the node.
    """

    node_id: int
    position: Point
    capacitance: float
    v_max: float
    v_current: float = 0.0
    residual_energy: float = 0.0
    requests_service: bool = True
    charged: bool = field(default=False)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check the node invariants.

        Raises:
            InvalidArgumentError: If a value is non-finite, the capacitance is not
                positive, or the voltage lies outside [0, v_max].
        """
        if not isinstance(self.position, Point):
            msg = f"Node {self.node_id}: position must be a Point, got {self.position!r}"
            raise InvalidArgumentError(msg)
        for name in ("capacitance", "v_max", "v_current", "residual_energy"):
            value = getattr(self, name)
            if not math.isfinite(value):
                msg = f"Node {self.node_id}: {name} must be finite, got {value!r}"
                raise InvalidArgumentError(msg)
        if self.capacitance <= 0:
            msg = f"Node {self.node_id}: capacitance must be positive, got {self.capacitance}"
            raise InvalidArgumentError(msg)
        if self.v_max < 0:
            msg = f"Node {self.node_id}: v_max cannot be negative, got {self.v_max}"
            raise InvalidArgumentError(msg)
        if not 0 <= self.v_current <= self.v_max:
            msg = (
                f"Node {self.node_id}: v_current {self.v_current} V "
                f"outside [0, {self.v_max}] V"
            )
            raise InvalidArgumentError(msg)

    def mark_charged(self) -> None:
        """Record a completed IPT visit."""
        self.v_current = self.v_max
        self.requests_service = False
        self.charged = True

    def __repr__(self) -> str:
        return (
            f"SensorNode(id={self.node_id}, pos={self.position}, "
            f"v={self.v_current:.2f}/{self.v_max:.2f}V, request={self.requests_service})"
        )
