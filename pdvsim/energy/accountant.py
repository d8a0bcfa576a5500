"""Energy and time accounting for flight legs and inductive power transfer.

Every function in this module is pure: it reads its arguments, returns a
number or an immutable record, and mutates nothing. The unit contract is
fixed (meters, hours, watt-hours, watts, m/h, farads, volts), so no value is
converted on the way in or out.

Formulas:
    Flight leg between two points ``d`` meters apart at speed ``v``::

        t = d / v                         [h]
        E_flight = P * (t + overhead)     [Wh]

    ``overhead`` is the per-leg take-off/hover allowance, 5.6e-3 h by default.

    IPT top-up of a node capacitor from ``v_cur`` to ``v_max``::

        E_ipt = C * (v_max - v_cur)^2 / (2 * eta_rf2dc * 3600)    [Wh]

Example:
    >>> from pdvsim.config import PdvParameters
    >>> from pdvsim.geo import Point
    >>> cost = leg_cost(Point(0, 0), Point(100, 0), PdvParameters())
    >>> round(cost.energy, 2)
    3.72
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from pdvsim.config import DEFAULT_PER_LEG_OVERHEAD_HOURS, SECONDS_PER_HOUR, PdvParameters
from pdvsim.errors import InvalidArgumentError
from pdvsim.geo import Point
from pdvsim.sensors import SensorNode


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            msg = f"{name} must be finite, got {value!r}"
            raise InvalidArgumentError(msg)


@dataclass(frozen=True)
class LegCost:
    """Cost of one straight flight leg.

    Attributes:
        distance (float): Leg length [m].
        time (float): Flight time [h], excluding the per-leg overhead.
        energy (float): Energy drawn over the leg, overhead included [Wh].
    """

    distance: float
    time: float
    energy: float


def flight_time(distance: float, speed: float) -> float:
    """Time needed to fly ``distance`` meters at ``speed`` m/h.

    Raises:
        InvalidArgumentError: If an input is non-finite, the distance is negative
            or the speed is not strictly positive.
    """
    _require_finite(distance=distance, speed=speed)
    if distance < 0:
        msg = f"distance cannot be negative, got {distance}"
        raise InvalidArgumentError(msg)
    if speed <= 0:
        msg = f"speed must be positive, got {speed}"
        raise InvalidArgumentError(msg)
    return distance / speed


def flight_energy_cost(
    time: float, power: float, overhead: float = DEFAULT_PER_LEG_OVERHEAD_HOURS
) -> float:
    """Energy drawn by a leg of ``time`` hours at ``power`` watts [Wh]."""
    _require_finite(time=time, power=power, overhead=overhead)
    return power * (time + overhead)


def leg_cost(start: Point, end: Point, params: PdvParameters) -> LegCost:
    """Distance, time and energy of the straight leg from ``start`` to ``end``."""
    d = start.distance_to(end)
    t = flight_time(d, params.cruise_speed)
    e = flight_energy_cost(t, params.cruise_power, params.per_leg_overhead_hours)
    return LegCost(distance=d, time=t, energy=e)


def ipt_energy_cost(node: SensorNode, efficiency: float) -> float:
    """Energy spent by the PDV to top a node's capacitor up to ``v_max`` [Wh].

    A node already at or above ``v_max`` costs nothing.

    Raises:
        InvalidArgumentError: If an input is non-finite, the capacitance is not
            positive or the efficiency is outside (0, 1].
    """
    _require_finite(
        capacitance=node.capacitance,
        v_max=node.v_max,
        v_current=node.v_current,
        efficiency=efficiency,
    )
    if node.capacitance <= 0:
        msg = f"capacitance must be positive, got {node.capacitance}"
        raise InvalidArgumentError(msg)
    if not 0 < efficiency <= 1:
        msg = f"efficiency must be in (0, 1], got {efficiency}"
        raise InvalidArgumentError(msg)

    if node.v_current >= node.v_max:
        return 0.0
    dv = node.v_max - node.v_current
    return node.capacitance * dv * dv / (2 * efficiency * SECONDS_PER_HOUR)
