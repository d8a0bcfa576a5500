"""Energy accounting for the PDV.

Components:
    BatteryStatus: On-board energy store, remaining energy never negative.
    LegCost: Distance, time and energy of one flight leg.
    flight_time: Leg duration from distance and cruise speed.
    flight_energy_cost: Leg energy from duration, power and per-leg overhead.
    leg_cost: Full cost of the straight leg between two points.
    ipt_energy_cost: Energy spent topping up a node capacitor over IPT.

Example:
    >>> from pdvsim.energy import BatteryStatus
    >>> battery = BatteryStatus(187.0)
    >>> battery.consume_energy(3.72)
    True
"""

from .accountant import LegCost, flight_energy_cost, flight_time, ipt_energy_cost, leg_cost
from .battery import BatteryStatus

__all__ = [
    "BatteryStatus",
    "LegCost",
    "flight_energy_cost",
    "flight_time",
    "ipt_energy_cost",
    "leg_cost",
]
