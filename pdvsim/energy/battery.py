"""On-board energy store of the PDV.

The battery tracks the maximum capacity and the remaining energy in
watt-hours. Consumption is all-or-nothing: a draw larger than the remaining
energy is refused and leaves the battery untouched, so the remaining energy
never goes negative. A shortfall within ENERGY_TOLERANCE counts as an exact
draw and empties the battery. drain() empties the battery explicitly when
the caller must account for an infeasible draw.
"""

import math

from pdvsim.errors import InvalidArgumentError

ENERGY_TOLERANCE = 1e-9
"""Shortfall [Wh] below which a draw still succeeds and empties the battery."""


class BatteryStatus:
    """Manages the energy store and energy consumption of a PDV.

    Attributes:
        _capacity (float): Maximum energy [Wh].
        _current (float): Remaining energy [Wh].
    """

    _capacity: float
    _current: float

    def __init__(self, capacity: float, current: float | None = None):
        """Initialize BatteryStatus with a capacity and an initial charge.

        Args:
            capacity (float): Maximum energy [Wh].
            current (float | None): Initial energy [Wh]. Defaults to a full battery.

        Raises:
            InvalidArgumentError: If a value is non-finite or negative, or if the
                current charge exceeds capacity.
        """
        if current is None:
            current = capacity
        if not (math.isfinite(capacity) and math.isfinite(current)):
            msg = f"Battery values must be finite, got {capacity!r}, {current!r}"
            raise InvalidArgumentError(msg)
        if capacity < 0 or current < 0:
            msg = "Battery capacity and charge cannot be negative"
            raise InvalidArgumentError(msg)
        if current > capacity:
            msg = f"Battery charge {current} Wh exceeds capacity {capacity} Wh"
            raise InvalidArgumentError(msg)

        self._capacity = float(capacity)
        self._current = float(current)

    @property
    def current(self) -> float:
        """Remaining energy [Wh]."""
        return self._current

    def consume_energy(self, energy: float) -> bool:
        """Draw energy from the battery.

        Args:
            energy (float): Amount of energy to draw [Wh].

        Returns:
            bool: True if the energy was drawn, False if the charge is insufficient.

        Raises:
            InvalidArgumentError: If the amount is negative or non-finite.
        """
        if not math.isfinite(energy) or energy < 0:
            msg = f"Energy consumption must be a non-negative number, got {energy!r}"
            raise InvalidArgumentError(msg)

        if self._current >= energy:
            self._current = self._current - energy
            return True
        # Sums of rounded draws may fall a few ulps short of the same amounts added up front
        if math.isclose(self._current, energy, rel_tol=0.0, abs_tol=ENERGY_TOLERANCE):
            self._current = 0.0
            return True
        return False

    def drain(self) -> float:
        """Empty the battery.

        Returns:
            float: Energy that was left before draining [Wh].
        """
        drained = self._current
        self._current = 0.0
        return drained

    def __repr__(self) -> str:
        return f"BatteryStatus({self._current:.3f}/{self._capacity:.3f} Wh)"
