"""Global configuration and PDV parameter definitions.

This module centralises the fixed parameters that characterise the Powered
Delivery Vehicle and the IPT link, together with their default values. All
quantities use the simulator's unit contract without conversion:

    distance [m], time [h], energy [Wh], power [W], speed [m/h],
    capacitance [F], voltage [V].

Defaults:
    DEFAULT_CRUISE_POWER: Level-flight power rating, 363.888 W.
    DEFAULT_CRUISE_SPEED: Approach speed under GPS guidance, 2.16e4 m/h.
    DEFAULT_FLIGHT_ALTITUDE: Flight altitude, 20 m (metadata only).
    DEFAULT_MIN_REQUESTS: Launch threshold on requesting nodes, 20.
    DEFAULT_FULL_ENERGY: Battery energy at launch, 187 Wh.
    DEFAULT_PER_LEG_OVERHEAD_HOURS: Take-off/hover allowance added to every leg, 5.6e-3 h.
    DEFAULT_RF2DC_EFFICIENCY: RF-to-DC conversion efficiency of the IPT link, 0.5.

Example:
    >>> from pdvsim.config import PdvParameters
    >>> params = PdvParameters(min_requests=1)
    >>> params.cruise_speed
    21600.0
    >>> load_parameters("pdv.json")  # doctest: +SKIP
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
import json
import math
from typing import Any

from pdvsim.errors import InvalidArgumentError
from pdvsim.geo import BASE, Point

DEFAULT_CRUISE_POWER = 363.888
DEFAULT_CRUISE_SPEED = 2.16e4
DEFAULT_FLIGHT_ALTITUDE = 20.0
DEFAULT_MIN_REQUESTS = 20
DEFAULT_FULL_ENERGY = 187.0
DEFAULT_PER_LEG_OVERHEAD_HOURS = 5.6e-3
DEFAULT_RF2DC_EFFICIENCY = 0.5
DEFAULT_SAFETY_MARGIN = 0.0

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class PdvParameters:
    """Fixed parameters of a PDV and its IPT link.

    Attributes:
        cruise_power (float): Power drawn in level flight [W].
        cruise_speed (float): Cruise speed [m/h], strictly positive.
        flight_altitude (float): Flight altitude [m]. Stored as metadata, never
            used in an energy or distance formula.
        min_requests (int): Minimum number of requesting nodes required to launch.
        full_energy (float): Battery energy at launch [Wh].
        per_leg_overhead_hours (float): Take-off/hover allowance added to every leg [h].
        rf2dc_efficiency (float): RF-to-DC conversion efficiency, in (0, 1].
        safety_margin (float): Extra energy kept in reserve by the RTH policy [Wh].
        base (Point): Launch and recovery point.

    Raises:
        InvalidArgumentError: If a value is non-finite or out of its valid range.
    """

    cruise_power: float = DEFAULT_CRUISE_POWER
    cruise_speed: float = DEFAULT_CRUISE_SPEED
    flight_altitude: float = DEFAULT_FLIGHT_ALTITUDE
    min_requests: int = DEFAULT_MIN_REQUESTS
    full_energy: float = DEFAULT_FULL_ENERGY
    per_leg_overhead_hours: float = DEFAULT_PER_LEG_OVERHEAD_HOURS
    rf2dc_efficiency: float = DEFAULT_RF2DC_EFFICIENCY
    safety_margin: float = DEFAULT_SAFETY_MARGIN
    base: Point = field(default=BASE)

    def __post_init__(self):
        for f in fields(self):
            if f.name == "base":
                continue
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                msg = f"{f.name} must be numeric, got {value!r}"
                raise InvalidArgumentError(msg)
            if not math.isfinite(value):
                msg = f"{f.name} must be finite, got {value!r}"
                raise InvalidArgumentError(msg)

        if self.cruise_speed <= 0:
            msg = f"cruise_speed must be positive, got {self.cruise_speed}"
            raise InvalidArgumentError(msg)
        if not 0 < self.rf2dc_efficiency <= 1:
            msg = f"rf2dc_efficiency must be in (0, 1], got {self.rf2dc_efficiency}"
            raise InvalidArgumentError(msg)
        for name in ("cruise_power", "full_energy", "per_leg_overhead_hours", "safety_margin"):
            if getattr(self, name) < 0:
                msg = f"{name} cannot be negative, got {getattr(self, name)}"
                raise InvalidArgumentError(msg)
        if self.min_requests < 0 or int(self.min_requests) != self.min_requests:
            msg = f"min_requests must be a non-negative integer, got {self.min_requests}"
            raise InvalidArgumentError(msg)
        if not isinstance(self.base, Point):
            msg = f"base must be a Point, got {self.base!r}"
            raise InvalidArgumentError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PdvParameters:
        """Build parameters from a plain mapping, e.g. decoded JSON.

        ``base`` may be given as ``[x, y]`` or ``[x, y, z]``. Missing keys keep
        their defaults.

        Raises:
            InvalidArgumentError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            msg = f"Unknown PDV parameter(s): {', '.join(sorted(unknown))}"
            raise InvalidArgumentError(msg)

        kwargs = dict(data)
        if "base" in kwargs and not isinstance(kwargs["base"], Point):
            kwargs["base"] = Point.from_sequence(kwargs["base"])
        return cls(**kwargs)

    def replace(self, **changes: Any) -> PdvParameters:
        """Return a validated copy with some fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["base"] = list(self.base.as_tuple())
        return data


def load_parameters(path: str) -> PdvParameters:
    """Load PDV parameters from a JSON object file.

    Args:
        path: Location of the JSON file.

    Returns:
        PdvParameters: Parameters with file values overriding the defaults.

    Raises:
        InvalidArgumentError: If the file does not hold a JSON object or a value is invalid.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            msg = f"{path}: invalid JSON ({e})"
            raise InvalidArgumentError(msg) from e

    if not isinstance(data, dict):
        msg = f"{path}: expected a JSON object, got {type(data).__name__}"
        raise InvalidArgumentError(msg)
    return PdvParameters.from_mapping(data)
