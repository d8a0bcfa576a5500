"""Cartesian points for the sensor field.

Positions are expressed in meters on a local flat frame whose origin is the
base station. Points are immutable so they can be shared between the path,
the catalog and the PDV without defensive copies.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from dataclasses import dataclass
import math

from pdvsim.errors import InvalidArgumentError


@dataclass(frozen=True)
class Point:
    """A position in the field, in meters.

    Two-dimensional positions simply keep ``z`` at 0, so 2D and 3D points can
    be mixed freely in distance computations.

    Attributes:
        x (float): East coordinate [m].
        y (float): North coordinate [m].
        z (float): Height coordinate [m], 0 for ground-plane points.

    Raises:
        InvalidArgumentError: If any coordinate is NaN or infinite.

    Example:
        >>> Point(0, 0).distance_to(Point(3, 4))
        5.0
    """

    x: float
    y: float
    z: float = 0.0

    def __post_init__(self):
        for name, value in (("x", self.x), ("y", self.y), ("z", self.z)):
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                msg = f"Point coordinate {name} must be finite, got {value!r}"
                raise InvalidArgumentError(msg)

    @classmethod
    def from_sequence(cls, coords: Iterable[float]) -> Point:
        """Build a point from ``[x, y]`` or ``[x, y, z]``.

        Raises:
            InvalidArgumentError: If ``coords`` is not a sequence of 2 or 3 numbers.
        """
        if isinstance(coords, (str, bytes)):
            msg = f"Point coordinates must be a list of numbers, got {coords!r}"
            raise InvalidArgumentError(msg)
        try:
            values = [float(c) for c in coords]
        except (TypeError, ValueError) as e:
            msg = f"Point coordinates must be a list of numbers, got {coords!r}"
            raise InvalidArgumentError(msg) from e
        if len(values) not in (2, 3):
            msg = f"Point needs 2 or 3 coordinates, got {len(values)}"
            raise InvalidArgumentError(msg)
        return cls(*values)

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to another point [m]."""
        return math.dist(self.as_tuple(), other.as_tuple())

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        if self.z:
            return f"Point({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"
        return f"Point({self.x:.2f}, {self.y:.2f})"


BASE = Point(0.0, 0.0)
"""Conventional base station position at the origin."""


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points [m]."""
    return a.distance_to(b)


def load_path_csv(path: str) -> list[Point]:
    """Read waypoints from a CSV file with an ``x, y[, z]`` header.

    Args:
        path: Location of the CSV file.

    Returns:
        list[Point]: Waypoints in file order.

    Raises:
        InvalidArgumentError: If the header lacks x/y columns or a cell is not numeric.
    """
    waypoints: list[Point] = []
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        columns = [c.strip().lower() for c in next(reader, [])]
        if "x" not in columns or "y" not in columns:
            msg = f"{path}: path CSV needs x and y columns, got {columns}"
            raise InvalidArgumentError(msg)
        ix, iy = columns.index("x"), columns.index("y")
        iz = columns.index("z") if "z" in columns else None
        for line_no, row in enumerate(reader, start=2):
            row = [cell.strip() for cell in row]
            if not any(row):
                continue
            try:
                z = float(row[iz]) if iz is not None and row[iz] else 0.0
                waypoints.append(Point(float(row[ix]), float(row[iy]), z))
            except (ValueError, IndexError) as e:
                msg = f"{path}:{line_no}: invalid waypoint {row}"
                raise InvalidArgumentError(msg) from e
    return waypoints
