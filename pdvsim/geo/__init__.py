"""Geometry utilities for the sensor field.

Components:
    Point: Immutable Cartesian position in meters.
    BASE: Base station position at the origin.
    distance: Euclidean distance between two points.
    load_path_csv: Read a waypoint sequence from CSV.

Typical Usage:
    >>> from pdvsim.geo import BASE, Point, distance
    >>> distance(BASE, Point(100, 0))
    100.0
"""

from .point import BASE, Point, distance, load_path_csv

__all__ = ["BASE", "Point", "distance", "load_path_csv"]
