"""Sensor node catalog.

Exports:
    SensorNode: Ground node with a supercapacitor recharged over IPT.
    SensorCatalog: Ordered node collection with position lookup and CSV I/O.
"""

from .catalog import SensorCatalog
from .node import SensorNode

__all__ = ["SensorCatalog", "SensorNode"]
