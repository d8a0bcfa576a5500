"""Flight simulation of a Powered Delivery Vehicle recharging sensor nodes over IPT.

pdvsim models an aerial drone (the PDV) that leaves its base, visits ground
sensor nodes along a precomputed path, tops up each node's supercapacitor
through inductive power transfer and flies back. Before every waypoint an
energy look-ahead decides whether the PDV can reach the node, charge it and
still get home; if not, it returns home straight away.

Framework Components:
    Geometry (pdvsim.geo):
        • Point: Immutable Cartesian position in meters
        • BASE, distance, load_path_csv

    Sensor Nodes (pdvsim.sensors):
        • SensorNode: Node with capacitor state and service request flag
        • SensorCatalog: Node collection with position lookup, CSV and random generation

    Energy Accounting (pdvsim.energy):
        • flight_time, flight_energy_cost, leg_cost, ipt_energy_cost
        • BatteryStatus: On-board energy store

    Vehicle (pdvsim.vehicles):
        • PDV: Vehicle state driven by the FlightState machine
        • FlightState: IDLE, EN_ROUTE, CHARGING, RTH, DONE

    Mission Policy (pdvsim.mission):
        • RthPolicy, RthDecision: Continue/Return-to-Home look-ahead

    Simulation Engine (pdvsim.simulator):
        • FlightSimulator: flight_simulation() and single_stage_flight()
        • FlightResult: Serviced nodes, charged energy, time, distance, terminal state
        • FlightAnalyzer: Statistics across repeated runs

Units:
    distance [m], time [h], energy [Wh], power [W], speed [m/h],
    capacitance [F], voltage [V]. No conversion happens anywhere.

Usage:
    >>> from pdvsim import FlightSimulator, PDV, PdvParameters, SensorCatalog
    >>> catalog = SensorCatalog.generate_random(30, area_size=500.0, seed=7)
    >>> pdv = PDV(PdvParameters(min_requests=10))
    >>> result = FlightSimulator(pdv).flight_simulation(catalog, catalog.requesting_path())
    >>> result.terminal_state
    <FlightState.DONE: 5>
"""

from .config import PdvParameters, load_parameters
from .errors import (
    EmptyPathError,
    IllegalTransitionError,
    InsufficientRequestsError,
    InvalidArgumentError,
    PdvSimError,
)
from .geo import BASE, Point, distance, load_path_csv
from .mission import RthDecision, RthPolicy
from .sensors import SensorCatalog, SensorNode
from .simulator import FlightAnalyzer, FlightResult, FlightSimulator
from .vehicles import PDV, FlightState

__version__ = "0.1.0"

__all__ = [
    "BASE",
    "EmptyPathError",
    "FlightAnalyzer",
    "FlightResult",
    "FlightSimulator",
    "FlightState",
    "IllegalTransitionError",
    "InsufficientRequestsError",
    "InvalidArgumentError",
    "PDV",
    "PdvParameters",
    "PdvSimError",
    "Point",
    "RthDecision",
    "RthPolicy",
    "SensorCatalog",
    "SensorNode",
    "distance",
    "load_parameters",
    "load_path_csv",
]
