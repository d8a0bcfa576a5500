"""
Tests for the flight simulation driver.
"""

import unittest

from pdvsim.config import PdvParameters
from pdvsim.energy import LegCost, leg_cost
from pdvsim.errors import (
    EmptyPathError,
    IllegalTransitionError,
    InsufficientRequestsError,
    InvalidArgumentError,
)
from pdvsim.geo import BASE, Point
from pdvsim.mission import RthDecision, RthPolicy
from pdvsim.sensors import SensorCatalog, SensorNode
from pdvsim.simulator import FlightSimulator, LegKind
from pdvsim.vehicles import PDV, FlightState

POWER = 363.888
SPEED = 21600.0
OVERHEAD = 5.6e-3


def leg_energy(d):
    return POWER * (d / SPEED + OVERHEAD)


def make_node(node_id, x, y=0.0, v_current=0.0, requests_service=True):
    return SensorNode(
        node_id=node_id,
        position=Point(x, y),
        capacitance=1.0,
        v_max=3.0,
        v_current=v_current,
        requests_service=requests_service,
    )


class TestTaskCheck(unittest.TestCase):
    """Test the pre-flight request check."""

    def test_task_check_threshold(self):
        """Test the threshold is inclusive."""
        catalog = SensorCatalog([make_node(i, 10 * (i + 1)) for i in range(3)])
        self.assertTrue(FlightSimulator(PDV(PdvParameters(min_requests=3))).task_check(catalog))
        self.assertFalse(FlightSimulator(PDV(PdvParameters(min_requests=4))).task_check(catalog))


class TestFlightScenarios(unittest.TestCase):
    """End-to-end scenarios with the reference parameters."""

    def setUp(self):
        self.params = PdvParameters(min_requests=1)

    def test_single_node_ample_energy(self):
        """S1: one requesting node, ample energy."""
        node = make_node(0, 100)
        catalog = SensorCatalog([node])
        pdv = PDV(self.params)
        result = FlightSimulator(pdv).flight_simulation(catalog, [Point(100, 0)])

        self.assertEqual(result.terminal_state, FlightState.DONE)
        self.assertEqual(result.serviced, [0])
        self.assertEqual(result.completion_ratio, 100.0)
        self.assertAlmostEqual(result.charged_energy, 2.5e-3)
        self.assertAlmostEqual(result.legs[0].energy_cost, leg_energy(100.0))
        self.assertAlmostEqual(result.legs[0].energy_cost, 3.72, places=2)
        self.assertAlmostEqual(result.flight_time, 200.0 / SPEED)
        self.assertAlmostEqual(result.flight_distance, 200.0)
        self.assertAlmostEqual(
            result.remaining_energy, 187.0 - 2 * leg_energy(100.0) - 2.5e-3
        )
        self.assertFalse(result.energy_exhausted)
        self.assertFalse(result.rth_triggered)
        self.assertTrue(node.charged)
        self.assertEqual(node.v_current, 3.0)
        self.assertFalse(node.requests_service)
        self.assertEqual(pdv.position, BASE)
        self.assertEqual(pdv.state, FlightState.DONE)

    def test_below_request_threshold(self):
        """S2: five requesting nodes against a threshold of twenty."""
        catalog = SensorCatalog([make_node(i, 100 * (i + 1)) for i in range(5)])
        snapshot = catalog.snapshot()
        pdv = PDV(PdvParameters())
        with self.assertRaises(InsufficientRequestsError) as ctx:
            FlightSimulator(pdv).flight_simulation(catalog, catalog.requesting_path())

        self.assertEqual(ctx.exception.requests, 5)
        self.assertEqual(ctx.exception.minimum, 20)
        result = ctx.exception.result
        self.assertEqual(result.completion_ratio, 0.0)
        self.assertEqual(result.terminal_state, FlightState.DONE)
        self.assertEqual(catalog.snapshot(), snapshot)
        self.assertEqual(pdv.remaining_energy, 187.0)
        self.assertEqual(pdv.flight_distance, 0.0)
        self.assertEqual(pdv.state, FlightState.DONE)

    def test_rth_mid_path(self):
        """S3: the third node is out of reach, the PDV returns from the second."""
        nodes = [make_node(0, 1000), make_node(1, 2000), make_node(2, 10000)]
        catalog = SensorCatalog(nodes)
        pdv = PDV(self.params)
        result = FlightSimulator(pdv).flight_simulation(catalog, catalog.requesting_path())

        self.assertEqual(result.serviced, [0, 1])
        self.assertTrue(result.rth_triggered)
        self.assertFalse(result.energy_exhausted)
        self.assertAlmostEqual(result.completion_ratio, 200.0 / 3)
        self.assertTrue(nodes[0].charged and nodes[1].charged)
        self.assertFalse(nodes[2].charged)
        self.assertTrue(nodes[2].requests_service)
        self.assertEqual(nodes[2].v_current, 0.0)

        home = result.legs[-1]
        self.assertEqual(home.kind, LegKind.HOME)
        self.assertEqual(home.start, Point(2000, 0))
        self.assertAlmostEqual(result.flight_distance, 4000.0)
        expected = 187.0 - 2 * leg_energy(1000.0) - leg_energy(2000.0) - 2 * 2.5e-3
        self.assertAlmostEqual(result.remaining_energy, expected)

    def test_energy_exhausted_at_base(self):
        """S4: RTH is decided with less energy than the homebound leg needs."""
        node = make_node(0, 100)
        catalog = SensorCatalog([node])
        pdv = PDV(self.params, initial_energy=1.0)
        result = FlightSimulator(pdv).flight_simulation(catalog, [node.position])

        self.assertTrue(result.rth_triggered)
        self.assertTrue(result.energy_exhausted)
        self.assertEqual(result.remaining_energy, 0.0)
        self.assertEqual(result.serviced, [])
        self.assertEqual(result.terminal_state, FlightState.DONE)
        self.assertEqual(pdv.position, BASE)
        self.assertFalse(node.charged)
        self.assertEqual(result.legs[-1].energy_drawn, 1.0)
        self.assertAlmostEqual(result.legs[-1].energy_cost, POWER * OVERHEAD)

    def test_energy_exhausted_after_service(self):
        """S4: a look-ahead passes by a hair, then the flight home strands the PDV."""

        class NoReturnPolicy(RthPolicy):
            def evaluate(self, pdv, waypoint, node=None):
                decision = super().evaluate(pdv, waypoint, node)
                return RthDecision(
                    outbound=decision.outbound,
                    charge_energy=decision.charge_energy,
                    homebound=LegCost(0.0, 0.0, 0.0),
                    safety_margin=0.0,
                    available=decision.available,
                )

        node = make_node(0, 100, v_current=3.0)
        catalog = SensorCatalog([node])
        pdv = PDV(self.params, initial_energy=leg_energy(100.0))
        result = FlightSimulator(pdv, NoReturnPolicy(self.params)).flight_simulation(
            catalog, [node.position]
        )

        self.assertEqual(result.serviced, [0])
        self.assertTrue(result.energy_exhausted)
        self.assertFalse(result.rth_triggered)
        self.assertEqual(result.remaining_energy, 0.0)
        self.assertEqual(pdv.position, BASE)
        self.assertAlmostEqual(result.flight_distance, 200.0)
        self.assertEqual(result.legs[-1].energy_drawn, 0.0)
        self.assertTrue(node.charged)

    def test_already_charged_node(self):
        """S5: a node at v_max costs no IPT energy but is still visited."""
        node = make_node(0, 100, v_current=3.0)
        catalog = SensorCatalog([node])
        result = FlightSimulator(PDV(self.params)).flight_simulation(catalog, [node.position])

        self.assertEqual(result.charged_energy, 0.0)
        self.assertTrue(node.charged)
        self.assertFalse(node.requests_service)
        self.assertEqual(len(result.legs), 2)
        self.assertAlmostEqual(result.remaining_energy, 187.0 - 2 * leg_energy(100.0))

    def test_empty_path(self):
        """S6: an empty path is rejected without mutation."""
        catalog = SensorCatalog([make_node(0, 100)])
        pdv = PDV(self.params)
        before = pdv.get_status()
        with self.assertRaises(EmptyPathError):
            FlightSimulator(pdv).flight_simulation(catalog, [])
        self.assertEqual(pdv.get_status(), before)
        self.assertEqual(pdv.state, FlightState.IDLE)
        self.assertFalse(catalog[0].charged)


class TestFlightBoundaries(unittest.TestCase):
    """Boundary behaviours of the driver."""

    def setUp(self):
        self.params = PdvParameters(min_requests=1)

    def test_exact_threshold_continues(self):
        """Test that exactly enough energy services the node and lands on zero."""
        node = make_node(0, 100, v_current=3.0)
        catalog = SensorCatalog([node])
        pdv = PDV(self.params, initial_energy=2 * leg_energy(100.0))
        result = FlightSimulator(pdv).flight_simulation(catalog, [node.position])

        self.assertEqual(result.serviced, [0])
        self.assertFalse(result.rth_triggered)
        self.assertFalse(result.energy_exhausted)
        self.assertEqual(result.remaining_energy, 0.0)

    def test_exact_threshold_with_charging_gets_home(self):
        """Test that an exact budget including IPT energy never strands the PDV."""
        policy = RthPolicy(self.params)
        for x in range(1, 3000, 7):
            for v_current in (0.0, 0.5, 1.1, 2.3):
                node = make_node(0, x, v_current=v_current)
                required = policy.evaluate(PDV(self.params), node.position, node).required
                pdv = PDV(self.params, initial_energy=required)
                result = FlightSimulator(pdv).flight_simulation(SensorCatalog([node]), [node.position])

                self.assertEqual(result.serviced, [0], (x, v_current))
                self.assertFalse(result.rth_triggered, (x, v_current))
                self.assertFalse(result.energy_exhausted, (x, v_current))
                self.assertEqual(result.terminal_state, FlightState.DONE)
                self.assertAlmostEqual(result.remaining_energy, 0.0, places=9)

    def test_base_as_waypoint(self):
        """Test that flying to the base itself still pays the overhead."""
        catalog = SensorCatalog([make_node(0, 100)])
        result = FlightSimulator(PDV(self.params)).flight_simulation(catalog, [BASE])

        self.assertEqual(len(result.legs), 2)
        self.assertEqual(result.flight_distance, 0.0)
        self.assertAlmostEqual(result.energy_consumed, 2 * POWER * OVERHEAD)
        self.assertEqual(result.serviced, [])
        self.assertEqual(result.completion_ratio, 0.0)

    def test_non_requesting_node_on_path(self):
        """Test that a node visited without a request is charged but not counted."""
        nodes = [make_node(0, 100), make_node(1, 200, v_current=1.0, requests_service=False)]
        catalog = SensorCatalog(nodes)
        result = FlightSimulator(PDV(self.params)).flight_simulation(
            catalog, [Point(100, 0), Point(200, 0)]
        )
        self.assertEqual(result.serviced, [0])
        self.assertEqual(result.completion_ratio, 100.0)
        self.assertTrue(nodes[1].charged)
        self.assertEqual(len(result.charges), 2)

    def test_repeated_waypoint_counted_once(self):
        """Test that visiting a node twice services it once."""
        catalog = SensorCatalog([make_node(0, 100)])
        result = FlightSimulator(PDV(self.params)).flight_simulation(
            catalog, [Point(100, 0), Point(100, 0)]
        )
        self.assertEqual(result.serviced, [0])
        self.assertEqual(result.charges[1].energy, 0.0)

    def test_no_requests_with_zero_threshold(self):
        """Test that a run with no requests reports 0 %."""
        catalog = SensorCatalog([make_node(0, 100, requests_service=False)])
        pdv = PDV(PdvParameters(min_requests=0))
        result = FlightSimulator(pdv).flight_simulation(catalog, [Point(100, 0)])
        self.assertEqual(result.initial_requests, 0)
        self.assertEqual(result.completion_ratio, 0.0)

    def test_invalid_node_rejected_before_launch(self):
        """Test that a corrupted node is reported without mutation."""
        node = make_node(0, 100)
        catalog = SensorCatalog([node])
        node.v_current = 9.0
        pdv = PDV(self.params)
        with self.assertRaises(InvalidArgumentError):
            FlightSimulator(pdv).flight_simulation(catalog, [node.position])
        self.assertEqual(pdv.state, FlightState.IDLE)
        self.assertEqual(pdv.remaining_energy, 187.0)

    def test_invalid_waypoint_rejected(self):
        """Test that a waypoint which is not a Point is rejected."""
        catalog = SensorCatalog([make_node(0, 100)])
        with self.assertRaises(InvalidArgumentError):
            FlightSimulator(PDV(self.params)).flight_simulation(catalog, [(100, 0)])

    def test_run_rejected_mid_flight(self):
        """Test that a PDV already in flight cannot start a run."""
        pdv = PDV(self.params)
        pdv.transition_to(FlightState.EN_ROUTE)
        with self.assertRaises(IllegalTransitionError):
            FlightSimulator(pdv).flight_simulation(SensorCatalog([make_node(0, 100)]), [Point(100, 0)])

    def test_runs_are_independent(self):
        """Test that a second run starts from a reset PDV."""
        pdv = PDV(self.params)
        sim = FlightSimulator(pdv)
        first = sim.flight_simulation(SensorCatalog([make_node(0, 100)]), [Point(100, 0)])
        second = sim.flight_simulation(SensorCatalog([make_node(0, 100)]), [Point(100, 0)])
        self.assertEqual(first.get_summary(), second.get_summary())


class TestSingleStageFlight(unittest.TestCase):
    """Test the single-stage variant."""

    def setUp(self):
        self.params = PdvParameters(min_requests=1)

    def test_only_head_of_path(self):
        """Test that only the first waypoint is serviced."""
        nodes = [make_node(0, 100), make_node(1, 200), make_node(2, 300)]
        catalog = SensorCatalog(nodes)
        result = FlightSimulator(PDV(self.params)).single_stage_flight(
            catalog, catalog.requesting_path()
        )
        self.assertEqual(result.serviced, [0])
        self.assertFalse(result.rth_triggered)
        self.assertEqual([leg.kind for leg in result.legs], [LegKind.OUTBOUND, LegKind.HOME])
        self.assertAlmostEqual(result.completion_ratio, 100.0 / 3)
        self.assertFalse(nodes[1].charged)

    def test_same_accounting_as_full_flight(self):
        """Test that a one-waypoint path gives identical results in both drivers."""
        full = FlightSimulator(PDV(self.params)).flight_simulation(
            SensorCatalog([make_node(0, 100)]), [Point(100, 0)]
        )
        single = FlightSimulator(PDV(self.params)).single_stage_flight(
            SensorCatalog([make_node(0, 100)]), [Point(100, 0)]
        )
        self.assertEqual(full.get_summary(), single.get_summary())

    def test_single_stage_policy(self):
        """Test that the single stage also aborts when energy is short."""
        catalog = SensorCatalog([make_node(0, 5000)])
        result = FlightSimulator(PDV(self.params, initial_energy=50.0)).single_stage_flight(
            catalog, [Point(5000, 0)]
        )
        self.assertTrue(result.rth_triggered)
        self.assertEqual(result.serviced, [])

    def test_single_stage_empty_path(self):
        """Test that the single stage rejects an empty path."""
        with self.assertRaises(EmptyPathError):
            FlightSimulator(PDV(self.params)).single_stage_flight(SensorCatalog(), [])


class TestFlightInvariants(unittest.TestCase):
    """Invariants over random sensor fields."""

    def _run(self, seed, area_size):
        catalog = SensorCatalog.generate_random(40, area_size=area_size, request_ratio=0.8, seed=seed)
        before = catalog.snapshot()
        pdv = PDV(PdvParameters(min_requests=1))
        result = FlightSimulator(pdv).flight_simulation(catalog, catalog.requesting_path())
        return catalog, before, result

    def test_invariants(self):
        """Test energy, time, distance, node and completion invariants."""
        for seed, area_size in ((1, 500.0), (2, 2000.0), (3, 6000.0)):
            with self.subTest(seed=seed):
                catalog, before, result = self._run(seed, area_size)

                self.assertGreaterEqual(result.remaining_energy, 0.0)
                self.assertAlmostEqual(result.accounted_energy, result.energy_consumed, places=9)
                self.assertAlmostEqual(
                    sum(leg.distance for leg in result.legs), result.flight_distance, places=6
                )
                self.assertAlmostEqual(
                    sum(leg.time for leg in result.legs), result.flight_time, places=9
                )
                for leg in result.legs:
                    self.assertGreaterEqual(leg.distance, 0.0)
                    self.assertGreaterEqual(leg.energy_drawn, 0.0)

                charged_ids = {c.node_id for c in result.charges}
                for node, (v_current, requests, charged) in zip(catalog, before):
                    if node.charged:
                        self.assertIn(node.node_id, charged_ids)
                        self.assertEqual(node.v_current, node.v_max)
                        self.assertFalse(node.requests_service)
                    else:
                        self.assertEqual((node.v_current, node.requests_service), (v_current, requests))

                expected = 100.0 * len(result.serviced) / result.initial_requests
                self.assertAlmostEqual(result.completion_ratio, min(100.0, expected))
                self.assertTrue(0.0 <= result.completion_ratio <= 100.0)

    def test_large_field_triggers_rth(self):
        """Test that a wide field exhausts the look-ahead before the path ends."""
        _, _, result = self._run(4, 20000.0)
        self.assertTrue(result.rth_triggered)
        self.assertFalse(result.energy_exhausted)
        self.assertLess(result.completion_ratio, 100.0)


if __name__ == '__main__':
    unittest.main()
