"""Sensor node catalog with CSV loading and random field generation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
import csv

import numpy as np

from pdvsim.errors import InvalidArgumentError
from pdvsim.geo import Point

from .node import SensorNode

_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"0", "false", "no", "n"}

DEFAULT_CAPACITANCE = 1.0
DEFAULT_V_MAX = 3.0


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f"Invalid boolean value {value!r}"
    raise ValueError(msg)


class SensorCatalog(Sequence[SensorNode]):
    """Ordered collection of sensor nodes.

    Nodes are looked up by exact position so that a path of Points can be
    matched back to the nodes it visits.
    """

    def __init__(self, nodes: Iterable[SensorNode] | None = None):
        self._nodes: list[SensorNode] = []
        self._by_position: dict[Point, SensorNode] = {}
        self._ids: set[int] = set()
        for node in nodes or ():
            self.add_node(node)

    def add_node(self, node: SensorNode) -> None:
        """Append a node.

        Raises:
            InvalidArgumentError: If the node id is already present.
        """
        if node.node_id in self._ids:
            msg = f"Duplicate node id {node.node_id}"
            raise InvalidArgumentError(msg)
        self._nodes.append(node)
        self._ids.add(node.node_id)
        self._by_position.setdefault(node.position, node)

    def __getitem__(self, index):
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[SensorNode]:
        return iter(self._nodes)

    def node_at(self, point: Point) -> SensorNode | None:
        """Return the node located exactly at ``point``, if any."""
        return self._by_position.get(point)

    def requesting_nodes(self) -> list[SensorNode]:
        return [node for node in self._nodes if node.requests_service]

    def requesting_count(self) -> int:
        """Number of nodes currently requesting service."""
        return sum(1 for node in self._nodes if node.requests_service)

    def requesting_path(self) -> list[Point]:
        """Positions of the requesting nodes in catalog order."""
        return [node.position for node in self.requesting_nodes()]

    def validate(self) -> None:
        """Re-check the invariants of every node.

        Raises:
            InvalidArgumentError: On the first node that violates its invariants.
        """
        for node in self._nodes:
            node.validate()

    def snapshot(self) -> list[tuple[float, bool, bool]]:
        """Capture the mutable state of every node, in catalog order."""
        return [(n.v_current, n.requests_service, n.charged) for n in self._nodes]

    def restore(self, snapshot: list[tuple[float, bool, bool]]) -> None:
        """Restore node state captured by snapshot()."""
        if len(snapshot) != len(self._nodes):
            msg = f"Snapshot holds {len(snapshot)} nodes, catalog has {len(self._nodes)}"
            raise InvalidArgumentError(msg)
        for node, (v_current, requests_service, charged) in zip(self._nodes, snapshot):
            node.v_current = v_current
            node.requests_service = requests_service
            node.charged = charged

    @classmethod
    def from_csv(cls, path: str) -> SensorCatalog:
        """Load a catalog from CSV.

        The header must contain ``node_id, x, y, capacitance, v_max, v_current``
        and may add ``z``, ``residual_energy`` and ``requests_service``. Nodes
        without a ``requests_service`` value request service.

        Raises:
            InvalidArgumentError: On a missing column or an unparsable row.
        """
        catalog = cls()
        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            columns = [c.strip().lower() for c in next(reader, [])]
            required = ("node_id", "x", "y", "capacitance", "v_max", "v_current")
            missing = [c for c in required if c not in columns]
            if missing:
                msg = f"{path}: missing column(s) {', '.join(missing)}"
                raise InvalidArgumentError(msg)

            for line_no, row in enumerate(reader, start=2):
                row = [cell.strip() for cell in row]
                if not any(row):
                    continue
                record = dict(zip(columns, row))
                try:
                    z = float(record["z"]) if record.get("z") else 0.0
                    node = SensorNode(
                        node_id=int(record["node_id"]),
                        position=Point(float(record["x"]), float(record["y"]), z),
                        capacitance=float(record["capacitance"]),
                        v_max=float(record["v_max"]),
                        v_current=float(record["v_current"]),
                        residual_energy=float(record.get("residual_energy") or 0.0),
                        requests_service=_parse_bool(record.get("requests_service") or "1"),
                    )
                except InvalidArgumentError:
                    raise
                except (KeyError, ValueError) as e:
                    msg = f"{path}:{line_no}: invalid node row {row}"
                    raise InvalidArgumentError(msg) from e
                catalog.add_node(node)
        return catalog

    @classmethod
    def generate_random(
        cls,
        num_nodes: int,
        area_size: float = 1000.0,
        request_ratio: float = 1.0,
        capacitance: float = DEFAULT_CAPACITANCE,
        v_max: float = DEFAULT_V_MAX,
        seed: int | None = None,
    ) -> SensorCatalog:
        """Generate a reproducible random sensor field.

        Args:
            num_nodes: Number of nodes to create.
            area_size: Side of the square area [m], nodes lie in [0, area_size]^2.
            request_ratio: Probability that a node requests service.
            capacitance: Capacitance of every node [F].
            v_max: Target voltage of every node [V].
            seed: Random seed for reproducibility.

        Returns:
            SensorCatalog with ``num_nodes`` nodes numbered from 0.
        """
        if num_nodes < 0:
            msg = f"num_nodes cannot be negative, got {num_nodes}"
            raise InvalidArgumentError(msg)
        if not 0.0 <= request_ratio <= 1.0:
            msg = f"request_ratio must be in [0, 1], got {request_ratio}"
            raise InvalidArgumentError(msg)

        rng = np.random.default_rng(seed)
        coords = rng.uniform(0.0, area_size, size=(num_nodes, 2))
        voltages = rng.uniform(0.0, v_max, size=num_nodes)
        requests = rng.random(num_nodes) < request_ratio

        catalog = cls()
        for i in range(num_nodes):
            catalog.add_node(
                SensorNode(
                    node_id=i,
                    position=Point(float(coords[i, 0]), float(coords[i, 1])),
                    capacitance=capacitance,
                    v_max=v_max,
                    v_current=float(voltages[i]),
                    requests_service=bool(requests[i]),
                )
            )
        return catalog

    def __repr__(self) -> str:
        return f"SensorCatalog(nodes={len(self._nodes)}, requesting={self.requesting_count()})"
