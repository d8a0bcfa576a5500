"""Guarded phase transitions for the PDV.

A StateMachine holds the current phase and a graph of the edges leaving each
phase. Requesting a phase with no edge from the current one raises
IllegalTransitionError and leaves the phase unchanged. An edge may carry an
effect that runs once the new phase is set.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pdvsim.errors import IllegalTransitionError

Effect = Callable[..., Any]

StateGraph = Mapping[Enum, Iterable["Action"]]
"""Edges leaving each phase."""


@dataclass(frozen=True)
class Action:
    """Edge into ``state``, optionally running ``effect`` on arrival."""

    state: Enum
    effect: Effect | None = None

    def __call__(self, *args, **kwargs) -> Any:
        if self.effect is None:
            return None
        return self.effect(*args, **kwargs)


class StateMachine:
    """Current phase plus the graph that constrains where it can go next.

    Attributes:
        _state: Current phase.
        _edges: Outgoing edges per phase.
    """

    _edges: StateGraph
    _state: Enum

    def __init__(self, initial_state: Enum, graph: StateGraph):
        self._state = initial_state
        self._edges = graph

    @property
    def current(self) -> Enum:
        return self._state

    def request_transition(self, next_state: Enum, *args, **kwargs) -> Any:
        """Move to ``next_state`` and run the edge's effect.

        Extra arguments are handed to the effect, which sees the new phase
        already in place.

        Returns:
            Whatever the effect returns, None for a bare edge.

        Raises:
            IllegalTransitionError: If the graph has no edge from the current
                phase to ``next_state``.
        """
        edge = self._find_edge(next_state)
        self._state = edge.state
        return edge(*args, **kwargs)

    def _find_edge(self, target: Enum) -> Action:
        edge = next((a for a in self._edges.get(self._state, ()) if a.state == target), None)
        if edge is None:
            msg = f"Illegal transition {self._state.name} -> {target.name}"
            raise IllegalTransitionError(msg)
        return edge
