"""Phase tracking for the PDV.

Exports:
    StateMachine: Current phase with guarded transitions
    Action: Edge into a phase with an optional effect
    StateGraph: Type alias for the edges leaving each phase
"""

from .state_machine import Action, StateGraph, StateMachine

__all__ = ["StateMachine", "Action", "StateGraph"]
