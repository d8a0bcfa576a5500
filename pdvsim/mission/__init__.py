"""Mission control policies.

Exports:
    RthPolicy: Energy look-ahead deciding between continue and Return-to-Home.
    RthDecision: Costs and outcome of one look-ahead.
"""

from .policy import RthDecision, RthPolicy

__all__ = ["RthDecision", "RthPolicy"]
