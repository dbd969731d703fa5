"""
Decision engine.

Responsibilities:
- Pick one menu item per request with a recency-penalising weighted draw.
- Keep exactly one decision record per user per civil day (atomic upsert).
- Answer trailing-window history and recency queries.
"""
from .engine import DecisionEngine
from .history import HistoryQuery
from .selector import LockedRandom, compute_weights, weighted_random
from .store import DecisionStore

__all__ = [
    "DecisionEngine",
    "DecisionStore",
    "HistoryQuery",
    "LockedRandom",
    "compute_weights",
    "weighted_random",
]
