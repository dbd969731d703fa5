"""
Recency-weighted random selection.

Every candidate starts with the default weight (1.0). A candidate that
shows up anywhere in the user's recent decisions gets the reduced recent
weight (0.5) instead, however many times it appears. One uniform draw
``r`` in ``[0, total)`` then picks the first candidate whose cumulative
weight reaches ``r``, so ties resolve to the earlier candidate.
"""
from __future__ import annotations

import threading
from typing import Protocol, Sequence

import numpy as np

from ..catalog.models import MenuItem
from ..errors import EmptyCandidatesError
from .models import DecisionRecord

RECENT_WEIGHT = 0.5
DEFAULT_WEIGHT = 1.0


class RandomSource(Protocol):
    def random(self) -> float: ...


class LockedRandom:
    """A numpy ``Generator`` whose draws are serialised by a lock.

    One instance is shared by all requests served by a decision engine.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

    def random(self) -> float:
        """Return a float drawn uniformly from ``[0, 1)``."""
        with self._lock:
            return float(self._rng.random())


def compute_weights(
    candidates: Sequence[MenuItem],
    recent: Sequence[DecisionRecord],
    recent_weight: float = RECENT_WEIGHT,
    default_weight: float = DEFAULT_WEIGHT,
) -> np.ndarray:
    """Return one weight per candidate, in candidate order."""
    recent_ids = {record.menu_id for record in recent}
    return np.array(
        [recent_weight if m.id in recent_ids else default_weight for m in candidates],
        dtype=float,
    )


def weighted_random(
    candidates: Sequence[MenuItem],
    recent: Sequence[DecisionRecord],
    rng: RandomSource,
    recent_weight: float = RECENT_WEIGHT,
    default_weight: float = DEFAULT_WEIGHT,
) -> MenuItem:
    """Pick one candidate, penalising those eaten recently.

    Raises ``EmptyCandidatesError`` when *candidates* is empty.
    """
    if not candidates:
        raise EmptyCandidatesError("empty candidate set")

    weights = compute_weights(candidates, recent, recent_weight, default_weight)
    cumulative = np.cumsum(weights)
    r = rng.random() * cumulative[-1]

    # First index whose running sum is >= r
    idx = int(np.searchsorted(cumulative, r, side="left"))
    if idx >= len(candidates):
        return candidates[-1]
    return candidates[idx]
