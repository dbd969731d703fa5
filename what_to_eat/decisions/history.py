from __future__ import annotations

from datetime import datetime

from .config import DEFAULT_DECISION_CONFIG
from .models import DecisionRecord, HistoryResponse
from .store import DecisionStore

_SECONDS_PER_DAY = 24 * 60 * 60


class HistoryQuery:
    """Read path over a user's past decisions."""

    def __init__(self, store: DecisionStore) -> None:
        self.store = store

    def get_history(
        self,
        user_id: int,
        days: int = DEFAULT_DECISION_CONFIG.history_days,
        now: datetime | None = None,
    ) -> HistoryResponse:
        """Records from the trailing *days* x 24h window, newest first."""
        moment = self.store.clock.localize(now) if now is not None else self.store.clock.now()
        # Absolute 24h steps, so a DST change inside the window does not shift it
        since = self.store.clock.from_timestamp(moment.timestamp() - days * _SECONDS_PER_DAY)
        records = self.store.by_user_since(user_id, since)
        return HistoryResponse(records=records, total=len(records))

    def get_recent(
        self, user_id: int, limit: int = DEFAULT_DECISION_CONFIG.recent_limit,
    ) -> list[DecisionRecord]:
        """The user's *limit* latest records regardless of age, newest first."""
        return self.store.recent_by_user(user_id, limit)
