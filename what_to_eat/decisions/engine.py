from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..catalog.models import MenuItem
from ..catalog.repository import MenuRepository
from ..errors import NoMenusError
from .config import DEFAULT_DECISION_CONFIG, DecisionConfig
from .history import HistoryQuery
from .models import DecideResponse, DecisionRecord, HistoryResponse
from .selector import LockedRandom, RandomSource, weighted_random
from .store import DecisionStore

logger = logging.getLogger(__name__)

MESSAGES: dict[str, dict[str, str]] = {
    "zh": {
        "repeat": "虽然最近吃过，但命运让你再吃一次！",
        "fresh": "就决定是你了！",
    },
    "en": {
        "repeat": "Eaten recently, but fate says again!",
        "fresh": "This one it is!",
    },
}


def outcome_message(
    selected: MenuItem, recent: Sequence[DecisionRecord], locale: str = "zh",
) -> str:
    """Return the "repeat" message if *selected* is in *recent*, else "fresh"."""
    messages = MESSAGES.get(locale, MESSAGES["zh"])
    if any(record.menu_id == selected.id for record in recent):
        return messages["repeat"]
    return messages["fresh"]


class DecisionEngine:
    """Resolve candidates, draw one, and persist it as today's decision."""

    def __init__(
        self,
        menus: MenuRepository,
        store: DecisionStore,
        history: HistoryQuery | None = None,
        config: DecisionConfig = DEFAULT_DECISION_CONFIG,
        rng: RandomSource | None = None,
    ) -> None:
        self.menus = menus
        self.store = store
        self.history = history or HistoryQuery(store)
        self.config = config
        self.rng = rng or LockedRandom(config.seed)

    def _candidates(self, menu_ids: Sequence[int] | None) -> list[MenuItem]:
        if menu_ids:
            candidates = self.menus.list_by_ids(menu_ids)
        else:
            candidates = self.menus.list_all()
        if not candidates:
            raise NoMenusError()
        return candidates

    def decide(
        self,
        user_id: int,
        menu_ids: Sequence[int] | None = None,
        now: datetime | None = None,
    ) -> DecideResponse:
        candidates = self._candidates(menu_ids)
        recent = self.history.get_recent(user_id, self.config.recent_limit)

        selected = weighted_random(
            candidates,
            recent,
            self.rng,
            recent_weight=self.config.recent_weight,
            default_weight=self.config.default_weight,
        )
        self.store.record_decision(user_id, selected.id, now)

        message = outcome_message(selected, recent, self.config.locale)
        logger.debug(
            "User %s decided menu %s out of %d candidates (%d recent)",
            user_id, selected.id, len(candidates), len(recent),
        )
        return DecideResponse(menu=selected, message=message)

    def get_history(self, user_id: int, now: datetime | None = None) -> HistoryResponse:
        return self.history.get_history(user_id, self.config.history_days, now)

    def get_today(self, user_id: int, now: datetime | None = None) -> DecisionRecord | None:
        return self.store.get_today(user_id, now)
