from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from ..catalog.models import MenuItem, Restaurant
from ..errors import PersistenceError
from ..storage.db import Database
from .clock import Clock
from .models import DecisionRecord

logger = logging.getLogger(__name__)

_RECORD_SELECT = """
    SELECT d.id, d.user_id, d.menu_id, d.decided_at,
           m.dish_name, m.restaurant_id, r.name AS restaurant_name
    FROM decision_records d
    LEFT JOIN menus m ON m.id = d.menu_id
    LEFT JOIN restaurants r ON r.id = m.restaurant_id
"""

# The unique (user_id, decided_day) key turns a second decision on the same
# civil day into an update of the existing row.
_UPSERT = """
    INSERT INTO decision_records (user_id, menu_id, decided_at, decided_day)
    VALUES (?, ?, ?, ?)
    ON CONFLICT (user_id, decided_day) DO UPDATE SET
        menu_id = excluded.menu_id,
        decided_at = excluded.decided_at
"""


class DecisionStore:
    """Day-bucketed persistence for decision records."""

    def __init__(self, db: Database, clock: Clock | None = None) -> None:
        self.db = db
        self.clock = clock or Clock()

    def _record_from_row(self, row: sqlite3.Row) -> DecisionRecord:
        menu = None
        if row["dish_name"] is not None:
            restaurant = None
            if row["restaurant_name"] is not None:
                restaurant = Restaurant(id=row["restaurant_id"], name=row["restaurant_name"])
            menu = MenuItem(
                id=row["menu_id"],
                dish_name=row["dish_name"],
                restaurant_id=row["restaurant_id"],
                restaurant=restaurant,
            )
        return DecisionRecord(
            id=row["id"],
            user_id=row["user_id"],
            menu_id=row["menu_id"],
            decided_at=self.clock.from_timestamp(row["decided_at"]),
            menu=menu,
        )

    def record_decision(
        self, user_id: int, menu_id: int, now: datetime | None = None,
    ) -> DecisionRecord:
        """Create or refresh the user's decision for the civil day of *now*.

        Returns the stored record. Raises ``PersistenceError`` on any storage
        failure; the write is a single statement, so nothing is half-applied.
        """
        moment = self.clock.localize(now) if now is not None else self.clock.now()
        day = self.clock.civil_day(moment).isoformat()
        try:
            with self.db.connect(write=True) as conn:
                conn.execute(_UPSERT, (user_id, menu_id, moment.timestamp(), day))
                row = conn.execute(
                    _RECORD_SELECT + " WHERE d.user_id = ? AND d.decided_day = ?",
                    (user_id, day),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Failed to record decision for user %s: %s", user_id, exc)
            raise PersistenceError("failed to record decision") from exc

        logger.debug("Recorded decision user=%s menu=%s day=%s", user_id, menu_id, day)
        return self._record_from_row(row)

    def _query(self, where: str, params: tuple, suffix: str = "") -> list[DecisionRecord]:
        sql = _RECORD_SELECT + f" WHERE {where} ORDER BY d.decided_at DESC, d.id DESC{suffix}"
        try:
            with self.db.connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("failed to read decision records") from exc
        return [self._record_from_row(r) for r in rows]

    def recent_by_user(self, user_id: int, limit: int) -> list[DecisionRecord]:
        """The user's *limit* most recent records, newest first."""
        return self._query("d.user_id = ?", (user_id, limit), " LIMIT ?")

    def by_user_since(self, user_id: int, since: datetime) -> list[DecisionRecord]:
        """All of the user's records at or after *since*, newest first.

        There is no upper bound, so future-dated records are included.
        """
        since_ts = self.clock.localize(since).timestamp()
        return self._query("d.user_id = ? AND d.decided_at >= ?", (user_id, since_ts))

    def get_today(self, user_id: int, now: datetime | None = None) -> DecisionRecord | None:
        """Return the user's record for the civil day of *now*, if any."""
        moment = self.clock.localize(now) if now is not None else self.clock.now()
        records = self._query(
            "d.user_id = ? AND d.decided_day = ?",
            (user_id, self.clock.civil_day(moment).isoformat()),
        )
        return records[0] if records else None
