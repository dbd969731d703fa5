from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .config import DEFAULT_DATABASE_CONFIG, DatabaseConfig

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS restaurants (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS menus (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    restaurant_id INTEGER NOT NULL,
    dish_name TEXT NOT NULL,
    UNIQUE (restaurant_id, dish_name)
);
CREATE INDEX IF NOT EXISTS idx_menus_restaurant ON menus (restaurant_id);

-- One row per user per civil day; decided_day is the ISO date of
-- decided_at in the service time zone.
CREATE TABLE IF NOT EXISTS decision_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    menu_id INTEGER NOT NULL,
    decided_at REAL NOT NULL,
    decided_day TEXT NOT NULL,
    UNIQUE (user_id, decided_day)
);
CREATE INDEX IF NOT EXISTS idx_user_decided ON decision_records (user_id, decided_at);
"""


class Database:
    """Connection factory for a single SQLite file.

    Every call to :meth:`connect` returns a fresh connection, so callers on
    different threads never share one.
    """

    def __init__(self, config: DatabaseConfig = DEFAULT_DATABASE_CONFIG) -> None:
        self.config = config

    @property
    def path(self) -> str:
        return str(self.config.path)

    def _open(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are begun explicitly below
        conn = sqlite3.connect(self.path, timeout=self.config.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def init_schema(self) -> None:
        self.config.path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._open()
        try:
            conn.executescript(SCHEMA)
        finally:
            conn.close()
        logger.info("Database schema ready at %s", self.path)

    @contextmanager
    def connect(self, write: bool = False) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction.

        Commits on success and rolls back on error. ``write=True`` takes the
        write lock up front (``BEGIN IMMEDIATE``) so concurrent writers queue
        on the busy timeout instead of failing on lock upgrade.
        """
        conn = self._open()
        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()
