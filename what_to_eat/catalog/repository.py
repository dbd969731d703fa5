from __future__ import annotations

import sqlite3
from typing import Iterable

from ..errors import PersistenceError
from ..storage.db import Database
from .models import MenuItem, Restaurant

_MENU_SELECT = """
    SELECT m.id, m.dish_name, m.restaurant_id, r.name AS restaurant_name
    FROM menus m
    LEFT JOIN restaurants r ON r.id = m.restaurant_id
"""


def menu_from_row(row: sqlite3.Row) -> MenuItem:
    restaurant = None
    if row["restaurant_name"] is not None:
        restaurant = Restaurant(id=row["restaurant_id"], name=row["restaurant_name"])
    return MenuItem(
        id=row["id"],
        dish_name=row["dish_name"],
        restaurant_id=row["restaurant_id"],
        restaurant=restaurant,
    )


class MenuRepository:
    """Read-only access to menu items and their restaurants."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def list_all(self) -> list[MenuItem]:
        try:
            with self.db.connect() as conn:
                rows = conn.execute(_MENU_SELECT + " ORDER BY m.id ASC").fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("failed to list menus") from exc
        return [menu_from_row(r) for r in rows]

    def list_by_ids(self, ids: Iterable[int]) -> list[MenuItem]:
        """Return the menu items whose id is in *ids*, ordered by id.

        Unknown ids are ignored, so the result may be shorter than the input
        or empty.
        """
        unique_ids = sorted(set(ids))
        if not unique_ids:
            return []
        placeholders = ", ".join("?" for _ in unique_ids)
        sql = _MENU_SELECT + f" WHERE m.id IN ({placeholders}) ORDER BY m.id ASC"
        try:
            with self.db.connect() as conn:
                rows = conn.execute(sql, unique_ids).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("failed to load menus by id") from exc
        return [menu_from_row(r) for r in rows]

    def list_restaurants(self) -> list[Restaurant]:
        try:
            with self.db.connect() as conn:
                rows = conn.execute(
                    "SELECT id, name FROM restaurants ORDER BY id ASC"
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("failed to list restaurants") from exc
        return [Restaurant(id=r["id"], name=r["name"]) for r in rows]
