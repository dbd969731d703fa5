"""
Catalog seeding.

Loads ``data/menus.csv`` into the ``restaurants`` and ``menus`` tables the
first time the service starts against an empty database.

Usage:
    python -m what_to_eat.catalog.seed
"""
from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..storage.db import Database
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig

logger = logging.getLogger(__name__)

SEED_COLUMNS = ["restaurant", "dish_name"]


def load_seed_frame(path: Path) -> pd.DataFrame:
    """Read the seed CSV and normalise it to ``SEED_COLUMNS``."""
    df = pd.read_csv(path, dtype=str)
    missing = [c for c in SEED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"seed file {path} is missing columns: {missing}")

    df = df[SEED_COLUMNS].fillna("")
    for col in SEED_COLUMNS:
        df[col] = df[col].str.strip()

    # Blank names can't be looked up or displayed
    df = df[(df["restaurant"] != "") & (df["dish_name"] != "")]
    return df.drop_duplicates().reset_index(drop=True)


def seed_catalog(db: Database, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> int:
    """Insert the seed catalog if the ``menus`` table is empty.

    Returns the number of menu items inserted (0 when data already exists).
    """
    with db.connect(write=True) as conn:
        existing = conn.execute("SELECT COUNT(*) FROM menus").fetchone()[0]
        if existing > 0:
            logger.debug("Catalog already seeded (%d menus), skipping", existing)
            return 0

        df = load_seed_frame(config.seed_csv)
        inserted = 0
        for restaurant_name, group in df.groupby("restaurant", sort=False):
            conn.execute(
                "INSERT OR IGNORE INTO restaurants (name) VALUES (?)",
                (restaurant_name,),
            )
            restaurant_id = conn.execute(
                "SELECT id FROM restaurants WHERE name = ?", (restaurant_name,)
            ).fetchone()[0]
            conn.executemany(
                "INSERT OR IGNORE INTO menus (restaurant_id, dish_name) VALUES (?, ?)",
                [(restaurant_id, dish) for dish in group["dish_name"]],
            )
            inserted += len(group)

    logger.info(
        "Seeded catalog: %d restaurants, %d menus",
        df["restaurant"].nunique(),
        inserted,
    )
    return inserted


if __name__ == "__main__":
    database = Database()
    database.init_schema()
    count = seed_catalog(database)
    print(f"Seeding complete. Inserted {count} menu items into {database.path}")
