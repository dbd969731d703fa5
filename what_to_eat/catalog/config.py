from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CatalogConfig:
    """
    Configuration for seeding the menu catalog.
    """

    seed_csv: Path = Path(__file__).resolve().parent.parent / "data" / "menus.csv"


DEFAULT_CATALOG_CONFIG = CatalogConfig()
