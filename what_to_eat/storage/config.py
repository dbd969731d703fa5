from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "what_to_eat.db"


@dataclass(frozen=True)
class DatabaseConfig:
    path: Path = Path(os.getenv("WHAT_TO_EAT_DB_PATH", str(_DEFAULT_DB_PATH)))
    timeout: float = float(os.getenv("WHAT_TO_EAT_DB_TIMEOUT", "5.0"))


DEFAULT_DATABASE_CONFIG = DatabaseConfig()
