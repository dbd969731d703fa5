from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass(frozen=True)
class DecisionConfig:
    recent_limit: int = 3
    history_days: int = 5
    recent_weight: float = 0.5
    default_weight: float = 1.0
    # IANA zone name; empty means the host's local time zone
    timezone: str = os.getenv("WHAT_TO_EAT_TIMEZONE", "")
    locale: str = os.getenv("WHAT_TO_EAT_LOCALE", "zh")
    seed: int | None = _optional_int("WHAT_TO_EAT_SEED")


DEFAULT_DECISION_CONFIG = DecisionConfig()
