"""
Process-wide service wiring.

The FastAPI endpoints depend on these getters; tests swap them out through
``app.dependency_overrides``.
"""
from __future__ import annotations

import logging
import threading

from .catalog.repository import MenuRepository
from .catalog.seed import seed_catalog
from .decisions.clock import Clock
from .decisions.config import DEFAULT_DECISION_CONFIG
from .decisions.engine import DecisionEngine
from .decisions.store import DecisionStore
from .storage.db import Database

logger = logging.getLogger(__name__)

_engine: DecisionEngine | None = None
_init_lock = threading.Lock()


def build_engine(db: Database, clock: Clock | None = None) -> DecisionEngine:
    """Create the schema, seed the catalog and assemble an engine over *db*."""
    db.init_schema()
    seed_catalog(db)
    clock = clock or Clock.from_name(DEFAULT_DECISION_CONFIG.timezone)
    return DecisionEngine(MenuRepository(db), DecisionStore(db, clock))


def get_decision_engine() -> DecisionEngine:
    """Return the shared engine, building it on first call."""
    global _engine
    if _engine is None:
        with _init_lock:
            if _engine is None:
                db = Database()
                _engine = build_engine(db)
                logger.info("Decision engine ready (db=%s)", db.path)
    return _engine


def get_menu_repository() -> MenuRepository:
    return get_decision_engine().menus
