from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from what_to_eat.app import app
from what_to_eat.catalog.repository import MenuRepository
from what_to_eat.catalog.seed import seed_catalog
from what_to_eat.decisions.clock import Clock
from what_to_eat.decisions.engine import DecisionEngine
from what_to_eat.decisions.history import HistoryQuery
from what_to_eat.decisions.selector import LockedRandom
from what_to_eat.decisions.store import DecisionStore
from what_to_eat.services import build_engine, get_decision_engine, get_menu_repository
from what_to_eat.storage.config import DatabaseConfig
from what_to_eat.storage.db import Database

# Fixed UTC+8 offset so civil-day boundaries don't depend on the host zone
CST = timezone(timedelta(hours=8))
NOON = datetime(2024, 3, 15, 12, 0, tzinfo=CST)


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def clock() -> Clock:
    return Clock(CST, now_fn=lambda: NOON)


@pytest.fixture
def db(tmp_path: Path) -> Database:
    database = Database(DatabaseConfig(path=tmp_path / "test.db"))
    database.init_schema()
    seed_catalog(database)
    return database


@pytest.fixture
def engine(db: Database, clock: Clock) -> DecisionEngine:
    eng = build_engine(db, clock)
    eng.rng = LockedRandom(seed=1234)
    return eng


@pytest.fixture
def menus(engine: DecisionEngine) -> MenuRepository:
    return engine.menus


@pytest.fixture
def store(db: Database, clock: Clock) -> DecisionStore:
    return DecisionStore(db, clock)


@pytest.fixture
def history(store: DecisionStore) -> HistoryQuery:
    return HistoryQuery(store)


@pytest.fixture
def client(engine: DecisionEngine):
    app.dependency_overrides[get_decision_engine] = lambda: engine
    app.dependency_overrides[get_menu_repository] = lambda: engine.menus
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
