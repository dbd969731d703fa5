from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from what_to_eat.decisions.engine import MESSAGES
from what_to_eat.storage.config import DatabaseConfig
from what_to_eat.storage.db import Database

from .conftest import NOON, FixedRandom


def _login_user(c):
    c.post("/auth/login", json={"username": "user", "password": "user123"})


def _login_guest(c):
    c.post("/auth/guest")


# ── Public / auth ────────────────────────────────────────────────────────


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_login_success(client):
    resp = client.post("/auth/login", json={"username": "user", "password": "user123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"] == {"id": 2, "username": "user"}


def test_login_wrong_password(client):
    resp = client.post("/auth/login", json={"username": "user", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user(client):
    resp = client.post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_login_validation_rejects_empty_username(client):
    resp = client.post("/auth/login", json={"username": "", "password": "x"})
    assert resp.status_code == 422


def test_guest_login(client):
    resp = client.post("/auth/guest")
    assert resp.status_code == 200
    assert resp.json()["user"] == {"id": 1, "username": "guest"}
    assert client.get("/auth/me").json()["username"] == "guest"


def test_logout_clears_session(client):
    _login_user(client)
    resp = client.post("/auth/logout")
    assert resp.json()["status"] == "logged_out"
    assert client.get("/auth/me").status_code == 401


def test_protected_routes_require_login(client):
    assert client.get("/menus").status_code == 401
    assert client.get("/restaurants").status_code == 401
    assert client.post("/decide").status_code == 401
    assert client.get("/history").status_code == 401
    assert client.get("/today").status_code == 401


# ── Catalog ──────────────────────────────────────────────────────────────


def test_list_menus(client):
    _login_user(client)
    resp = client.get("/menus")
    assert resp.status_code == 200
    menus = resp.json()
    assert len(menus) == 22
    assert menus[0]["restaurant"]["name"] == "麦当劳"
    assert [m["id"] for m in menus] == sorted(m["id"] for m in menus)


def test_list_restaurants(client):
    _login_user(client)
    names = [r["name"] for r in client.get("/restaurants").json()]
    assert names == ["麦当劳", "肯德基", "沙县小吃", "兰州拉面", "黄焖鸡米饭", "海底捞"]


# ── Decisions ────────────────────────────────────────────────────────────


def test_decide_without_body_uses_whole_catalog(client):
    _login_user(client)
    resp = client.post("/decide")
    assert resp.status_code == 200
    body = resp.json()
    assert 1 <= body["menu"]["id"] <= 22
    assert body["message"] == MESSAGES["zh"]["fresh"]


def test_decide_with_subset(client):
    _login_user(client)
    resp = client.post("/decide", json={"menu_ids": [3, 4]})
    assert resp.status_code == 200
    assert resp.json()["menu"]["id"] in (3, 4)


def test_decide_with_null_ids(client):
    _login_user(client)
    resp = client.post("/decide", json={"menu_ids": None})
    assert resp.status_code == 200


def test_decide_unknown_ids_is_client_error(client):
    _login_user(client)
    resp = client.post("/decide", json={"menu_ids": [9999]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "没有可选择的菜品"


def test_decide_rejects_malformed_ids(client):
    _login_user(client)
    resp = client.post("/decide", json={"menu_ids": ["abc"]})
    assert resp.status_code == 422


def test_decide_repeat_message(client, engine):
    engine.store.record_decision(2, 1, NOON - timedelta(days=1))
    engine.rng = FixedRandom(0.0)
    _login_user(client)

    body = client.post("/decide", json={"menu_ids": [1]}).json()
    assert body["message"] == MESSAGES["zh"]["repeat"]


def test_history_after_decisions(client, engine):
    engine.store.record_decision(2, 5, NOON - timedelta(days=2))
    engine.store.record_decision(2, 6, NOON - timedelta(days=6))
    _login_user(client)
    client.post("/decide", json={"menu_ids": [7]})

    resp = client.get("/history")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert [r["menu_id"] for r in body["records"]] == [7, 5]
    assert body["records"][0]["menu"]["dish_name"]


def test_history_is_scoped_to_session_user(client, engine):
    engine.store.record_decision(2, 5, NOON)
    _login_guest(client)
    assert client.get("/history").json() == {"records": [], "total": 0}


def test_today_before_and_after_deciding(client):
    _login_user(client)
    assert client.get("/today").json() is None

    decided = client.post("/decide").json()
    today = client.get("/today").json()
    assert today["menu_id"] == decided["menu"]["id"]
    assert today["user_id"] == 2


def test_storage_failure_is_server_error(client, engine, tmp_path):
    # Point the store at a database without tables
    engine.store.db = Database(DatabaseConfig(path=tmp_path / "broken.db"))
    _login_user(client)

    assert client.post("/decide").status_code == 500
    assert client.get("/history").status_code == 500


def test_unhandled_error_is_logged_as_server_error(client, engine, monkeypatch, caplog):
    def boom(*args, **kwargs):
        raise RuntimeError("kitchen on fire")

    monkeypatch.setattr(engine, "decide", boom)
    _login_user(client)

    with caplog.at_level(logging.ERROR, logger="what_to_eat.app"):
        with pytest.raises(RuntimeError):
            client.post("/decide")

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert any("POST /decide -> 500" in r.getMessage() for r in errors)
