from __future__ import annotations

from typing import Any

import bcrypt

GUEST_USER_ID = 1
GUEST_USERNAME = "guest"

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed the guest and demo accounts on import."""
    _users[GUEST_USERNAME] = {"id": GUEST_USER_ID, "password_hash": _hash_password("guest123")}
    _users["user"] = {"id": 2, "password_hash": _hash_password("user123")}
    _users["foodie"] = {"id": 3, "password_hash": _hash_password("foodie123")}


def _public(username: str, record: dict[str, Any]) -> dict[str, Any]:
    return {"id": record["id"], "username": username}


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, username}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return _public(username, record)
    return None


def guest_user() -> dict[str, Any]:
    """Return the shared guest account."""
    return _public(GUEST_USERNAME, _users[GUEST_USERNAME])


_seed_users()
