from __future__ import annotations

import logging
import os
import time

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_user
from .auth.models import LoginRequest
from .auth.users import authenticate, guest_user
from .catalog.models import MenuItem, Restaurant
from .catalog.repository import MenuRepository
from .decisions.engine import DecisionEngine
from .decisions.models import (
    DecideRequest,
    DecideResponse,
    DecisionRecord,
    HistoryResponse,
)
from .errors import NoMenusError, PersistenceError
from .logging_config import configure_logging
from .services import get_decision_engine, get_menu_repository

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="What To Eat API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "what-to-eat-secret-change-in-production"),
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "HTTP %s %s -> 500 (%.1f ms, unhandled error)",
            request.method,
            request.url.path,
            (time.perf_counter() - start) * 1000,
        )
        raise
    latency_ms = round((time.perf_counter() - start) * 1000, 1)

    status = response.status_code
    if status >= 500:
        level = logging.ERROR
    elif status >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        "HTTP %s %s -> %d (%.1f ms, ip=%s)",
        request.method,
        request.url.path,
        status,
        latency_ms,
        request.client.host if request.client else "-",
    )
    return response


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/guest")
def guest_login(request: Request) -> dict:
    user = guest_user()
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Catalog endpoints (read-only) ────────────────────────────────────────


@app.get("/menus", response_model=list[MenuItem])
def list_menus(
    user: dict = Depends(require_user),
    menus: MenuRepository = Depends(get_menu_repository),
) -> list[MenuItem]:
    try:
        return menus.list_all()
    except PersistenceError:
        logger.exception("Listing menus failed")
        raise HTTPException(status_code=500, detail="获取菜单列表失败")


@app.get("/restaurants", response_model=list[Restaurant])
def list_restaurants(
    user: dict = Depends(require_user),
    menus: MenuRepository = Depends(get_menu_repository),
) -> list[Restaurant]:
    try:
        return menus.list_restaurants()
    except PersistenceError:
        logger.exception("Listing restaurants failed")
        raise HTTPException(status_code=500, detail="获取餐厅列表失败")


# ── Decision endpoints ───────────────────────────────────────────────────


@app.post("/decide", response_model=DecideResponse)
def decide(
    body: DecideRequest | None = Body(default=None),
    user: dict = Depends(require_user),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> DecideResponse:
    menu_ids = body.menu_ids if body else None
    try:
        return engine.decide(user["id"], menu_ids)
    except NoMenusError as exc:
        logger.warning("Decision for user %s had no candidates (menu_ids=%s)", user["id"], menu_ids)
        raise HTTPException(status_code=400, detail=str(exc))
    except PersistenceError:
        logger.exception("Decision failed for user %s", user["id"])
        raise HTTPException(status_code=500, detail="决策失败")


@app.get("/history", response_model=HistoryResponse)
def history(
    user: dict = Depends(require_user),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> HistoryResponse:
    try:
        return engine.get_history(user["id"])
    except PersistenceError:
        logger.exception("History lookup failed for user %s", user["id"])
        raise HTTPException(status_code=500, detail="获取历史记录失败")


@app.get("/today", response_model=DecisionRecord | None)
def today(
    user: dict = Depends(require_user),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> DecisionRecord | None:
    try:
        return engine.get_today(user["id"])
    except PersistenceError:
        logger.exception("Today lookup failed for user %s", user["id"])
        raise HTTPException(status_code=500, detail="获取今日决策失败")
