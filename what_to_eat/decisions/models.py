from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..catalog.models import MenuItem


class DecisionRecord(BaseModel):
    id: int
    user_id: int
    menu_id: int
    decided_at: datetime
    menu: MenuItem | None = None


class DecideRequest(BaseModel):
    menu_ids: list[int] | None = Field(
        default=None,
        description="Menu ids to choose from; empty or omitted means the whole catalog",
    )


class DecideResponse(BaseModel):
    menu: MenuItem
    message: str


class HistoryResponse(BaseModel):
    records: list[DecisionRecord]
    total: int
