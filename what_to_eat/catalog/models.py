from __future__ import annotations

from pydantic import BaseModel


class Restaurant(BaseModel):
    id: int
    name: str


class MenuItem(BaseModel):
    id: int
    dish_name: str
    restaurant_id: int
    restaurant: Restaurant | None = None
