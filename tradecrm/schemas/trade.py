"""Trade roster schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class TradeCreate(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    trade_type: str | None = None
    location: str | None = None
    phone: str | None = None


class TradeRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    trade_type: str
    location: str | None = None
    rating: float = 0.0
    availability: str = "available"
