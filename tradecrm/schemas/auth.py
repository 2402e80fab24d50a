"""Login schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserProfile(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    role: str
    phone: str | None = None
    trade_type: str | None = None
    location: str | None = None
