"""Lead schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class LeadCapture(BaseModel):
    """Public website form. Required fields are checked by the service, not here."""

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    location: str | None = None
    trade_type: str | None = None
    job_description: str | None = None
    urgent: bool = False
    preferred_date: str | None = None

    model_config = {"extra": "allow"}


class LeadCreate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    town: str | None = None
    trade_type: str | None = None
    job_description: str | None = None
    urgency: str = "medium"
    preferred_date: str | None = None
    source: str | None = None


class LeadRead(BaseModel):
    id: uuid.UUID
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    town: str | None = None
    trade_type: str
    job_description: str
    urgency: str
    status: str
    priority: str
    assigned_trade_id: uuid.UUID | None = None
    preferred_date: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LeadListItem(LeadRead):
    assigned_trade_name: str | None = None


class LeadDetailRead(LeadListItem):
    assigned_trade_phone: str | None = None
    assigned_trade_email: str | None = None


class ActivityRead(BaseModel):
    id: uuid.UUID
    lead_id: uuid.UUID
    user_id: uuid.UUID | None = None
    action: str
    details: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
