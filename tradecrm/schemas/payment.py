"""Payment schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class PaymentCreate(BaseModel):
    lead_id: uuid.UUID | None = None
    amount: float | None = None
    status: str = "pending"
    invoice_number: str | None = None


class PaymentRead(BaseModel):
    id: uuid.UUID
    lead_id: uuid.UUID
    amount: float
    status: str
    invoice_number: str | None = None
    payment_date: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentListItem(PaymentRead):
    lead_name: str | None = None
    trade_type: str | None = None
