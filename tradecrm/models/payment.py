"""Payment model - money recorded against a lead."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin, UUIDMixin

PAYMENT_STATUSES = ("pending", "paid", "failed")


class Payment(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "payment"

    lead_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("lead.id", ondelete="CASCADE"), index=True
    )
    amount: Mapped[float] = mapped_column(Float)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    invoice_number: Mapped[str | None] = mapped_column(String(100), default=None)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)

    def __repr__(self) -> str:
        return f"<Payment {self.amount} ({self.status})>"
