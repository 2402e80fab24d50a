"""Lead model - a customer's service request."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin

LEAD_STATUSES = ("new", "contacted", "assigned", "completed", "paid", "closed")
CONVERTED_STATUSES = ("completed", "paid", "closed")
LEVELS = ("low", "medium", "high")


class Lead(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "lead"

    name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    address: Mapped[str | None] = mapped_column(String(255), default=None)
    town: Mapped[str | None] = mapped_column(String(100), default=None)
    trade_type: Mapped[str] = mapped_column(String(100), index=True)
    job_description: Mapped[str] = mapped_column(Text)
    urgency: Mapped[str] = mapped_column(String(20), default="medium")
    status: Mapped[str] = mapped_column(String(20), default="new", index=True)
    priority: Mapped[str] = mapped_column(String(20), default="medium")
    assigned_trade_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="SET NULL"), default=None, index=True
    )
    preferred_date: Mapped[str | None] = mapped_column(String(50), default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    def __repr__(self) -> str:
        return f"<Lead {self.name!r} ({self.status})>"
