"""Activity log - append-only audit trail of lead actions."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin, UUIDMixin


class ActivityLog(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "activity_log"

    lead_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("lead.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="SET NULL"), default=None
    )
    action: Mapped[str] = mapped_column(String(50))  # lead_created, lead_assigned, ...
    details: Mapped[str | None] = mapped_column(Text, default=None)

    def __repr__(self) -> str:
        return f"<ActivityLog {self.action}>"
