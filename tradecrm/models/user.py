"""User accounts and the trade-specific profile."""

from __future__ import annotations

import uuid

from sqlalchemy import Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, UUIDMixin

ROLES = ("admin", "trade", "customer")


class User(UUIDMixin, CreatedAtMixin, Base):
    """Login account shared by every role. Role is fixed at creation."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(String(20))
    phone: Mapped[str | None] = mapped_column(String(50), default=None)

    trade_profile: Mapped["TradeProfile | None"] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False, lazy="selectin"
    )

    @property
    def trade_type(self) -> str | None:
        return self.trade_profile.trade_type if self.trade_profile else None

    @property
    def location(self) -> str | None:
        return self.trade_profile.location if self.trade_profile else None

    def __repr__(self) -> str:
        return f"<User {self.email!r} ({self.role})>"


class TradeProfile(Base):
    """Role payload carried only by users with role ``trade``."""

    __tablename__ = "trade_profile"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    )
    trade_type: Mapped[str] = mapped_column(String(100), index=True)
    location: Mapped[str | None] = mapped_column(String(200), default=None)
    rating: Mapped[float] = mapped_column(Float, default=0.0)
    availability: Mapped[str] = mapped_column(String(50), default="available")

    user: Mapped[User] = relationship(back_populates="trade_profile")

    def __repr__(self) -> str:
        return f"<TradeProfile {self.trade_type!r}>"
