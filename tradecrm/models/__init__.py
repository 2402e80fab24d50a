"""CRM models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, CreatedAtMixin, TimestampMixin
from .user import User, TradeProfile
from .lead import Lead
from .payment import Payment
from .activity import ActivityLog

__all__ = [
    "Base",
    "UUIDMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    "User",
    "TradeProfile",
    "Lead",
    "Payment",
    "ActivityLog",
]
