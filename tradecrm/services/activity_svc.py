"""Activity service - lead audit trail."""

from __future__ import annotations

import json
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..models.activity import ActivityLog


def _details_text(details) -> str | None:
    if details is None or isinstance(details, str):
        return details
    return json.dumps(details, default=str, separators=(",", ":"))


async def log_activity(
    db: AsyncSession,
    lead_id: uuid.UUID,
    action: str,
    details=None,
    user_id: uuid.UUID | None = None,
) -> ActivityLog:
    """Stage one audit row. The caller commits it with the change it records."""
    return await store.insert(db, ActivityLog, {
        "lead_id": lead_id,
        "user_id": user_id,
        "action": action,
        "details": _details_text(details),
    })


async def list_activities(db: AsyncSession, lead_id: uuid.UUID) -> list[ActivityLog]:
    return await store.fetch_many(db, ActivityLog, lead_id=lead_id)
