"""Lead service - capture, triage, assignment and the audit trail around them."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models.base import utcnow
from ..models.lead import LEAD_STATUSES, LEVELS, Lead
from ..models.payment import Payment
from ..models.user import User
from ..schemas.lead import (
    ActivityRead,
    LeadCapture,
    LeadCreate,
    LeadDetailRead,
    LeadListItem,
    LeadRead,
)
from ..schemas.payment import PaymentRead
from ..security.sessions import SessionUser
from . import activity_svc

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "phone", "trade_type", "job_description")
UPDATABLE_FIELDS = ("status", "priority", "assigned_trade_id", "notes", "urgency")
CAPTURE_DETAIL = "Lead captured from website form"


@dataclass
class LeadDetail:
    lead: LeadDetailRead
    activities: list[ActivityRead] = field(default_factory=list)
    payments: list[PaymentRead] = field(default_factory=list)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(data) -> None:
    missing = [name for name in REQUIRED_FIELDS if _blank(getattr(data, name, None))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def _check_level(name: str, value) -> None:
    if value not in LEVELS:
        raise ValidationError(f"Invalid {name}: {value!r}")


async def _users_by_id(db: AsyncSession, ids: set[uuid.UUID]) -> dict[uuid.UUID, User]:
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user for user in result.scalars().all()}


async def capture_lead(db: AsyncSession, data: LeadCapture) -> uuid.UUID:
    """Store a lead from the public website form. Returns the new lead's id."""
    _require(data)

    async with store.transaction(db):
        lead = await store.insert(db, Lead, {
            "name": data.name,
            "phone": data.phone,
            "email": data.email or None,
            "address": data.location or "",
            "town": data.location or "",
            "trade_type": data.trade_type,
            "job_description": data.job_description,
            "urgency": "high" if data.urgent else "medium",
            "preferred_date": data.preferred_date or None,
        })
        await activity_svc.log_activity(db, lead.id, "lead_created", CAPTURE_DETAIL)

    logger.info("Captured lead %s (%s)", lead.id, lead.trade_type)
    return lead.id


async def create_lead(
    db: AsyncSession,
    data: LeadCreate,
    actor: SessionUser | None = None,
) -> Lead:
    _require(data)
    _check_level("urgency", data.urgency)

    async with store.transaction(db):
        lead = await store.insert(db, Lead, {
            "name": data.name,
            "phone": data.phone,
            "email": data.email or None,
            "address": data.address or None,
            "town": data.town or None,
            "trade_type": data.trade_type,
            "job_description": data.job_description,
            "urgency": data.urgency,
            "preferred_date": data.preferred_date or None,
        })
        await activity_svc.log_activity(
            db, lead.id, "lead_created",
            f"Lead created from {data.source or 'website'}",
            user_id=actor.id if actor else None,
        )

    logger.info("Created lead %s (%s)", lead.id, lead.trade_type)
    return lead


async def list_leads(
    db: AsyncSession,
    requester: SessionUser,
    *,
    status: str | None = None,
    trade_type: str | None = None,
    assigned_trade_id: uuid.UUID | None = None,
    town: str | None = None,
) -> list[LeadListItem]:
    """Newest-first leads. Trade users only ever see leads assigned to them."""
    if requester.is_trade:
        assigned_trade_id = requester.id

    leads = await store.fetch_many(
        db, Lead,
        status=status,
        trade_type=trade_type,
        assigned_trade_id=assigned_trade_id,
        town=town,
    )

    trades = await _users_by_id(
        db, {lead.assigned_trade_id for lead in leads if lead.assigned_trade_id}
    )
    items = []
    for lead in leads:
        trade = trades.get(lead.assigned_trade_id) if lead.assigned_trade_id else None
        items.append(LeadListItem(
            **LeadRead.model_validate(lead).model_dump(),
            assigned_trade_name=trade.name if trade else None,
        ))
    return items


async def _load_visible_lead(
    db: AsyncSession, requester: SessionUser, lead_id: uuid.UUID
) -> Lead:
    lead = await store.fetch_one(db, Lead, id=lead_id)
    if lead is None:
        raise NotFoundError("Lead not found")
    if requester.is_trade and lead.assigned_trade_id != requester.id:
        raise ForbiddenError()
    return lead


async def get_lead(
    db: AsyncSession, requester: SessionUser, lead_id: uuid.UUID
) -> LeadDetail:
    lead = await _load_visible_lead(db, requester, lead_id)

    trade = None
    if lead.assigned_trade_id:
        trade = await store.fetch_one(db, User, id=lead.assigned_trade_id)

    activities = await activity_svc.list_activities(db, lead.id)
    payments = await store.fetch_many(db, Payment, lead_id=lead.id)

    return LeadDetail(
        lead=LeadDetailRead(
            **LeadRead.model_validate(lead).model_dump(),
            assigned_trade_name=trade.name if trade else None,
            assigned_trade_phone=trade.phone if trade else None,
            assigned_trade_email=trade.email if trade else None,
        ),
        activities=[ActivityRead.model_validate(a) for a in activities],
        payments=[PaymentRead.model_validate(p) for p in payments],
    )


async def _validated_updates(db: AsyncSession, patch: Mapping[str, Any]) -> dict[str, Any]:
    updates = {key: patch[key] for key in UPDATABLE_FIELDS if key in patch}

    if "status" in updates and updates["status"] not in LEAD_STATUSES:
        raise ValidationError(f"Invalid status: {updates['status']!r}")
    for name in ("priority", "urgency"):
        if name in updates:
            _check_level(name, updates[name])
    if "notes" in updates and not isinstance(updates["notes"], (str, type(None))):
        raise ValidationError("notes must be text")

    if updates.get("assigned_trade_id") is not None:
        try:
            trade_id = uuid.UUID(str(updates["assigned_trade_id"]))
        except ValueError:
            raise ValidationError("Invalid assigned_trade_id") from None
        trade = await store.fetch_one(db, User, id=trade_id)
        if trade is None or trade.role != "trade":
            raise ValidationError("assigned_trade_id must reference a trade user")
        updates["assigned_trade_id"] = trade_id
    return updates


async def update_lead(
    db: AsyncSession,
    requester: SessionUser,
    lead_id: uuid.UUID,
    patch: Mapping[str, Any],
) -> Lead:
    """Apply the allowed subset of ``patch`` and log the whole patch as submitted."""
    updates = await _validated_updates(db, patch)
    if not updates:
        raise ValidationError("No valid fields to update")

    # Trade users may only touch leads they can read.
    await _load_visible_lead(db, requester, lead_id)

    updates["updated_at"] = utcnow()
    action = "lead_assigned" if "assigned_trade_id" in patch else "lead_updated"
    async with store.transaction(db):
        lead = await store.update(db, Lead, updates, id=lead_id)
        await activity_svc.log_activity(db, lead_id, action, dict(patch), user_id=requester.id)

    logger.info("Lead %s %s by %s", lead_id, action, requester.email)
    return lead
