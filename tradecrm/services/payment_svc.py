"""Payment ledger - payments recorded against leads."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models.base import utcnow
from ..models.lead import Lead
from ..models.payment import PAYMENT_STATUSES, Payment
from ..schemas.payment import PaymentCreate, PaymentListItem, PaymentRead
from ..security.sessions import SessionUser
from . import activity_svc

logger = logging.getLogger(__name__)


async def record_payment(
    db: AsyncSession, requester: SessionUser, data: PaymentCreate
) -> Payment:
    """Record a payment. A paid payment also moves its lead to ``paid``."""
    if not requester.is_admin:
        raise ForbiddenError()
    if data.lead_id is None or data.amount is None:
        raise ValidationError("Missing required fields: lead_id, amount")
    if data.amount < 0:
        raise ValidationError("Amount must not be negative")
    if data.status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid status: {data.status!r}")

    lead = await store.fetch_one(db, Lead, id=data.lead_id)
    if lead is None:
        raise NotFoundError("Lead not found")

    paid = data.status == "paid"
    now = utcnow()
    async with store.transaction(db):
        payment = await store.insert(db, Payment, {
            "lead_id": lead.id,
            "amount": data.amount,
            "status": data.status,
            "invoice_number": data.invoice_number or None,
            "payment_date": now if paid else None,
        })
        if paid:
            await store.update(db, Lead, {"status": "paid", "updated_at": now}, id=lead.id)

        await activity_svc.log_activity(
            db, lead.id, "payment_recorded",
            {"amount": data.amount, "status": data.status},
            user_id=requester.id,
        )

    logger.info("Recorded %s payment of %s for lead %s", data.status, data.amount, lead.id)
    return payment


async def list_payments(db: AsyncSession, requester: SessionUser) -> list[PaymentListItem]:
    """All payments, newest first, with the parent lead's name and trade."""
    payments = await store.fetch_many(db, Payment)

    lead_ids = {p.lead_id for p in payments}
    leads = {}
    if lead_ids:
        result = await db.execute(
            select(Lead.id, Lead.name, Lead.trade_type).where(Lead.id.in_(lead_ids))
        )
        leads = {row.id: row for row in result.all()}

    items = []
    for payment in payments:
        lead = leads.get(payment.lead_id)
        items.append(PaymentListItem(
            **PaymentRead.model_validate(payment).model_dump(),
            lead_name=lead.name if lead else None,
            trade_type=lead.trade_type if lead else None,
        ))
    return items
