"""Tests for the payment ledger."""

from __future__ import annotations

import json
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tradecrm import store
from tradecrm.errors import ForbiddenError, NotFoundError, ValidationError
from tradecrm.models import ActivityLog, Lead
from tradecrm.schemas.payment import PaymentCreate
from tradecrm.services import payment_svc


@pytest.fixture
def lead_fields() -> dict:
    return {
        "name": "Jo Bloggs",
        "phone": "0411 111 111",
        "trade_type": "plumbing",
        "job_description": "Hot water service",
        "status": "completed",
    }


@pytest.mark.asyncio
async def test_paid_payment_marks_lead_paid(db: AsyncSession, admin_session, lead_fields):
    lead = await store.insert(db, Lead, lead_fields)
    await store.commit(db)

    payment = await payment_svc.record_payment(
        db, admin_session,
        PaymentCreate(lead_id=lead.id, amount=420.5, status="paid", invoice_number="INV-7"),
    )

    assert payment.status == "paid"
    assert payment.payment_date is not None
    assert payment.invoice_number == "INV-7"

    lead = await store.fetch_one(db, Lead, id=lead.id)
    assert lead.status == "paid"

    entries = await store.fetch_many(db, ActivityLog, lead_id=lead.id)
    assert [e.action for e in entries] == ["payment_recorded"]
    assert json.loads(entries[0].details) == {"amount": 420.5, "status": "paid"}


@pytest.mark.asyncio
async def test_pending_payment_leaves_lead_status(db: AsyncSession, admin_session, lead_fields):
    lead = await store.insert(db, Lead, lead_fields)
    await store.commit(db)

    payment = await payment_svc.record_payment(
        db, admin_session, PaymentCreate(lead_id=lead.id, amount=100)
    )

    assert payment.status == "pending"
    assert payment.payment_date is None
    assert (await store.fetch_one(db, Lead, id=lead.id)).status == "completed"


@pytest.mark.asyncio
async def test_payment_validation(db: AsyncSession, admin_session, lead_fields):
    lead = await store.insert(db, Lead, lead_fields)
    await store.commit(db)

    with pytest.raises(ValidationError):
        await payment_svc.record_payment(db, admin_session, PaymentCreate(amount=10))
    with pytest.raises(ValidationError):
        await payment_svc.record_payment(db, admin_session, PaymentCreate(lead_id=lead.id))
    with pytest.raises(ValidationError):
        await payment_svc.record_payment(
            db, admin_session, PaymentCreate(lead_id=lead.id, amount=-1)
        )
    with pytest.raises(ValidationError):
        await payment_svc.record_payment(
            db, admin_session, PaymentCreate(lead_id=lead.id, amount=1, status="refunded")
        )
    with pytest.raises(NotFoundError):
        await payment_svc.record_payment(
            db, admin_session, PaymentCreate(lead_id=uuid.uuid4(), amount=1)
        )


@pytest.mark.asyncio
async def test_only_admin_records_payments(db: AsyncSession, trade_session, lead_fields):
    lead = await store.insert(db, Lead, lead_fields)
    await store.commit(db)

    with pytest.raises(ForbiddenError):
        await payment_svc.record_payment(
            db, trade_session, PaymentCreate(lead_id=lead.id, amount=50, status="paid")
        )


@pytest.mark.asyncio
async def test_list_payments_carries_lead_name_and_trade(
    db: AsyncSession, admin_session, lead_fields
):
    lead = await store.insert(db, Lead, lead_fields)
    await store.commit(db)
    first = await payment_svc.record_payment(
        db, admin_session, PaymentCreate(lead_id=lead.id, amount=50)
    )
    second = await payment_svc.record_payment(
        db, admin_session, PaymentCreate(lead_id=lead.id, amount=75, status="paid")
    )

    payments = await payment_svc.list_payments(db, admin_session)
    assert [p.id for p in payments] == [second.id, first.id]
    assert payments[0].lead_name == "Jo Bloggs"
    assert payments[0].trade_type == "plumbing"
