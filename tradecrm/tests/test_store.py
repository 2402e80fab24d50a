"""Tests for the typed row helpers."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tradecrm import store
from tradecrm.errors import PersistenceError
from tradecrm.models import Lead, User


def _lead_fields(**overrides) -> dict:
    fields = {
        "name": "Jo Bloggs",
        "phone": "0411 111 111",
        "trade_type": "plumbing",
        "job_description": "Leaking tap",
    }
    fields.update(overrides)
    return fields


@pytest.mark.asyncio
async def test_insert_applies_model_defaults(db: AsyncSession):
    lead = await store.insert(db, Lead, _lead_fields())
    await store.commit(db)

    assert isinstance(lead.id, uuid.UUID)
    assert lead.status == "new"
    assert lead.priority == "medium"
    assert lead.urgency == "medium"
    assert lead.created_at is not None


@pytest.mark.asyncio
async def test_unknown_column_is_rejected(db: AsyncSession):
    with pytest.raises(ValueError):
        await store.insert(db, Lead, _lead_fields(colour="red"))
    with pytest.raises(ValueError):
        await store.fetch_one(db, Lead, **{"name; DROP TABLE lead": "x"})
    with pytest.raises(ValueError):
        await store.fetch_many(db, Lead, order_by="nope")


@pytest.mark.asyncio
async def test_fetch_one_and_fetch_many_filter(db: AsyncSession):
    await store.insert(db, Lead, _lead_fields(town="Ballarat"))
    await store.insert(db, Lead, _lead_fields(town="Geelong", status="contacted"))
    await store.commit(db)

    found = await store.fetch_one(db, Lead, town="Geelong")
    assert found is not None and found.status == "contacted"
    assert await store.fetch_one(db, Lead, town="Nowhere") is None

    assert len(await store.fetch_many(db, Lead)) == 2
    assert len(await store.fetch_many(db, Lead, status="new", town=None)) == 1


@pytest.mark.asyncio
async def test_fetch_many_orders_newest_first(db: AsyncSession):
    first = await store.insert(db, Lead, _lead_fields(name="First"))
    second = await store.insert(db, Lead, _lead_fields(name="Second"))
    await store.commit(db)

    rows = await store.fetch_many(db, Lead)
    assert [r.id for r in rows] == [second.id, first.id]

    rows = await store.fetch_many(db, Lead, descending=False)
    assert [r.id for r in rows] == [first.id, second.id]


@pytest.mark.asyncio
async def test_update_returns_row_or_none(db: AsyncSession):
    lead = await store.insert(db, Lead, _lead_fields())
    await store.commit(db)

    updated = await store.update(db, Lead, {"notes": "Call after 5"}, id=lead.id)
    await store.commit(db)
    assert updated is not None and updated.notes == "Call after 5"

    assert await store.update(db, Lead, {"notes": "x"}, id=uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_delete_requires_filter(db: AsyncSession):
    lead = await store.insert(db, Lead, _lead_fields())
    await store.commit(db)

    with pytest.raises(ValueError):
        await store.delete(db, Lead)

    assert await store.delete(db, Lead, id=lead.id) is True
    assert await store.delete(db, Lead, id=lead.id) is False
    await store.commit(db)


@pytest.mark.asyncio
async def test_constraint_violation_becomes_persistence_error(db: AsyncSession):
    fields = {
        "email": "dup@crm.com",
        "password_hash": "x",
        "name": "Dup",
        "role": "admin",
    }
    await store.insert(db, User, fields)
    await store.commit(db)

    with pytest.raises(PersistenceError) as info:
        await store.insert(db, User, dict(fields))
    assert info.value.status_code == 500
    assert info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_transaction_commits_on_success(db: AsyncSession):
    async with store.transaction(db):
        lead = await store.insert(db, Lead, _lead_fields(name="Kept"))
    lead_id = lead.id

    await db.rollback()
    assert await store.fetch_one(db, Lead, id=lead_id) is not None


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(db: AsyncSession):
    with pytest.raises(RuntimeError):
        async with store.transaction(db):
            await store.insert(db, Lead, _lead_fields(name="Discarded"))
            raise RuntimeError("boom")

    assert await store.fetch_many(db, Lead) == []
