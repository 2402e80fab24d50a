"""Generic row helpers - filtered reads and single-row writes over ORM models.

Every helper takes the model class instead of a table name and checks filter
keys against the model's mapped columns, so nothing outside the schema ever
reaches a query. Writes are flushed, not committed; callers group them and
run them inside :func:`transaction` so a row and its audit entry land together.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import PersistenceError
from .models import Base

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)


def _column(model: type[Base], key: str):
    columns = model.__table__.columns
    if key not in columns:
        raise ValueError(f"{model.__name__} has no column {key!r}")
    return getattr(model, key)


def _where(model: type[Base], filters: dict[str, Any], *, skip_none: bool = False) -> list:
    return [
        _column(model, key) == value
        for key, value in filters.items()
        if not (skip_none and value is None)
    ]


async def _fault(db: AsyncSession, exc: SQLAlchemyError, op: str, model: type[Base]):
    logger.error("Store %s on %s failed: %s", op, model.__tablename__, exc)
    await db.rollback()
    raise PersistenceError() from exc


async def fetch_one(db: AsyncSession, model: type[M], **filters: Any) -> M | None:
    """Return the first row matching all equality filters, or None."""
    stmt = select(model).where(*_where(model, filters)).limit(1)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        await _fault(db, exc, "fetch_one", model)
    return result.scalars().first()


async def fetch_many(
    db: AsyncSession,
    model: type[M],
    *,
    order_by: str = "created_at",
    descending: bool = True,
    **filters: Any,
) -> list[M]:
    """Return rows matching all equality filters; None-valued filters are skipped."""
    column = _column(model, order_by)
    stmt = (
        select(model)
        .where(*_where(model, filters, skip_none=True))
        .order_by(column.desc() if descending else column.asc())
    )
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        await _fault(db, exc, "fetch_many", model)
    return list(result.scalars().all())


async def insert(db: AsyncSession, model: type[M], fields: dict[str, Any]) -> M:
    for key in fields:
        _column(model, key)
    row = model(**fields)
    db.add(row)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        await _fault(db, exc, "insert", model)
    return row


async def update(
    db: AsyncSession, model: type[M], fields: dict[str, Any], **filters: Any
) -> M | None:
    """Apply ``fields`` to the first row matching ``filters``. None if no row matched."""
    for key in fields:
        _column(model, key)
    row = await fetch_one(db, model, **filters)
    if row is None:
        return None
    for key, value in fields.items():
        setattr(row, key, value)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        await _fault(db, exc, "update", model)
    return row


async def delete(db: AsyncSession, model: type[M], **filters: Any) -> bool:
    where = _where(model, filters)
    if not where:
        raise ValueError("delete requires at least one filter")
    try:
        result = await db.execute(sa_delete(model).where(*where))
        await db.flush()
    except SQLAlchemyError as exc:
        await _fault(db, exc, "delete", model)
    return bool(result.rowcount)


async def commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        logger.error("Store commit failed: %s", exc)
        await db.rollback()
        raise PersistenceError() from exc


@asynccontextmanager
async def transaction(db: AsyncSession):
    """Commit everything staged inside the block, or roll all of it back."""
    try:
        yield db
    except Exception:
        await db.rollback()
        raise
    await commit(db)
