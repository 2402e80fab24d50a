"""Trade roster - tradesperson accounts leads get assigned to."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..errors import ConflictError, ForbiddenError, PersistenceError, ValidationError
from ..models.user import TradeProfile, User
from ..schemas.trade import TradeCreate, TradeRead
from ..security.sessions import SessionUser, hash_password_async
from .auth_svc import get_user_by_email, normalize_email

logger = logging.getLogger(__name__)


def _require_admin(requester: SessionUser) -> None:
    if not requester.is_admin:
        raise ForbiddenError()


def to_trade_read(user: User) -> TradeRead:
    trade = user.trade_profile
    return TradeRead(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        trade_type=trade.trade_type,
        location=trade.location,
        rating=trade.rating,
        availability=trade.availability,
    )


async def list_trades(db: AsyncSession, requester: SessionUser) -> list[TradeRead]:
    _require_admin(requester)
    stmt = (
        select(User)
        .join(TradeProfile, TradeProfile.user_id == User.id)
        .where(User.role == "trade")
        .order_by(User.created_at.desc(), User.id)
    )
    result = await db.execute(stmt)
    return [to_trade_read(user) for user in result.scalars().all()]


async def create_trade(
    db: AsyncSession, requester: SessionUser, data: TradeCreate
) -> TradeRead:
    _require_admin(requester)
    missing = [
        name for name in ("email", "password", "name", "trade_type")
        if not (getattr(data, name) or "").strip()
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    email = normalize_email(data.email)
    if await get_user_by_email(db, email):
        raise ConflictError("Email already exists")

    password_hash = await hash_password_async(data.password)
    try:
        async with store.transaction(db):
            user = await store.insert(db, User, {
                "email": email,
                "password_hash": password_hash,
                "name": data.name,
                "role": "trade",
                "phone": data.phone or None,
            })
            await store.insert(db, TradeProfile, {
                "user_id": user.id,
                "trade_type": data.trade_type,
                "location": data.location or None,
            })
    except PersistenceError as exc:
        # Lost a race with another signup for the same email.
        if isinstance(exc.__cause__, IntegrityError):
            raise ConflictError("Email already exists") from exc
        raise
    await db.refresh(user, ["trade_profile"])

    logger.info("Created trade account %s (%s)", email, data.trade_type)
    return to_trade_read(user)
