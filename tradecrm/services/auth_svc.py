"""Account lookup, credential checks and admin bootstrap."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..errors import ValidationError
from ..models.user import User
from ..security.sessions import hash_password_async, verify_password_async

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def profile(user: User) -> dict:
    """Public view of an account - never includes the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "phone": user.phone,
        "trade_type": user.trade_type,
        "location": user.location,
    }


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    email_norm = normalize_email(email)
    if not email_norm:
        return None
    return await store.fetch_one(db, User, email=email_norm)


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """Validate credentials. Returns the account, or None on any mismatch."""
    if not normalize_email(email) or not password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(db, email)
    if not user or not await verify_password_async(password, user.password_hash):
        logger.warning("Failed login for %s", normalize_email(email))
        return None
    return user


async def bootstrap_admin(
    db: AsyncSession,
    email: str,
    password: str,
    name: str = "Admin User",
) -> bool:
    """Create the default admin if it does not exist yet. Returns True if created."""
    email_norm = normalize_email(email)
    if not email_norm or not password:
        return False
    if await get_user_by_email(db, email_norm):
        return False

    password_hash = await hash_password_async(password)
    async with store.transaction(db):
        await store.insert(db, User, {
            "email": email_norm,
            "password_hash": password_hash,
            "name": name,
            "role": "admin",
        })
    logger.info("Bootstrapped admin account %s", email_norm)
    return True
