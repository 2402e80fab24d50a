"""Dashboard statistics route."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..deps import get_current_user
from ..security.sessions import SessionUser
from ..services import report_svc

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/dashboard")
async def dashboard(
    month: str | None = None,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await report_svc.dashboard(db, user, month)
