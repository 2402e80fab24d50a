"""Trade roster routes (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..deps import require_admin
from ..schemas.trade import TradeCreate
from ..security.sessions import SessionUser
from ..services import trade_svc

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("")
async def list_trades(
    user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return {"trades": await trade_svc.list_trades(db, user)}


@router.post("", status_code=201)
async def create_trade(
    data: TradeCreate,
    user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return {"trade": await trade_svc.create_trade(db, user, data)}
