"""Payment routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..deps import get_current_user, require_admin
from ..schemas.payment import PaymentCreate, PaymentRead
from ..security.sessions import SessionUser
from ..services import payment_svc

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("")
async def list_payments(
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"payments": await payment_svc.list_payments(db, user)}


@router.post("", status_code=201)
async def record_payment(
    data: PaymentCreate,
    user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    payment = await payment_svc.record_payment(db, user, data)
    return {"payment": PaymentRead.model_validate(payment)}
