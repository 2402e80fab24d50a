"""Lead routes - public capture plus the authenticated triage API."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import CRMSettings
from ..database import get_db
from ..deps import get_current_user, get_settings
from ..schemas.lead import LeadCapture, LeadCreate, LeadRead
from ..security.sessions import SessionUser
from ..services import lead_svc

router = APIRouter(prefix="/api/leads", tags=["leads"])

CAPTURE_THANKS = "Thank you! We will contact you shortly."


def _client_ip(request: Request, settings_obj: CRMSettings) -> str:
    if settings_obj.capture_trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "").split(",", 1)[0].strip()
        if forwarded:
            return forwarded[:64]
    if request.client and request.client.host:
        return str(request.client.host)[:64]
    return "unknown"


@router.post("/capture", status_code=201)
async def capture_lead(
    request: Request,
    data: LeadCapture,
    db: AsyncSession = Depends(get_db),
    settings_obj: CRMSettings = Depends(get_settings),
):
    allowed, retry_after = await request.app.state.capture_limiter.allow(
        _client_ip(request, settings_obj)
    )
    if not allowed:
        return JSONResponse(
            {"error": "Too many submissions"},
            status_code=429,
            headers={"Retry-After": str(retry_after)},
        )

    # Bots fill the hidden field; answer as usual but store nothing.
    if (data.model_extra or {}).get(settings_obj.capture_honeypot_field):
        return {"success": True, "message": CAPTURE_THANKS, "lead_id": None}

    lead_id = await lead_svc.capture_lead(db, data)
    return {"success": True, "message": CAPTURE_THANKS, "lead_id": lead_id}


@router.get("")
async def list_leads(
    status: str | None = None,
    trade_type: str | None = None,
    assigned_to: uuid.UUID | None = None,
    town: str | None = None,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    leads = await lead_svc.list_leads(
        db, user,
        status=status or None,
        trade_type=trade_type or None,
        assigned_trade_id=assigned_to,
        town=town or None,
    )
    return {"leads": leads}


@router.post("", status_code=201)
async def create_lead(
    data: LeadCreate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    lead = await lead_svc.create_lead(db, data, actor=user)
    return {"lead": LeadRead.model_validate(lead)}


@router.get("/{lead_id}")
async def get_lead(
    lead_id: uuid.UUID,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    detail = await lead_svc.get_lead(db, user, lead_id)
    return {
        "lead": detail.lead,
        "activities": detail.activities,
        "payments": detail.payments,
    }


@router.patch("/{lead_id}")
async def update_lead(
    lead_id: uuid.UUID,
    patch: dict[str, Any] = Body(...),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    lead = await lead_svc.update_lead(db, user, lead_id, patch)
    return {"lead": LeadRead.model_validate(lead)}
