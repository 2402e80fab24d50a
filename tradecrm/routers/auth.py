"""Login / logout routes - the session cookie is the only credential."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..config import CRMSettings
from ..database import get_db
from ..deps import get_current_user, get_settings
from ..errors import UnauthorizedError
from ..models.user import User
from ..schemas.auth import LoginRequest, UserProfile
from ..security.sessions import (
    SessionUser,
    clear_session_cookie,
    issue_session_token,
    set_session_cookie,
)
from ..services import auth_svc

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings_obj: CRMSettings = Depends(get_settings),
):
    user = await auth_svc.authenticate_user(db, data.email, data.password)
    if user is None:
        raise UnauthorizedError("Invalid credentials")

    token = issue_session_token(settings_obj, user)
    response = JSONResponse(jsonable_encoder({
        "user": UserProfile(**auth_svc.profile(user)),
        "token": token,
    }))
    set_session_cookie(response, settings_obj, token)
    return response


@router.post("/logout")
async def logout(settings_obj: CRMSettings = Depends(get_settings)):
    response = JSONResponse({"success": True})
    clear_session_cookie(response, settings_obj)
    return response


@router.get("/me")
async def me(
    current: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await store.fetch_one(db, User, id=current.id)
    if user is None:
        raise UnauthorizedError()
    return {"user": UserProfile(**auth_svc.profile(user))}
