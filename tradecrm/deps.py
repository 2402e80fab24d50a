"""FastAPI dependencies for session resolution and role checks."""

from __future__ import annotations

from fastapi import Depends, Request

from .config import CRMSettings
from .errors import ForbiddenError, UnauthorizedError
from .security.sessions import SessionUser, current_user_from_request


def get_settings(request: Request) -> CRMSettings:
    return request.app.state.settings


async def get_current_user(request: Request) -> SessionUser:
    """Resolve the session cookie. Raises 401 when absent, forged or expired."""
    user = current_user_from_request(request, request.app.state.settings)
    if user is None:
        raise UnauthorizedError()
    return user


async def require_admin(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if not user.is_admin:
        raise ForbiddenError()
    return user
