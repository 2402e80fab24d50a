"""FastAPI application factory for the trades CRM."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import CRMSettings, settings
from .database import Store, create_store
from .errors import CRMError, PersistenceError
from .security.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


def _install_error_handlers(app: FastAPI, settings_obj: CRMSettings) -> None:
    @app.exception_handler(CRMError)
    async def crm_error_handler(request: Request, exc: CRMError):
        body = {"error": exc.reason}
        if isinstance(exc, PersistenceError):
            logger.error(
                "Store fault on %s %s", request.method, request.url.path, exc_info=exc.__cause__
            )
            if not settings_obj.is_production and exc.__cause__ is not None:
                body["detail"] = str(exc.__cause__)
        return JSONResponse(body, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"error": "Invalid input", "detail": [e.get("msg") for e in exc.errors()]},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = {"error": "Internal server error"}
        if not settings_obj.is_production:
            body["detail"] = str(exc)
        return JSONResponse(body, status_code=500)


def create_app(settings_obj: CRMSettings | None = None, store: Store | None = None) -> FastAPI:
    """Build the app around one store handle, created here unless one is passed in."""
    settings_obj = settings_obj or settings
    store = store or create_store(settings_obj)
    logging.basicConfig(level=settings_obj.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Auto-create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
        if "sqlite" in str(store.engine.url):
            await store.create_all()
        if settings_obj.auth_bootstrap_password:
            from .services import auth_svc

            async with store.session_factory() as db:
                await auth_svc.bootstrap_admin(
                    db,
                    settings_obj.auth_bootstrap_email,
                    settings_obj.auth_bootstrap_password,
                    settings_obj.auth_bootstrap_name,
                )
        yield
        await store.dispose()

    app = FastAPI(title=settings_obj.app_title, lifespan=lifespan)
    app.state.settings = settings_obj
    app.state.store = store
    app.state.capture_limiter = SlidingWindowRateLimiter(settings_obj)
    _install_error_handlers(app, settings_obj)

    from .routers import auth, health, leads, payments, reports, trades

    app.include_router(auth.router)
    app.include_router(leads.router)
    app.include_router(trades.router)
    app.include_router(payments.router)
    app.include_router(reports.router)
    app.include_router(health.router)
    return app
