"""Async test fixtures for trades CRM tests using SQLite."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from tradecrm import store
from tradecrm.config import CRMSettings
from tradecrm.database import store_for_engine
from tradecrm.models import Base, TradeProfile, User
from tradecrm.security.sessions import SessionUser, hash_password, issue_session_token

TEST_PASSWORD = "pass123"


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def test_settings() -> CRMSettings:
    return CRMSettings(
        environment="test",
        auth_secret="test-secret",
        auth_bootstrap_password="",
        capture_rate_limit_max_submissions=3,
    )


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    async with store_for_engine(engine).session_factory() as session:
        yield session


async def make_user(
    db: AsyncSession,
    password_hash: str,
    *,
    email: str,
    name: str,
    role: str,
    trade_type: str | None = None,
    location: str | None = None,
) -> User:
    user = await store.insert(db, User, {
        "email": email,
        "password_hash": password_hash,
        "name": name,
        "role": role,
        "phone": "0400 000 000",
    })
    if role == "trade":
        await store.insert(db, TradeProfile, {
            "user_id": user.id,
            "trade_type": trade_type or "plumbing",
            "location": location,
        })
    await db.commit()
    await db.refresh(user, ["trade_profile"])
    return user


@pytest_asyncio.fixture
async def admin(db: AsyncSession, password_hash: str) -> User:
    return await make_user(
        db, password_hash, email="admin@crm.com", name="Admin User", role="admin"
    )


@pytest_asyncio.fixture
async def trade(db: AsyncSession, password_hash: str) -> User:
    return await make_user(
        db, password_hash,
        email="pat@plumbing.test", name="Pat Plumber", role="trade",
        trade_type="plumbing", location="Ballarat",
    )


@pytest_asyncio.fixture
async def other_trade(db: AsyncSession, password_hash: str) -> User:
    return await make_user(
        db, password_hash,
        email="sam@sparks.test", name="Sam Sparky", role="trade",
        trade_type="electrical", location="Geelong",
    )


@pytest.fixture
def admin_session(admin: User) -> SessionUser:
    return SessionUser(id=admin.id, email=admin.email, role=admin.role)


@pytest.fixture
def trade_session(trade: User) -> SessionUser:
    return SessionUser(id=trade.id, email=trade.email, role=trade.role)


@pytest_asyncio.fixture
async def client(engine, test_settings: CRMSettings):
    """HTTPX async test client against an app wired to the test engine."""
    from tradecrm.app import create_app

    app = create_app(test_settings, store_for_engine(engine))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def login_as(client: AsyncClient, test_settings: CRMSettings):
    """Put a signed session cookie for ``user`` on the test client."""

    def _login(user: User) -> None:
        token = issue_session_token(test_settings, user)
        client.cookies.set(test_settings.auth_cookie_name, token)

    return _login
