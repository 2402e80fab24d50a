"""Async database engine and session factory."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import CRMSettings


@dataclass
class Store:
    """Engine + session factory built once at startup and handed to the app."""

    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    async def create_all(self) -> None:
        from .models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_store(settings_obj: CRMSettings) -> Store:
    engine = create_async_engine(settings_obj.database_url, echo=settings_obj.echo_sql)
    return store_for_engine(engine)


def store_for_engine(engine: AsyncEngine) -> Store:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return Store(engine=engine, session_factory=factory)


async def get_db(request: Request):
    """FastAPI dependency that yields an async session from the app's store."""
    store: Store = request.app.state.store
    async with store.session_factory() as session:
        yield session
