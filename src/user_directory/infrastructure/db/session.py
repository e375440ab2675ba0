"""Async SQLAlchemy engine and session factory helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a session factory owning one engine for the provided database URL.

    The factory is the store handle passed explicitly to repositories; its
    engine lives until `dispose_session_factory` is awaited.
    """

    engine = create_async_engine(database_url, pool_pre_ping=True)
    return async_sessionmaker(engine, expire_on_commit=False)


async def dispose_session_factory(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Close pooled connections held by the factory's engine."""

    bind = session_factory.kw.get("bind")
    if bind is not None:
        await bind.dispose()
