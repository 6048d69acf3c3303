"""
Async engine and session factories for the Mindwell database.

The API shares one cached engine; Celery runs build their own per event
loop through create_session_factory.

Dependencies: sqlalchemy, backend.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from backend.configs import get_settings


def get_async_engine() -> AsyncEngine:
    """
    Create the async engine from DatabaseSettings.

    Pool sizing applies to PostgreSQL only; a sqlite URL (local runs)
    keeps SQLAlchemy's default pool for that dialect.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = get_settings().database
    url = db_config.async_database_url

    engine_kwargs = {"echo": db_config.echo_sql, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
        )
    return create_async_engine(url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory bound to the given engine.

    autoflush=False and expire_on_commit=False give explicit transaction
    control and keep loaded rows readable after commit.

    Args:
        engine: Async engine to bind

    Returns:
        async_sessionmaker: Async session factory
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker:
    """
    Process-wide async session factory for the API.

    Cached so every request shares one engine and its connection pool.
    Workers build their own engine per event loop instead.

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return create_session_factory(get_async_engine())


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Creates a new async database session for each request and ensures it's closed
    after the route completes, even if exceptions occur.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Raises:
        SQLAlchemyError: Propagated from database operations

    Usage:
        from fastapi import Depends

        @app.get("/chat/sessions/{id}")
        async def get_session(id: UUID, db: AsyncSession = Depends(get_async_db)):
            return await chat_session_crud.get_by_id(db, id)
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session
