"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, session store, service doubles, auth helpers
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock
import uuid

import pytest


@pytest.fixture
async def db_engine():
    """
    Create in-memory SQLite async engine with all tables.

    StaticPool keeps one connection so every session sees the same database.
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool
    from backend.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    from backend.boundary.db.connection import create_session_factory

    return create_session_factory(db_engine)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def session_store(session_factory):
    """SessionStore over the test database."""
    from backend.boundary.db.session_store import SessionStore

    return SessionStore(session_factory)


@pytest.fixture
def user_id() -> str:
    """Authenticated caller for tests."""
    return "user-1"


@pytest.fixture
def other_user_id() -> str:
    """A second user who owns nothing the caller owns."""
    return "user-2"


@pytest.fixture
async def chat_session(test_async_db, user_id):
    """Persisted active chat session owned by user_id."""
    from backend.boundary.db.CRUD.chat_session_crud import chat_session_crud

    chat = await chat_session_crud.create(test_async_db, user_id=user_id)
    await test_async_db.commit()
    return chat


@pytest.fixture
def therapy_settings():
    """Therapy settings with a short engine timeout."""
    from backend.configs.therapy import TherapySettings

    return TherapySettings(engine_timeout_seconds=0.5)


@pytest.fixture
def auth_settings():
    """Auth settings with a fixed test secret."""
    from backend.configs.auth import AuthSettings

    return AuthSettings(jwt_secret="test-secret")


@pytest.fixture
def mock_dispatcher():
    """
    Create mock TaskDispatcher.

    Returns:
        AsyncMock: Dispatcher whose enqueue returns a fixed task ID
    """
    dispatcher = AsyncMock()
    dispatcher.enqueue = AsyncMock(return_value="task-123")
    return dispatcher


@pytest.fixture
def session_id():
    """Generate a test session ID."""
    return uuid.uuid4()
