"""
API test fixtures.

Builds the full application with the service and caller dependencies
overridden, so endpoint tests exercise routing, validation, error mapping
and middleware without a database or broker.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.api.deps import (
    get_activity_service,
    get_current_user_id,
    get_mood_service,
    get_therapy_chat_service,
)
from backend.api.main import create_app


@pytest.fixture
def mock_chat_service() -> AsyncMock:
    """Provide mock TherapyChatService."""
    return AsyncMock()


@pytest.fixture
def mock_mood_service() -> AsyncMock:
    """Provide mock MoodService."""
    return AsyncMock()


@pytest.fixture
def mock_activity_service() -> AsyncMock:
    """Provide mock ActivityService."""
    return AsyncMock()


@pytest.fixture
def app(mock_chat_service, mock_mood_service, mock_activity_service, user_id) -> FastAPI:
    """Create FastAPI test application with mocked services and a fixed caller."""
    app = create_app()
    app.dependency_overrides[get_current_user_id] = lambda: user_id
    app.dependency_overrides[get_therapy_chat_service] = lambda: mock_chat_service
    app.dependency_overrides[get_mood_service] = lambda: mock_mood_service
    app.dependency_overrides[get_activity_service] = lambda: mock_activity_service
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Provide TestClient for the FastAPI app."""
    return TestClient(app)
