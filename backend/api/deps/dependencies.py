"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: backend.configs, backend.application, backend.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.dispatch import TaskDispatcher
from backend.application.services import ActivityService, MoodService, TherapyChatService
from backend.boundary.db import get_async_db
from backend.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._dispatcher = None

    @property
    def dispatcher(self) -> TaskDispatcher:
        """Get cached task dispatcher."""
        if self._dispatcher is None:
            self._dispatcher = TaskDispatcher()
        return self._dispatcher

    def clear(self) -> None:
        """Clear all cached instances."""
        self._dispatcher = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_task_dispatcher() -> TaskDispatcher:
    """
    Get task dispatcher for pipeline hand-off.

    Returns:
        TaskDispatcher: Dispatcher publishing to the Celery broker
    """
    return get_service_cache().dispatcher


def get_therapy_chat_service(
    db: AsyncSession = Depends(get_async_db),
    dispatcher: TaskDispatcher = Depends(get_task_dispatcher),
    settings: Settings = Depends(get_settings_dependency),
) -> TherapyChatService:
    """
    Get therapy chat service instance.

    Args:
        db: Async database session (injected via Depends)
        dispatcher: Task dispatcher (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        TherapyChatService: Chat service bound to the request's session
    """
    return TherapyChatService(db=db, dispatcher=dispatcher, settings=settings.therapy)


def get_mood_service(db: AsyncSession = Depends(get_async_db)) -> MoodService:
    """
    Get mood service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        MoodService: Mood service instance
    """
    return MoodService(db=db)


def get_activity_service(db: AsyncSession = Depends(get_async_db)) -> ActivityService:
    """
    Get activity service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        ActivityService: Activity service instance
    """
    return ActivityService(db=db)
