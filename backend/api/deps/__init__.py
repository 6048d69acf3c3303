"""API-specific dependencies."""

# Re-export common dependencies
from .auth import get_current_user_id
from .dependencies import (
    get_activity_service,
    get_mood_service,
    get_settings_dependency,
    get_task_dispatcher,
    get_therapy_chat_service,
)

__all__ = [
    "get_activity_service",
    "get_current_user_id",
    "get_mood_service",
    "get_settings_dependency",
    "get_task_dispatcher",
    "get_therapy_chat_service",
]
