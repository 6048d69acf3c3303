"""Service orchestrators."""

from .activity_service import ActivityService
from .mood_service import MoodService
from .therapy_chat_service import TherapyChatService

__all__ = [
    "ActivityService",
    "MoodService",
    "TherapyChatService",
]
