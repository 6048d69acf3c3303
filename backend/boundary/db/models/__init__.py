"""
Database models package.

Exports:
  - ChatSessionModel, SessionStatus: Therapy chat session and lifecycle enum
  - ChatMessageModel, MessageRole, MessageStatus: Session message log entries
  - MoodEntryModel: Mood check-ins
  - ActivityModel, ActivityType, ActivityDifficulty: Logged wellness activities

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from backend.boundary.db.models.chat_session_model import ChatSessionModel, SessionStatus
from backend.boundary.db.models.chat_message_model import (
    ChatMessageModel,
    MessageRole,
    MessageStatus,
)
from backend.boundary.db.models.mood_model import MoodEntryModel
from backend.boundary.db.models.activity_model import (
    ActivityDifficulty,
    ActivityModel,
    ActivityType,
)

__all__ = [
    "ChatSessionModel",
    "SessionStatus",
    "ChatMessageModel",
    "MessageRole",
    "MessageStatus",
    "MoodEntryModel",
    "ActivityModel",
    "ActivityType",
    "ActivityDifficulty",
]
