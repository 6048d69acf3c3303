"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - ChatSessionModel, ChatMessageModel, MoodEntryModel, ActivityModel: Domain entities
  - SessionStatus, MessageRole, MessageStatus: Enum types for state tracking
  - chat_session_crud, chat_message_crud, mood_crud, activity_crud: CRUD singletons
  - SessionStore: Transaction-per-call store used by the message pipeline

Dependencies: sqlalchemy, backend.configs
System role: Database adapter providing persistent storage for therapy chat
sessions, their message logs, mood entries and activities.
"""

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from backend.boundary.db.connection import (
    create_session_factory,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from backend.boundary.db.models import (
    ActivityDifficulty,
    ActivityModel,
    ActivityType,
    ChatMessageModel,
    ChatSessionModel,
    MessageRole,
    MessageStatus,
    MoodEntryModel,
    SessionStatus,
)
from backend.boundary.db.CRUD import (
    ActivityCRUD,
    BaseCRUD,
    ChatMessageCRUD,
    ChatSessionCRUD,
    MoodCRUD,
    activity_crud,
    chat_message_crud,
    chat_session_crud,
    mood_crud,
)
from backend.boundary.db.session_store import SessionStore

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "create_session_factory",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "ChatSessionModel",
    "SessionStatus",
    "ChatMessageModel",
    "MessageRole",
    "MessageStatus",
    "MoodEntryModel",
    "ActivityModel",
    "ActivityType",
    "ActivityDifficulty",
    # CRUD classes
    "BaseCRUD",
    "ChatSessionCRUD",
    "ChatMessageCRUD",
    "MoodCRUD",
    "ActivityCRUD",
    # CRUD singletons
    "chat_session_crud",
    "chat_message_crud",
    "mood_crud",
    "activity_crud",
    # Store
    "SessionStore",
]
