"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from backend.boundary.db.CRUD import chat_session_crud, chat_message_crud

    # Use singleton instances
    chat = await chat_session_crud.get_by_id(db, session_id)

    # Or instantiate classes directly for custom behavior
    from backend.boundary.db.CRUD import ChatSessionCRUD
    custom_crud = ChatSessionCRUD()
"""

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.CRUD.chat_session_crud import ChatSessionCRUD, chat_session_crud
from backend.boundary.db.CRUD.chat_message_crud import ChatMessageCRUD, chat_message_crud
from backend.boundary.db.CRUD.mood_crud import MoodCRUD, mood_crud
from backend.boundary.db.CRUD.activity_crud import ActivityCRUD, activity_crud

__all__ = [
    "BaseCRUD",
    "ChatSessionCRUD",
    "chat_session_crud",
    "ChatMessageCRUD",
    "chat_message_crud",
    "MoodCRUD",
    "mood_crud",
    "ActivityCRUD",
    "activity_crud",
]
