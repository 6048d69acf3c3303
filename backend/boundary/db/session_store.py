"""
Session store used by the background message pipeline.

Each call opens its own short transaction so no lock is held across the
slow engine calls between pipeline steps. SQLAlchemy failures surface as
PersistenceError so the pipeline can fail the run uniformly.

Dependencies: sqlalchemy, backend.boundary.db.CRUD
System role: Narrow persistence contract for message pipeline runs
"""

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.boundary.db.CRUD.chat_message_crud import chat_message_crud
from backend.boundary.db.CRUD.chat_session_crud import chat_session_crud
from backend.boundary.db.models.chat_message_model import ChatMessageModel, MessageStatus
from backend.boundary.db.models.chat_session_model import ChatSessionModel
from backend.core.exceptions import PersistenceError, SessionNotFoundError

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Transaction-per-call access to chat sessions and their message log.

    Args:
        session_factory: async_sessionmaker producing AsyncSessions
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def append_messages(
        self,
        session_id: UUID,
        messages: Sequence[dict[str, Any]],
    ) -> int:
        """
        Atomically append messages to a session.

        Locks the session row, appends all messages and commits in one
        transaction.

        Returns:
            int: New message count

        Raises:
            SessionNotFoundError: If the session does not exist
            PersistenceError: If the write fails
        """
        try:
            async with self._session_factory() as db:
                chat = await chat_session_crud.get_for_update(db, session_id)
                if chat is None:
                    raise SessionNotFoundError(str(session_id))
                count = await chat_message_crud.append_messages(db, session_id, messages)
                await db.commit()
                return count
        except SQLAlchemyError as e:
            logger.error(
                "Failed to append messages",
                extra={"session_id": str(session_id), "error": str(e)},
            )
            raise PersistenceError(
                "Failed to append messages", operation="append_messages"
            ) from e

    async def update_message_fields(
        self,
        session_id: UUID,
        index: int,
        status: MessageStatus | None = None,
        content: str | None = None,
        metadata: dict | None = None,
        metadata_patch: dict | None = None,
    ) -> bool:
        """
        Update selected fields of the message at index in one transaction.

        Returns:
            bool: True if the message existed and was updated

        Raises:
            PersistenceError: If the write fails
        """
        try:
            async with self._session_factory() as db:
                updated = await chat_message_crud.update_fields(
                    db,
                    session_id,
                    index,
                    status=status,
                    content=content,
                    metadata=metadata,
                    metadata_patch=metadata_patch,
                )
                await db.commit()
                return updated
        except SQLAlchemyError as e:
            logger.error(
                "Failed to update message",
                extra={"session_id": str(session_id), "message_index": index, "error": str(e)},
            )
            raise PersistenceError(
                "Failed to update message", operation="update_message_fields"
            ) from e

    async def get_session(self, session_id: UUID) -> ChatSessionModel | None:
        """Load a session with its ordered messages, None if absent."""
        try:
            async with self._session_factory() as db:
                return await chat_session_crud.get_with_messages(db, session_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load session", operation="get_session") from e

    async def get_message(self, session_id: UUID, index: int) -> ChatMessageModel | None:
        """Load the message at index, None if absent."""
        try:
            async with self._session_factory() as db:
                return await chat_message_crud.get_at(db, session_id, index)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load message", operation="get_message") from e
