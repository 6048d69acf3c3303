"""
Therapy chat service orchestrator.

Coordinates chat session lifecycle, message ingress and the read-only
status and history views. Ingress appends the user message and the
assistant placeholder in one transaction, commits, then hands the run to
the task queue without waiting for it.

Dependencies: backend.boundary.db.CRUD, backend.application.dispatch, backend.core.therapy
System role: Chat use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.dispatch import TaskDispatcher
from backend.boundary.db.CRUD.chat_message_crud import chat_message_crud
from backend.boundary.db.CRUD.chat_session_crud import chat_session_crud
from backend.boundary.db.models.chat_message_model import (
    MAX_POSITION,
    ChatMessageModel,
    MessageRole,
    MessageStatus,
)
from backend.boundary.db.models.chat_session_model import ChatSessionModel, SessionStatus
from backend.configs.therapy import TherapySettings
from backend.core.exceptions import (
    MessageNotFoundError,
    QueueDispatchError,
    SessionAccessDeniedError,
    SessionNotFoundError,
    ValidationError,
)
from backend.core.therapy.prompts import FAILURE_APOLOGY, SYSTEM_PROMPT
from backend.core.therapy.schemas import THERAPY_MESSAGE_EVENT, PipelineRequest, TherapyMemory
from backend.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def _message_to_dict(message: ChatMessageModel) -> dict:
    return {
        "index": message.position,
        "role": message.role.value,
        "content": message.content,
        "status": message.status.value,
        "metadata": message.message_metadata,
        "timestamp": message.timestamp,
    }


class TherapyChatService:
    """Therapy chat service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: TaskDispatcher,
        settings: TherapySettings | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: Request-scoped async database session
            dispatcher: Task queue hand-off for pipeline runs
            settings: Ingress limits and history page sizes
        """
        self.db = db
        self.dispatcher = dispatcher
        self.settings = settings or TherapySettings()

    async def _get_owned_session(self, session_id: UUID, user_id: str) -> ChatSessionModel:
        chat = await chat_session_crud.get_by_id(self.db, session_id)
        return self._ensure_owner(chat, session_id, user_id)

    @staticmethod
    def _ensure_owner(
        chat: ChatSessionModel | None,
        session_id: UUID,
        user_id: str,
    ) -> ChatSessionModel:
        if chat is None:
            logger.warning("Session not found", extra={"session_id": str(session_id)})
            raise SessionNotFoundError(str(session_id))
        if chat.user_id != user_id:
            logger.warning(
                "Unauthorized access attempt",
                extra={"session_id": str(session_id), "user_id": user_id},
            )
            raise SessionAccessDeniedError(str(session_id), user_id)
        return chat

    def validate_message(self, text: str | None) -> None:
        """
        Validate raw message text before any store access.

        Raises:
            ValidationError: If the message is empty, whitespace-only or too long
        """
        if not text or not text.strip():
            raise ValidationError("Message cannot be empty", field="message")
        limit = self.settings.max_message_length
        if len(text) > limit:
            raise ValidationError(
                f"Message too long (max {limit} characters)",
                field="message",
                details={"length": len(text)},
            )

    async def create_session(self, user_id: str) -> UUID:
        """
        Open a new active chat session.

        Returns:
            UUID: Created session ID
        """
        chat = await chat_session_crud.create(self.db, user_id=user_id, status=SessionStatus.ACTIVE)
        await self.db.commit()
        logger.info("Chat session created", extra={"session_id": str(chat.id), "user_id": user_id})
        return chat.id

    async def list_sessions(self, user_id: str, limit: int = 50, offset: int = 0) -> list[dict]:
        """List the caller's sessions, newest first."""
        sessions = await chat_session_crud.list_for_user(self.db, user_id, limit=limit, offset=offset)
        return [
            {
                "session_id": chat.id,
                "status": chat.status.value,
                "start_time": chat.start_time,
                "updated_at": chat.updated_at,
            }
            for chat in sessions
        ]

    async def update_session_status(
        self,
        session_id: UUID,
        user_id: str,
        status: SessionStatus,
    ) -> dict:
        """
        Change a session's lifecycle status.

        Raises:
            SessionNotFoundError: If the session does not exist
            SessionAccessDeniedError: If the caller does not own it
        """
        chat = await self._get_owned_session(session_id, user_id)
        await chat_session_crud.update_status(self.db, session_id, status)
        await self.db.commit()
        await self.db.refresh(chat)
        logger.info(
            "Chat session status updated",
            extra={"session_id": str(session_id), "status": status.value},
        )
        return {
            "session_id": chat.id,
            "status": chat.status.value,
            "start_time": chat.start_time,
            "updated_at": chat.updated_at,
        }

    async def send_message(self, session_id: UUID, user_id: str, text: str) -> dict:
        """
        Accept a user message and queue the assistant reply.

        Appends a completed user message and a pending assistant
        placeholder in one transaction, then enqueues the pipeline run for
        the placeholder index (new message count - 1).

        Args:
            session_id: Target chat session
            user_id: Authenticated caller
            text: Raw message text

        Returns:
            dict: session_id, message_index, status="pending"

        Raises:
            ValidationError: Empty or oversized message (no store access)
            SessionNotFoundError: Session does not exist
            SessionAccessDeniedError: Caller does not own the session
            QueueDispatchError: Run could not be queued; placeholder marked failed
        """
        self.validate_message(text)

        chat = await chat_session_crud.get_for_update(self.db, session_id)
        self._ensure_owner(chat, session_id, user_id)

        new_count = await chat_message_crud.append_messages(
            self.db,
            session_id,
            [
                {"role": MessageRole.USER, "content": text, "status": MessageStatus.COMPLETED},
                {"role": MessageRole.ASSISTANT, "content": "", "status": MessageStatus.PENDING},
            ],
        )
        message_index = new_count - 1
        history = await chat_message_crud.list_slice(self.db, session_id, limit=message_index)
        history_payload = [message.to_dict() for message in history]
        await self.db.commit()

        logger.info(
            "Message appended, dispatching pipeline run",
            extra={"session_id": str(session_id), "message_index": message_index},
        )

        request = PipelineRequest(
            session_id=session_id,
            message_index=message_index,
            message=text,
            history=history_payload,
            memory=TherapyMemory(),
            goals=[],
            system_prompt=SYSTEM_PROMPT,
            correlation_id=get_correlation_id() or None,
        )
        try:
            await self.dispatcher.enqueue(THERAPY_MESSAGE_EVENT, request.to_payload())
        except QueueDispatchError as e:
            await chat_message_crud.update_fields(
                self.db,
                session_id,
                message_index,
                status=MessageStatus.FAILED,
                content=FAILURE_APOLOGY,
                metadata_patch={"error": e.message},
            )
            await self.db.commit()
            raise

        return {
            "session_id": session_id,
            "message_index": message_index,
            "status": MessageStatus.PENDING.value,
        }

    async def get_message_status(self, session_id: UUID, user_id: str, message_index: int) -> dict:
        """
        Read one message's current state. No side effects.

        Raises:
            ValidationError: Negative index or one beyond the position column range
            SessionNotFoundError: Session does not exist
            SessionAccessDeniedError: Caller does not own the session
            MessageNotFoundError: No message at the index
        """
        if message_index < 0 or message_index > MAX_POSITION:
            raise ValidationError("Invalid message index", field="messageIndex")

        await self._get_owned_session(session_id, user_id)
        message = await chat_message_crud.get_at(self.db, session_id, message_index)
        if message is None:
            raise MessageNotFoundError(str(session_id), message_index)

        return {
            "status": message.status.value,
            "content": message.content,
            "metadata": message.message_metadata,
            "timestamp": message.timestamp,
        }

    async def get_session(self, session_id: UUID, user_id: str) -> dict:
        """Session with its full message log."""
        chat = await chat_session_crud.get_with_messages(self.db, session_id)
        chat = self._ensure_owner(chat, session_id, user_id)
        return {
            "session_id": chat.id,
            "status": chat.status.value,
            "start_time": chat.start_time,
            "messages": [_message_to_dict(message) for message in chat.messages],
        }

    async def get_history(
        self,
        session_id: UUID,
        user_id: str,
        limit: int | None = None,
        skip: int = 0,
    ) -> dict:
        """
        Slice of a session's messages by position.

        Raises:
            ValidationError: limit outside 1..history_max_page_size or skip outside
                0..MAX_POSITION
        """
        limit = self.settings.history_page_size if limit is None else limit
        if limit < 1 or limit > self.settings.history_max_page_size:
            raise ValidationError(
                f"Limit must be between 1 and {self.settings.history_max_page_size}",
                field="limit",
            )
        if skip < 0 or skip > MAX_POSITION:
            raise ValidationError(f"Skip must be between 0 and {MAX_POSITION}", field="skip")

        await self._get_owned_session(session_id, user_id)
        total = await chat_message_crud.count_for_session(self.db, session_id)
        messages = await chat_message_crud.list_slice(self.db, session_id, limit=limit, skip=skip)
        return {
            "session_id": session_id,
            "messages": [_message_to_dict(message) for message in messages],
            "total": total,
            "limit": limit,
            "skip": skip,
        }
