"""
Chat message CRUD operations.

Position-addressed access to a session's message log: atomic appends,
slices for history views and narrow single-row field updates used by the
message pipeline.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Message log persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.chat_message_model import ChatMessageModel, MessageStatus


class ChatMessageCRUD(BaseCRUD[ChatMessageModel]):
    """
    CRUD operations for ChatMessageModel.

    Messages are never deleted or reordered individually; positions are
    assigned at append time and stay stable.
    """

    def __init__(self) -> None:
        """Initialize ChatMessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def count_for_session(self, session: AsyncSession, session_id: UUID) -> int:
        """
        Count messages in a session.

        Args:
            session: Async database session
            session_id: Chat session UUID

        Returns:
            int: Number of messages (equals the next free position)
        """
        stmt = select(func.count()).select_from(ChatMessageModel).where(
            ChatMessageModel.session_id == session_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def append_messages(
        self,
        session: AsyncSession,
        session_id: UUID,
        messages: Sequence[dict[str, Any]],
    ) -> int:
        """
        Append messages at the end of a session's log.

        Positions continue from the current count. The caller must hold the
        session row lock (ChatSessionCRUD.get_for_update) and commit; the
        (session_id, position) unique constraint rejects racing appends.

        Args:
            session: Async database session
            session_id: Chat session UUID
            messages: Field dicts (role, content, status, ...) in append order

        Returns:
            int: New message count after the append
        """
        start = await self.count_for_session(session, session_id)
        for offset, fields in enumerate(messages):
            session.add(
                ChatMessageModel(session_id=session_id, position=start + offset, **fields)
            )
        await session.flush()
        return start + len(messages)

    async def get_at(
        self,
        session: AsyncSession,
        session_id: UUID,
        position: int,
    ) -> ChatMessageModel | None:
        """
        Retrieve the message at a position.

        Args:
            session: Async database session
            session_id: Chat session UUID
            position: 0-based message index

        Returns:
            ChatMessageModel if present, None otherwise
        """
        stmt = (
            select(ChatMessageModel)
            .where(
                ChatMessageModel.session_id == session_id,
                ChatMessageModel.position == position,
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_slice(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int | None = None,
        skip: int = 0,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve messages ordered by position.

        Args:
            session: Async database session
            session_id: Chat session UUID
            limit: Maximum number of messages (None for all)
            skip: Number of leading messages to skip

        Returns:
            Sequence of ChatMessageModels
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_id == session_id)
            .order_by(ChatMessageModel.position)
            .offset(skip)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_fields(
        self,
        session: AsyncSession,
        session_id: UUID,
        position: int,
        status: MessageStatus | None = None,
        content: str | None = None,
        metadata: dict | None = None,
        metadata_patch: dict | None = None,
    ) -> bool:
        """
        Update selected fields of one message without touching its siblings.

        ``metadata`` replaces the whole metadata document; ``metadata_patch``
        merges keys into the existing one. All given fields are written by a
        single UPDATE statement.

        Args:
            session: Async database session
            session_id: Chat session UUID
            position: 0-based message index
            status: New processing status
            content: New message content
            metadata: Replacement metadata document
            metadata_patch: Keys to merge into existing metadata

        Returns:
            bool: True if a message was updated, False if the index is absent
        """
        values: dict[str, Any] = {}
        if status is not None:
            values["status"] = status
        if content is not None:
            values["content"] = content
        if metadata is not None:
            values["message_metadata"] = metadata

        if metadata_patch:
            current = await self.get_at(session, session_id, position)
            if current is None:
                return False
            merged = dict(values.get("message_metadata") or current.message_metadata or {})
            merged.update(metadata_patch)
            values["message_metadata"] = merged

        if not values:
            return await self.get_at(session, session_id, position) is not None

        stmt = (
            update(ChatMessageModel)
            .where(
                ChatMessageModel.session_id == session_id,
                ChatMessageModel.position == position,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


chat_message_crud = ChatMessageCRUD()
