"""
Chat session CRUD operations.

Provides session-level queries: ownership-scoped listing, eager loading of the
message log, lifecycle status updates and the row lock used by appends.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Chat session persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.chat_session_model import ChatSessionModel, SessionStatus


class ChatSessionCRUD(BaseCRUD[ChatSessionModel]):
    """
    CRUD operations for ChatSessionModel.

    Extends BaseCRUD with ownership-aware queries and eager loading
    of the ordered message log.
    """

    def __init__(self) -> None:
        """Initialize ChatSessionCRUD with ChatSessionModel."""
        super().__init__(ChatSessionModel)

    async def get_with_messages(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> ChatSessionModel | None:
        """
        Retrieve chat session with eagerly loaded messages.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            ChatSessionModel with messages ordered by position, None if not found
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.id == id)
            .options(selectinload(ChatSessionModel.messages))
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> ChatSessionModel | None:
        """
        Retrieve chat session holding a row lock until the transaction ends.

        Serializes concurrent appends to the same session on PostgreSQL.
        Backends without row locks (SQLite) ignore FOR UPDATE.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            Locked ChatSessionModel, None if not found
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.id == id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ChatSessionModel]:
        """
        Retrieve a user's sessions, newest first.

        Args:
            session: Async database session
            user_id: Owning user identifier
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip

        Returns:
            Sequence of ChatSessionModels
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.user_id == user_id)
            .order_by(ChatSessionModel.start_time.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: SessionStatus,
    ) -> ChatSessionModel | None:
        """
        Update session lifecycle status.

        Args:
            session: Async database session
            id: Session UUID
            status: New lifecycle status

        Returns:
            Updated ChatSessionModel if found, None otherwise
        """
        return await self.update_by_id(session, id, status=status)


chat_session_crud = ChatSessionCRUD()
