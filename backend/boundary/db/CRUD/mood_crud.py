"""
Mood entry CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Mood tracking persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.mood_model import MoodEntryModel


class MoodCRUD(BaseCRUD[MoodEntryModel]):
    """CRUD operations for MoodEntryModel."""

    def __init__(self) -> None:
        """Initialize MoodCRUD with MoodEntryModel."""
        super().__init__(MoodEntryModel)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[MoodEntryModel]:
        """
        Retrieve a user's mood entries, most recent first.

        Args:
            session: Async database session
            user_id: Owning user identifier
            limit: Maximum number of entries to return
            offset: Number of entries to skip

        Returns:
            Sequence of MoodEntryModels
        """
        stmt = (
            select(MoodEntryModel)
            .where(MoodEntryModel.user_id == user_id)
            .order_by(MoodEntryModel.timestamp.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


mood_crud = MoodCRUD()
