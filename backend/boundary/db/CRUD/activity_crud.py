"""
Activity CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Activity logging persistence operations
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.activity_model import ActivityModel


class ActivityCRUD(BaseCRUD[ActivityModel]):
    """CRUD operations for ActivityModel."""

    def __init__(self) -> None:
        """Initialize ActivityCRUD with ActivityModel."""
        super().__init__(ActivityModel)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ActivityModel]:
        """
        Retrieve a user's activities, most recent first.

        Args:
            session: Async database session
            user_id: Owning user identifier
            limit: Maximum number of activities to return
            offset: Number of activities to skip

        Returns:
            Sequence of ActivityModels
        """
        stmt = (
            select(ActivityModel)
            .where(ActivityModel.user_id == user_id)
            .order_by(ActivityModel.timestamp.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def owned_ids(
        self,
        session: AsyncSession,
        user_id: str,
        ids: Iterable[UUID],
    ) -> set[UUID]:
        """
        Filter activity IDs down to those owned by the user.

        Args:
            session: Async database session
            user_id: Owning user identifier
            ids: Candidate activity UUIDs

        Returns:
            set[UUID]: The subset of ids that exist and belong to user_id
        """
        id_list = list(ids)
        if not id_list:
            return set()
        stmt = select(ActivityModel.id).where(
            ActivityModel.user_id == user_id,
            ActivityModel.id.in_(id_list),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())


activity_crud = ActivityCRUD()
