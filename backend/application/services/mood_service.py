"""
Mood service orchestrator.

Dependencies: backend.boundary.db.CRUD
System role: Mood tracking use cases
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.mood_crud import mood_crud
from backend.boundary.db.base import utcnow
from backend.boundary.db.models.mood_model import MoodEntryModel
from backend.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _mood_to_dict(mood: MoodEntryModel) -> dict:
    return {
        "id": mood.id,
        "score": mood.score,
        "note": mood.note,
        "context": mood.context,
        "activities": [UUID(activity_id) for activity_id in mood.activity_ids],
        "timestamp": mood.timestamp,
        "created_at": mood.created_at,
    }


class MoodService:
    """Mood service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize mood service.

        Args:
            db: Request-scoped async database session
        """
        self.db = db

    async def create_mood(
        self,
        user_id: str,
        score: int,
        note: str | None = None,
        context: str | None = None,
        activities: list[UUID] | None = None,
        timestamp: datetime | None = None,
    ) -> dict:
        """
        Record a mood check-in.

        Raises:
            ValidationError: If a linked activity does not belong to the caller
        """
        activities = list(dict.fromkeys(activities or []))
        owned = await activity_crud.owned_ids(self.db, user_id, activities)
        unknown = [str(activity_id) for activity_id in activities if activity_id not in owned]
        if unknown:
            raise ValidationError(
                "Invalid activity ID",
                field="activities",
                details={"activity_ids": unknown},
            )

        mood = await mood_crud.create(
            self.db,
            user_id=user_id,
            score=score,
            note=note,
            context=context,
            activity_ids=[str(activity_id) for activity_id in activities],
            timestamp=timestamp or utcnow(),
        )
        await self.db.commit()
        logger.info("Mood entry created", extra={"mood_id": str(mood.id), "user_id": user_id})
        return _mood_to_dict(mood)

    async def list_moods(self, user_id: str, limit: int = 50, offset: int = 0) -> list[dict]:
        """The caller's mood entries, most recent first."""
        moods = await mood_crud.list_for_user(self.db, user_id, limit=limit, offset=offset)
        return [_mood_to_dict(mood) for mood in moods]
