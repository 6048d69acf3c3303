"""
Activity service orchestrator.

Dependencies: backend.boundary.db.CRUD
System role: Activity logging use cases
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.base import utcnow
from backend.boundary.db.models.activity_model import (
    ActivityDifficulty,
    ActivityModel,
    ActivityType,
)

logger = logging.getLogger(__name__)


def _activity_to_dict(activity: ActivityModel) -> dict:
    return {
        "id": activity.id,
        "type": activity.type.value,
        "name": activity.name,
        "description": activity.description,
        "duration": activity.duration,
        "difficulty": activity.difficulty.value,
        "feedback": activity.feedback,
        "timestamp": activity.timestamp,
        "created_at": activity.created_at,
    }


class ActivityService:
    """Activity service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def log_activity(
        self,
        user_id: str,
        type: ActivityType,
        name: str,
        difficulty: ActivityDifficulty,
        description: str | None = None,
        duration: int | None = None,
        feedback: str | None = None,
        timestamp: datetime | None = None,
    ) -> dict:
        """
        Record a completed activity.

        Returns:
            dict: Stored activity fields
        """
        activity = await activity_crud.create(
            self.db,
            user_id=user_id,
            type=type,
            name=name,
            description=description,
            duration=duration,
            difficulty=difficulty,
            feedback=feedback,
            timestamp=timestamp or utcnow(),
        )
        await self.db.commit()
        logger.info(
            "Activity logged",
            extra={"activity_id": str(activity.id), "user_id": user_id, "type": type.value},
        )
        return _activity_to_dict(activity)

    async def list_activities(self, user_id: str, limit: int = 50, offset: int = 0) -> list[dict]:
        """The caller's activities, most recent first."""
        activities = await activity_crud.list_for_user(self.db, user_id, limit=limit, offset=offset)
        return [_activity_to_dict(activity) for activity in activities]
