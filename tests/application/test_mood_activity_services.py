"""
Test suite for MoodService and ActivityService.

System role: Verification of mood tracking and activity logging use cases
"""

from datetime import datetime, timezone
import uuid

import pytest

from backend.application.services import ActivityService, MoodService
from backend.boundary.db.models.activity_model import ActivityDifficulty, ActivityType
from backend.core.exceptions import ValidationError


@pytest.fixture
def mood_service(test_async_db) -> MoodService:
    return MoodService(db=test_async_db)


@pytest.fixture
def activity_service(test_async_db) -> ActivityService:
    return ActivityService(db=test_async_db)


class TestActivityService:
    """Test suite for ActivityService."""

    @pytest.mark.asyncio
    async def test_log_activity_returns_stored_fields(self, activity_service, user_id) -> None:
        # Act
        activity = await activity_service.log_activity(
            user_id,
            type=ActivityType.MEDITATION,
            name="Breathing",
            difficulty=ActivityDifficulty.EASY,
            duration=10,
        )

        # Assert
        assert activity["type"] == "meditation"
        assert activity["difficulty"] == "easy"
        assert activity["name"] == "Breathing"
        assert activity["duration"] == 10
        assert activity["description"] is None
        assert isinstance(activity["id"], uuid.UUID)
        assert activity["created_at"] is not None

    @pytest.mark.asyncio
    async def test_list_activities_is_scoped_to_user(
        self, activity_service, user_id, other_user_id
    ) -> None:
        await activity_service.log_activity(
            user_id, type=ActivityType.READING, name="Novel", difficulty=ActivityDifficulty.EASY
        )
        await activity_service.log_activity(
            other_user_id, type=ActivityType.EXERCISE, name="Run", difficulty=ActivityDifficulty.HARD
        )

        activities = await activity_service.list_activities(user_id)

        assert [a["name"] for a in activities] == ["Novel"]


class TestMoodService:
    """Test suite for MoodService."""

    @pytest.mark.asyncio
    async def test_create_mood_without_activities(self, mood_service, user_id) -> None:
        when = datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)

        mood = await mood_service.create_mood(user_id, score=65, note="Okay day", timestamp=when)

        assert mood["score"] == 65
        assert mood["note"] == "Okay day"
        assert mood["activities"] == []
        assert mood["timestamp"].replace(tzinfo=None) == when.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_create_mood_links_owned_activities(
        self, mood_service, activity_service, user_id
    ) -> None:
        activity = await activity_service.log_activity(
            user_id, type=ActivityType.WALKING, name="Park", difficulty=ActivityDifficulty.EASY
        )

        mood = await mood_service.create_mood(
            user_id, score=80, activities=[activity["id"], activity["id"]]
        )

        assert mood["activities"] == [activity["id"]]

    @pytest.mark.asyncio
    async def test_unknown_activity_is_rejected(self, mood_service, user_id) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await mood_service.create_mood(user_id, score=50, activities=[uuid.uuid4()])

        assert exc_info.value.message == "Invalid activity ID"
        assert exc_info.value.details["field"] == "activities"
        assert await mood_service.list_moods(user_id) == []

    @pytest.mark.asyncio
    async def test_foreign_activity_is_rejected(
        self, mood_service, activity_service, user_id, other_user_id
    ) -> None:
        theirs = await activity_service.log_activity(
            other_user_id, type=ActivityType.THERAPY, name="Session", difficulty=ActivityDifficulty.MEDIUM
        )

        with pytest.raises(ValidationError):
            await mood_service.create_mood(user_id, score=50, activities=[theirs["id"]])

    @pytest.mark.asyncio
    async def test_list_moods_newest_first(self, mood_service, user_id) -> None:
        await mood_service.create_mood(user_id, score=10, timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc))
        await mood_service.create_mood(user_id, score=90, timestamp=datetime(2026, 1, 2, tzinfo=timezone.utc))

        moods = await mood_service.list_moods(user_id)

        assert [m["score"] for m in moods] == [90, 10]
