"""
Activity ORM model.

Wellness activities a user logs (meditation, exercise, journaling...).

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Activity logging persistence
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class ActivityType(str, enum.Enum):
    """Supported activity categories."""

    MEDITATION = "meditation"
    EXERCISE = "exercise"
    WALKING = "walking"
    READING = "reading"
    JOURNALING = "journaling"
    THERAPY = "therapy"


class ActivityDifficulty(str, enum.Enum):
    """Self-reported difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActivityModel(Base, UUIDMixin, TimestampMixin):
    """
    Activity ORM model.

    Attributes:
        id: UUID primary key
        user_id: Owning user
        type: ActivityType enum
        name: Short name (max 100 chars)
        description: Optional description (max 500 chars)
        duration: Optional duration in minutes (0-1440)
        difficulty: ActivityDifficulty enum
        feedback: Optional reflection (max 1000 chars)
        timestamp: When the activity happened (UTC)
    """

    __tablename__ = "activities"
    __table_args__ = (Index("ix_activities_user_timestamp", "user_id", "timestamp"),)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, native_enum=False),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[ActivityDifficulty] = mapped_column(
        Enum(ActivityDifficulty, native_enum=False),
        nullable=False,
    )
    feedback: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
