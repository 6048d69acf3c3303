"""
Mood entry ORM model.

A single mood check-in scored 0-100 with optional note, context and the
activities the user associates with it.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Mood tracking persistence
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class MoodEntryModel(Base, UUIDMixin, TimestampMixin):
    """
    Mood entry ORM model.

    Attributes:
        id: UUID primary key
        user_id: Owning user
        score: Mood score 0-100
        note: Optional free text (max 500 chars)
        context: Optional situation label (max 200 chars)
        activity_ids: List of activity UUID strings linked to this entry
        timestamp: When the mood was felt (UTC)
    """

    __tablename__ = "mood_entries"
    __table_args__ = (Index("ix_mood_entries_user_timestamp", "user_id", "timestamp"),)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    context: Mapped[str | None] = mapped_column(String(200), nullable=True)
    activity_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
