"""
Mood tracking models and schemas.

Dependencies: pydantic
System role: Mood API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateMoodRequest(BaseModel):
    """Request schema for a mood check-in."""

    score: int = Field(ge=0, le=100, description="Mood score, 0-100")
    note: str | None = Field(default=None, max_length=500)
    context: str | None = Field(default=None, max_length=200)
    activities: list[UUID] = Field(
        default_factory=list,
        max_length=10,
        description="IDs of the caller's activities linked to this mood",
    )
    timestamp: datetime | None = None

    @field_validator("note", "context", mode="after")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None


class MoodResponse(BaseModel):
    """Stored mood entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    score: int
    note: str | None = None
    context: str | None = None
    activities: list[UUID]
    timestamp: datetime
    created_at: datetime = Field(alias="createdAt")
