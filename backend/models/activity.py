"""
Activity logging models and schemas.

Dependencies: pydantic
System role: Activity API contracts
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

ActivityTypeValue = Literal["meditation", "exercise", "walking", "reading", "journaling", "therapy"]
DifficultyValue = Literal["easy", "medium", "hard"]


class CreateActivityRequest(BaseModel):
    """Request schema for logging an activity."""

    type: ActivityTypeValue
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    duration: int | None = Field(default=None, ge=0, le=1440, description="Minutes")
    difficulty: DifficultyValue
    feedback: str | None = Field(default=None, max_length=1000)
    timestamp: datetime | None = None

    @field_validator("name", mode="after")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("description", "feedback", mode="after")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None


class ActivityResponse(BaseModel):
    """Stored activity."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    type: ActivityTypeValue
    name: str
    description: str | None = None
    duration: int | None = None
    difficulty: DifficultyValue
    feedback: str | None = None
    timestamp: datetime
    created_at: datetime = Field(alias="createdAt")
