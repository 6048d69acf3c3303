"""
Chat session models and schemas.

Dependencies: pydantic
System role: Chat session API contracts
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backend.models.chat import ChatMessageResponse

SessionStatusValue = Literal["active", "completed", "archived"]


class CreateSessionResponse(BaseModel):
    """Response schema for session creation."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(default="Chat session created successfully")
    session_id: UUID = Field(alias="sessionId")


class UpdateSessionRequest(BaseModel):
    """Request schema for session status changes."""

    status: SessionStatusValue


class SessionSummaryResponse(BaseModel):
    """Session row in the caller's session list."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: UUID = Field(alias="sessionId")
    status: SessionStatusValue
    start_time: datetime = Field(alias="startTime")
    updated_at: datetime = Field(alias="updatedAt")


class SessionDetailResponse(BaseModel):
    """Session with its full message log."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: UUID = Field(alias="sessionId")
    status: SessionStatusValue
    start_time: datetime = Field(alias="startTime")
    messages: list[ChatMessageResponse]
