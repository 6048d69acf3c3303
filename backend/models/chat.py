"""
Chat domain models and schemas.

Request/response schemas for sending messages, polling their status
and reading session history. Field names are camelCase on the wire.

Dependencies: pydantic
System role: Chat API contracts
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    """Request schema for a new user message."""

    message: str = Field(description="User message text (1-5000 characters)")


class SendMessageResponse(BaseModel):
    """Immediate acknowledgement of an accepted message."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(default="Message received and processing")
    session_id: UUID = Field(alias="sessionId")
    message_index: int = Field(alias="messageIndex", description="Index of the assistant placeholder")
    status: str = Field(default="pending")


class MessageStatusResponse(BaseModel):
    """Current state of one message, as returned by the status poller."""

    status: str = Field(description="pending, processing, completed or failed")
    content: str
    metadata: dict[str, Any] | None = None
    timestamp: datetime


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    index: int = Field(description="Stable position in the session")
    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")
    status: str
    metadata: dict[str, Any] | None = None
    timestamp: datetime


class ChatHistoryResponse(BaseModel):
    """Response schema for a slice of chat history."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: UUID = Field(alias="sessionId")
    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages in the session")
    limit: int
    skip: int
