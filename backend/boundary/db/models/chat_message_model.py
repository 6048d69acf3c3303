"""
Chat message ORM model.

One turn of a chat session. Messages are append-only and addressed by their
stable position inside the session; the pipeline only ever updates the
status/content/metadata of a single row.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Message log persistence and per-message processing state
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.boundary.db.base import Base, UUIDMixin, utcnow

# Largest value the Integer position column holds on PostgreSQL
MAX_POSITION = 2**31 - 1


class MessageRole(str, enum.Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, enum.Enum):
    """
    Per-message processing states.

    PENDING: Assistant placeholder appended, pipeline run queued
    PROCESSING: Pipeline run picked up the message
    COMPLETED: Reply persisted (user messages are created in this state)
    FAILED: Run failed; content holds an apology and metadata.error the cause
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ChatMessageModel(Base, UUIDMixin):
    """
    Chat message ORM model.

    Attributes:
        id: UUID primary key (stable message id)
        session_id: Parent chat session
        position: 0-based index inside the session, unique per session
        role: USER or ASSISTANT
        content: Message text (assistant content filled in by the pipeline)
        status: Processing state
        message_metadata: Analysis, progress snapshot and error detail
        timestamp: Creation time (UTC)

    Constraints:
        (session_id, position): UNIQUE; two concurrent appends cannot claim
        the same index
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        UniqueConstraint("session_id", "position", name="uq_chat_messages_session_position"),
    )

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False)

    role: Mapped[MessageRole] = mapped_column(
        Enum(MessageRole, native_enum=False),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[MessageStatus] = mapped_column(
        Enum(MessageStatus, native_enum=False),
        nullable=False,
        default=MessageStatus.COMPLETED,
    )

    message_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    session = relationship("ChatSessionModel", back_populates="messages")

    def to_dict(self) -> dict:
        """Serialize the message the way clients and pipeline payloads see it."""
        return {
            "role": self.role.value,
            "content": self.content,
            "status": self.status.value,
            "metadata": self.message_metadata,
            "timestamp": self.timestamp.isoformat(),
        }
