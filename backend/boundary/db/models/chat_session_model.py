"""
Chat session ORM model.

Represents a therapy conversation thread owned by one user. The ordered
message log lives in the chat_messages table, addressed by position.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Session persistence for the therapy chat pipeline
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class SessionStatus(str, enum.Enum):
    """
    Chat session lifecycle states.

    ACTIVE: Session accepts new messages
    COMPLETED: User finished the conversation
    ARCHIVED: Hidden from the default session list
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ChatSessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat session ORM model.

    Attributes:
        id: UUID primary key, exposed to clients as the session identifier
        user_id: Owning user reference (only this user may read or write)
        start_time: When the session was opened (UTC)
        status: Lifecycle state enum (ACTIVE/COMPLETED/ARCHIVED)
        messages: Ordered ChatMessageModel rows (cascade delete)
        created_at: Row creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        messages: One-to-many with ChatMessageModel ordered by position
    """

    __tablename__ = "chat_sessions"

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        doc="Owning user identifier from the bearer token",
    )

    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False),
        nullable=False,
        default=SessionStatus.ACTIVE,
    )

    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ChatMessageModel.position",
    )
