"""
Declarative base and shared column mixins for Mindwell tables.

Every row gets a UUID primary key and UTC created/updated timestamps.
Uuid and DateTime(timezone=True) map to native PostgreSQL types and still
work on sqlite for tests.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for all row timestamps."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Registry for every Mindwell table; Base.metadata drives create_all."""


class UUIDMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """
    created_at / updated_at columns.

    updated_at is refreshed by the ORM onupdate hook, which also fires for
    Core update() statements issued through the CRUD layer.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
