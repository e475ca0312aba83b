"""
Declarative base, column mixins and shared column types.

Timestamps and ids are generated in Python, so rows written through Core
``insert`` statements (the insert-if-absent path) get them too.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Vectors are JSON float arrays; Python None is stored as SQL NULL, not 'null'.
VectorType = JSON(none_as_null=True)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Registry for every table in the knowledge store."""


class UUIDMixin:
    """
    UUID v4 primary key.

    Native UUID on PostgreSQL, CHAR(32) elsewhere.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """``created_at`` / ``updated_at`` in UTC; ``updated_at`` moves on ORM updates."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
    )
