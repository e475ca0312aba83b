"""
EntityMention ORM model.

Junction between chunks and entities, carrying the document id so that
per-document cleanup is a single delete.

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Chunk-to-entity links
"""

import uuid

from sqlalchemy import Float, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin


class EntityMentionModel(Base, UUIDMixin, TimestampMixin):
    """
    EntityMention ORM model.

    Attributes:
        entity_id: Mentioned entity (never owned by the mention)
        chunk_id: Chunk the mention is attached to (ON DELETE CASCADE)
        document_id: Document of that chunk (ON DELETE CASCADE)
        confidence: Link confidence, 1.0 for direct text matches
    """

    __tablename__ = "entity_mentions"
    __table_args__ = (
        Index("mentions_entity_idx", "entity_id"),
        Index("mentions_chunk_idx", "chunk_id"),
        Index("mentions_document_idx", "document_id"),
    )

    entity_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("entities.id", ondelete="CASCADE"),
        nullable=False,
    )

    chunk_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chunks.id", ondelete="CASCADE"),
        nullable=False,
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )

    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
