"""
Relationship ORM model.

Directed, labelled edge between two entities. Stored as an edge list keyed
by entity ids, so traversal never follows in-memory object references.

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Graph edge persistence
"""

import uuid

from sqlalchemy import Float, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin


class RelationshipModel(Base, UUIDMixin, TimestampMixin):
    """
    Relationship ORM model.

    Several documents may assert the same edge; each assertion is its own
    row with source_document_id pointing back at the asserting document.

    Attributes:
        source_entity_id: Edge tail
        target_entity_id: Edge head
        relation_type: Label such as built_with, part_of
        description: Optional free-text description
        weight: Edge weight (1.0 by default)
        source_document_id: Asserting document, None for manual edges
    """

    __tablename__ = "relationships"
    __table_args__ = (
        Index("relationships_source_idx", "source_entity_id"),
        Index("relationships_target_idx", "target_entity_id"),
        Index("relationships_type_idx", "relation_type"),
        Index("relationships_document_idx", "source_document_id"),
    )

    source_entity_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("entities.id", ondelete="CASCADE"),
        nullable=False,
    )

    target_entity_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("entities.id", ondelete="CASCADE"),
        nullable=False,
    )

    relation_type: Mapped[str] = mapped_column(String(128), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)

    source_document_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=True,
    )
