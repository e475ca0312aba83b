"""
Document ORM model.

Represents ingested source content with its processing status, content
fingerprint, and the embedding model its chunks were produced with.

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Document created, awaiting ingestion
    PROCESSING: Pipeline is chunking, extracting, and embedding
    COMPLETED: Chunks and graph persisted, ready for retrieval
    FAILED: Processing error; error_message field contains details.
        A fresh ingestion attempt may move it back to PROCESSING.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SourceType(str, enum.Enum):
    """How the document content was acquired."""

    NOTE = "note"
    ARTICLE = "article"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: created (PENDING) → pipeline run (PROCESSING) → COMPLETED or
    FAILED. content_hash and embedding_model are written only when a run
    completes; together they decide whether a later run can be skipped.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Human-readable title
        source_url: Origin URL for fetched content (None for pasted notes)
        source_type: NOTE or ARTICLE
        content: Raw document text
        content_hash: SHA-256 of the raw content from the last completed run
        summary: LLM summary (None when summarization failed)
        status: Current processing state
        embedding_model: Model identifier used for the stored chunk vectors
        embedding_version: Schema version of stored vectors
        error_message: Last failure reason, cleared on completion
        created_at: Creation timestamp (UTC)
        updated_at: Last status change timestamp (UTC)

    Relationships:
        chunks, entity_mentions, relationships: deleted with the document
        (ON DELETE CASCADE on the child foreign keys)
    """

    __tablename__ = "documents"
    __table_args__ = (Index("documents_status_idx", "status"),)

    title: Mapped[str] = mapped_column(String(512), nullable=False)

    source_url: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Source locator for fetched content",
    )

    source_type: Mapped[SourceType] = mapped_column(
        Enum(SourceType, native_enum=False),
        nullable=False,
        default=SourceType.NOTE,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    content_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    embedding_model: Mapped[str | None] = mapped_column(String(255), nullable=True)

    embedding_version: Mapped[str | None] = mapped_column(String(32), nullable=True)

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )
