"""
Chunk ORM model.

Ordered text segment of a document with its retrieval embedding.

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Vector search corpus
"""

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin, VectorType


class EmbeddingStatus(str, enum.Enum):
    """
    Chunk embedding state.

    PENDING: No vector yet (provider failed or not attempted)
    EMBEDDED: Vector stored and searchable
    """

    PENDING = "pending"
    EMBEDDED = "embedded"


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    Attributes:
        document_id: Owning document (ON DELETE CASCADE)
        chunk_index: Position within the document, unique per document
        content: Normalised segment text
        content_hash: SHA-256 fingerprint of the segment text
        token_count: Estimated token count
        embedding: Retrieval vector as a JSON float array (None until computed)
        embedding_status: PENDING or EMBEDDED
    """

    __tablename__ = "chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="chunks_document_index_uq"),
        Index("chunks_document_idx", "document_id"),
        Index("chunks_hash_idx", "content_hash"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )

    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    token_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    embedding: Mapped[list[float] | None] = mapped_column(VectorType, nullable=True)

    embedding_status: Mapped[EmbeddingStatus] = mapped_column(
        Enum(EmbeddingStatus, native_enum=False),
        nullable=False,
        default=EmbeddingStatus.PENDING,
    )
