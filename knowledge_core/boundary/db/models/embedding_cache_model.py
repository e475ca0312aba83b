"""
Embedding cache ORM model.

Content-addressed store of computed vectors, shared by every ingestion
and query in the process.

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Embedding deduplication across documents and re-runs
"""

import enum

from sqlalchemy import Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin, VectorType


class EmbeddingPurpose(str, enum.Enum):
    """
    Why a vector was computed.

    GRAPH: Entity / summary vectors used for graph work
    RETRIEVAL: Chunk and query vectors used for similarity search
    """

    GRAPH = "graph"
    RETRIEVAL = "retrieval"


class EmbeddingCacheModel(Base, UUIDMixin, TimestampMixin):
    """
    Embedding cache entry.

    Rows are insert-only: written with INSERT ... ON CONFLICT DO NOTHING on
    (content_hash, model, purpose) and never updated.

    Attributes:
        content_hash: SHA-256 of the whitespace-normalised text
        model: Embedding model identifier
        purpose: GRAPH or RETRIEVAL
        embedding: Vector as a JSON float array
    """

    __tablename__ = "embedding_cache"
    __table_args__ = (
        UniqueConstraint("content_hash", "model", "purpose", name="embedding_cache_key_uq"),
    )

    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    model: Mapped[str] = mapped_column(String(255), nullable=False)

    purpose: Mapped[EmbeddingPurpose] = mapped_column(
        Enum(EmbeddingPurpose, native_enum=False),
        nullable=False,
    )

    embedding: Mapped[list[float]] = mapped_column(VectorType, nullable=False)
