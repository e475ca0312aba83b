"""
Chunk CRUD operations.

Bulk persistence of a document's chunks, embedding status bookkeeping,
and loading of the searchable corpus.

Dependencies: sqlalchemy, knowledge_core.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.models import ChunkModel, DocumentModel, EmbeddingStatus


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def create_many(
        self,
        session: AsyncSession,
        document_id: UUID,
        rows: list[dict[str, Any]],
    ) -> list[ChunkModel]:
        """
        Persist chunks for a document in one flush.

        Args:
            session: Async database session
            document_id: Owning document UUID
            rows: Chunk field values (chunk_index, content, content_hash,
                token_count, embedding, embedding_status)

        Returns:
            list[ChunkModel]: Persisted chunks in the order given
        """
        instances = [ChunkModel(document_id=document_id, **row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[ChunkModel]:
        """
        Retrieve a document's chunks ordered by chunk_index.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            Sequence of ChunkModels
        """
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_pending(
        self,
        session: AsyncSession,
        document_id: UUID | None = None,
    ) -> Sequence[ChunkModel]:
        """
        Retrieve chunks still waiting for an embedding.

        Args:
            session: Async database session
            document_id: Restrict to one document (None for all documents)

        Returns:
            Sequence of ChunkModels with embedding_status PENDING
        """
        stmt = select(ChunkModel).where(ChunkModel.embedding_status == EmbeddingStatus.PENDING)
        if document_id is not None:
            stmt = stmt.where(ChunkModel.document_id == document_id)
        stmt = stmt.order_by(ChunkModel.document_id, ChunkModel.chunk_index)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def set_embedding(
        self,
        session: AsyncSession,
        chunk: ChunkModel,
        embedding: list[float],
    ) -> ChunkModel:
        """
        Attach a vector to a chunk and mark it EMBEDDED.

        Args:
            session: Async database session
            chunk: Loaded chunk instance
            embedding: Retrieval vector

        Returns:
            ChunkModel: The updated chunk
        """
        chunk.embedding = embedding
        chunk.embedding_status = EmbeddingStatus.EMBEDDED
        await session.flush()
        return chunk

    async def count_by_status(
        self,
        session: AsyncSession,
        document_id: UUID | None = None,
    ) -> dict[EmbeddingStatus, int]:
        """
        Count chunks per embedding status.

        Args:
            session: Async database session
            document_id: Restrict to one document's chunks (all chunks when None)

        Returns:
            dict[EmbeddingStatus, int]: Count for every status (zero when absent)
        """
        stmt = select(ChunkModel.embedding_status, func.count()).group_by(
            ChunkModel.embedding_status
        )
        if document_id is not None:
            stmt = stmt.where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        counts = {status: 0 for status in EmbeddingStatus}
        for status, count in result.all():
            counts[status] = int(count)
        return counts

    async def count_unique_hashes(self, session: AsyncSession) -> int:
        """Number of distinct chunk fingerprints across all documents."""
        stmt = select(func.count(distinct(ChunkModel.content_hash)))
        return int((await session.execute(stmt)).scalar_one())

    async def average_token_count(self, session: AsyncSession) -> float:
        """Mean estimated token count per chunk; 0.0 without chunks."""
        result = await session.execute(select(func.avg(ChunkModel.token_count)))
        return float(result.scalar_one() or 0.0)

    async def get_searchable(
        self,
        session: AsyncSession,
    ) -> list[tuple[ChunkModel, str]]:
        """
        Load every chunk that has a vector, with its document title.

        Args:
            session: Async database session

        Returns:
            list of (ChunkModel, document title) pairs
        """
        stmt = (
            select(ChunkModel, DocumentModel.title)
            .join(DocumentModel, DocumentModel.id == ChunkModel.document_id)
            .where(ChunkModel.embedding.is_not(None))
            .where(ChunkModel.embedding_status == EmbeddingStatus.EMBEDDED)
            .order_by(ChunkModel.document_id, ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return [(chunk, title) for chunk, title in result.all()]


chunk_crud = ChunkCRUD()
