"""
Embedding cache CRUD operations.

Bulk lookup and insert-if-absent writes for the content-addressed
embedding store.

Dependencies: sqlalchemy, knowledge_core.boundary.db.models
System role: Embedding cache persistence operations
"""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.models import EmbeddingCacheModel, EmbeddingPurpose


class EmbeddingCacheCRUD(BaseCRUD[EmbeddingCacheModel]):
    """CRUD operations for EmbeddingCacheModel."""

    def __init__(self) -> None:
        """Initialize EmbeddingCacheCRUD with EmbeddingCacheModel."""
        super().__init__(EmbeddingCacheModel)

    async def get_many(
        self,
        session: AsyncSession,
        content_hashes: Iterable[str],
        model: str,
        purpose: EmbeddingPurpose,
    ) -> dict[str, list[float]]:
        """
        Look up cached vectors for a set of fingerprints.

        Args:
            session: Async database session
            content_hashes: Fingerprints to look up
            model: Embedding model identifier
            purpose: GRAPH or RETRIEVAL

        Returns:
            dict mapping found fingerprints to their vectors
        """
        hashes = list(set(content_hashes))
        if not hashes:
            return {}
        stmt = select(EmbeddingCacheModel.content_hash, EmbeddingCacheModel.embedding).where(
            EmbeddingCacheModel.content_hash.in_(hashes),
            EmbeddingCacheModel.model == model,
            EmbeddingCacheModel.purpose == purpose,
        )
        result = await session.execute(stmt)
        return {content_hash: embedding for content_hash, embedding in result.all()}

    async def put_many(
        self,
        session: AsyncSession,
        entries: dict[str, list[float]],
        model: str,
        purpose: EmbeddingPurpose,
    ) -> None:
        """
        Insert vectors for keys not cached yet; existing keys are left untouched.

        Args:
            session: Async database session
            entries: fingerprint -> vector
            model: Embedding model identifier
            purpose: GRAPH or RETRIEVAL
        """
        rows = [
            {
                "content_hash": content_hash,
                "model": model,
                "purpose": purpose,
                "embedding": embedding,
            }
            for content_hash, embedding in entries.items()
        ]
        await self.insert_if_absent(
            session,
            rows,
            conflict_columns=["content_hash", "model", "purpose"],
        )


embedding_cache_crud = EmbeddingCacheCRUD()
