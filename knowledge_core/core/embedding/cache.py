"""
Content-addressed embedding cache.

Looks up (fingerprint, model, purpose) for every input text, hands the
distinct misses to a compute callback once, stores what came back with
insert-if-absent, and returns vectors in the caller's input order.

Dependencies: sqlalchemy, knowledge_core.boundary.db.CRUD
System role: Deduplicates embedding work across documents and re-runs
"""

import logging
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD import EmbeddingCacheCRUD, embedding_cache_crud
from knowledge_core.boundary.db.models import EmbeddingPurpose
from knowledge_core.core.exceptions import EmbeddingError
from knowledge_core.core.fingerprint import embedding_cache_key
from knowledge_core.models import CacheLookupResult

logger = logging.getLogger(__name__)

ComputeFn = Callable[[list[str]], Awaitable[list[list[float] | None]]]


class EmbeddingCache:
    """Cache-through access to embeddings keyed by content fingerprint."""

    def __init__(self, crud: EmbeddingCacheCRUD = embedding_cache_crud) -> None:
        self._crud = crud

    async def get_or_create(
        self,
        session: AsyncSession,
        texts: list[str],
        model: str,
        purpose: EmbeddingPurpose,
        compute: ComputeFn,
    ) -> CacheLookupResult:
        """
        Return a vector for every text, computing only cache misses.

        compute is awaited at most once per call, with each distinct missing
        text exactly once, in first-occurrence order. It may return None for
        texts it could not embed; those are not cached and come back as
        None. An exception raised by compute propagates unchanged and
        nothing is written.

        Args:
            session: Async database session
            texts: Input texts (duplicates allowed)
            model: Embedding model identifier
            purpose: GRAPH or RETRIEVAL
            compute: Async callback embedding a list of texts

        Returns:
            CacheLookupResult: vectors aligned with texts, plus per-input
            hit and miss counts

        Raises:
            EmbeddingError: compute returned the wrong number of vectors
        """
        if not texts:
            return CacheLookupResult()

        keys = [embedding_cache_key(text) for text in texts]
        cached = await self._crud.get_many(session, keys, model, purpose)

        missing: dict[str, str] = {}
        for key, text in zip(keys, texts):
            if key not in cached and key not in missing:
                missing[key] = text

        computed: dict[str, list[float]] = {}
        if missing:
            missing_texts = list(missing.values())
            vectors = await compute(missing_texts)
            if len(vectors) != len(missing_texts):
                raise EmbeddingError(
                    "Embedding callback returned a mismatched number of vectors",
                    batch_size=len(missing_texts),
                    details={"returned": len(vectors)},
                )
            computed = {
                key: vector
                for key, vector in zip(missing.keys(), vectors)
                if vector is not None
            }
            if computed:
                await self._crud.put_many(session, computed, model, purpose)

        hits = sum(1 for key in keys if key in cached)
        result = CacheLookupResult(
            vectors=[cached.get(key, computed.get(key)) for key in keys],
            hits=hits,
            misses=len(keys) - hits,
        )
        logger.debug(
            f"{__name__}:get_or_create - {result.hits} hits, {result.misses} misses",
            extra={
                "model": model,
                "purpose": purpose.value,
                "computed": len(computed),
                "distinct_missing": len(missing),
            },
        )
        return result
