"""
Embedding orchestrator.

Wraps the embedding cache with fixed-size batching and a bounded number
of concurrent provider calls. A failed provider call only loses its own
batch: those inputs come back as None and the result is tagged partial.

Only provider calls run concurrently; every database access made through
the cache stays sequential on the caller's session.

Dependencies: asyncio (stdlib), knowledge_core.core.embedding.cache,
    knowledge_core.boundary.providers
System role: Sole concurrency boundary of the pipeline
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.models import EmbeddingPurpose
from knowledge_core.boundary.providers.embedding_provider import EmbeddingProvider
from knowledge_core.configs import PipelineConfig
from knowledge_core.core.embedding.cache import EmbeddingCache
from knowledge_core.core.exceptions import EmbeddingError
from knowledge_core.models import EmbeddingBatchResult
from knowledge_core.observability.log_utils import log_degraded

logger = logging.getLogger(__name__)


class _BatchStats:
    def __init__(self) -> None:
        self.batches = 0
        self.failed = 0


class EmbeddingOrchestrator:
    """Batch, throttle and cache embedding requests."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        cache: EmbeddingCache | None = None,
        batch_size: int = 16,
        max_concurrency: int = 2,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            provider: Embedding backend
            cache: Embedding cache (a default instance when None)
            batch_size: Texts per provider call
            max_concurrency: Provider calls in flight at once
        """
        if batch_size < 1 or max_concurrency < 1:
            raise ValueError("batch_size and max_concurrency must be >= 1")
        self._provider = provider
        self._cache = cache or EmbeddingCache()
        self._batch_size = batch_size
        self._max_concurrency = max_concurrency

    @classmethod
    def from_config(
        cls,
        provider: EmbeddingProvider,
        config: PipelineConfig,
        cache: EmbeddingCache | None = None,
    ) -> "EmbeddingOrchestrator":
        return cls(
            provider=provider,
            cache=cache,
            batch_size=config.embedding_batch_size,
            max_concurrency=config.embedding_max_concurrency,
        )

    async def embed(
        self,
        session: AsyncSession,
        texts: list[str],
        model: str,
        purpose: EmbeddingPurpose,
        strict: bool = False,
    ) -> EmbeddingBatchResult:
        """
        Embed texts through the cache.

        Args:
            session: Async database session
            texts: Texts to embed
            model: Embedding model identifier
            purpose: GRAPH or RETRIEVAL
            strict: Raise instead of returning a partial result

        Returns:
            EmbeddingBatchResult: vectors in input order, None where the
            owning batch failed

        Raises:
            EmbeddingError: strict is set and at least one batch failed
        """
        if not texts:
            return EmbeddingBatchResult()

        stats = _BatchStats()

        async def compute(missing: list[str]) -> list[list[float] | None]:
            return await self._compute_batched(missing, model, stats, strict)

        lookup = await self._cache.get_or_create(session, texts, model, purpose, compute)
        result = EmbeddingBatchResult(
            vectors=lookup.vectors,
            hits=lookup.hits,
            misses=lookup.misses,
            batches=stats.batches,
            failed_batches=stats.failed,
        )
        logger.info(
            f"{__name__}:embed - {len(texts)} texts, {result.hits} cached, "
            f"{stats.batches} batches ({stats.failed} failed)",
            extra={"purpose": purpose.value, "model": model, "status": result.status.value},
        )
        return result

    async def embed_one(
        self,
        session: AsyncSession,
        text: str,
        model: str,
        purpose: EmbeddingPurpose = EmbeddingPurpose.RETRIEVAL,
    ) -> list[float] | None:
        """Embed a single text; None if the provider call failed."""
        result = await self.embed(session, [text], model, purpose)
        return result.vectors[0]

    async def _compute_batched(
        self,
        texts: list[str],
        model: str,
        stats: _BatchStats,
        strict: bool,
    ) -> list[list[float] | None]:
        semaphore = asyncio.Semaphore(self._max_concurrency)
        batches = [
            texts[start:start + self._batch_size]
            for start in range(0, len(texts), self._batch_size)
        ]
        stats.batches += len(batches)

        async def run(batch_number: int, batch: list[str]) -> list[list[float] | None]:
            async with semaphore:
                try:
                    vectors = await self._provider.embed_batch(batch, model)
                    if len(vectors) != len(batch):
                        raise EmbeddingError(
                            "Provider returned a mismatched number of vectors",
                            batch_size=len(batch),
                            details={"returned": len(vectors)},
                        )
                    return [[float(x) for x in vector] for vector in vectors]
                except Exception as e:
                    stats.failed += 1
                    if strict:
                        raise EmbeddingError(
                            f"Embedding batch {batch_number} failed: {e}",
                            batch_size=len(batch),
                        ) from e
                    log_degraded(
                        logger,
                        f"{__name__}:_compute_batched - batch {batch_number} failed",
                        e,
                        batch_size=len(batch),
                        model=model,
                    )
                    return [None] * len(batch)

        results = await asyncio.gather(
            *(run(number, batch) for number, batch in enumerate(batches))
        )
        # gather preserves argument order, so flattening restores input order
        return [vector for batch_vectors in results for vector in batch_vectors]
