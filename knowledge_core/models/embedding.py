"""
Embedding result models.

Dependencies: pydantic
System role: Return types of the embedding cache and orchestrator
"""

from pydantic import BaseModel, Field

from knowledge_core.models.stage_result import StageStatus


class CacheLookupResult(BaseModel):
    """
    Vectors for a list of texts, in input order.

    A None entry means compute produced no vector for that text.
    """

    vectors: list[list[float] | None] = Field(default_factory=list)
    hits: int = 0
    misses: int = 0


class EmbeddingBatchResult(BaseModel):
    """Orchestrator output: cache result plus provider batch bookkeeping."""

    vectors: list[list[float] | None] = Field(default_factory=list)
    hits: int = 0
    misses: int = 0
    batches: int = Field(default=0, description="Provider calls issued")
    failed_batches: int = 0

    @property
    def missing_count(self) -> int:
        """Number of inputs left without a vector."""
        return sum(1 for vector in self.vectors if vector is None)

    @property
    def status(self) -> StageStatus:
        if not self.vectors:
            return StageStatus.SKIPPED
        missing = self.missing_count
        if missing == 0:
            return StageStatus.SUCCESS
        if missing == len(self.vectors):
            return StageStatus.FAILURE
        return StageStatus.PARTIAL


class EmbeddingStats(BaseModel):
    """Corpus-wide embedding coverage and cache effectiveness."""

    document_count: int = 0
    chunk_count: int = 0
    cache_entry_count: int = Field(default=0, description="Vectors in the embedding cache")
    embedded_chunks: int = 0
    pending_chunks: int = 0
    unique_content_hashes: int = 0
    duplicate_chunks: int = Field(
        default=0,
        description="Chunks whose fingerprint another chunk already has",
    )
    avg_chunks_per_document: float = 0.0
    avg_tokens_per_chunk: float = 0.0
    entity_count: int = 0
    entities_with_embeddings: int = 0
    entities_without_embeddings: int = 0
