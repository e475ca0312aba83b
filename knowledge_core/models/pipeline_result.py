"""
Ingestion result and metrics models.

Dependencies: pydantic
System role: Return types for ingestion, status queries and bulk re-ingestion
"""

import time
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from pydantic import BaseModel, Field

from knowledge_core.boundary.db.models import DocumentStatus
from knowledge_core.models.stage_result import StageResult, StageStatus


class IngestionMetrics(BaseModel):
    """Per-run counters and stage timings, logged when the run ends."""

    document_id: UUID
    stage_timings_ms: dict[str, float] = Field(default_factory=dict)

    chunks_produced: int = 0
    duplicate_chunks: int = 0
    chunks_persisted: int = 0
    chunks_pending: int = 0

    embedding_cache_hits: int = 0
    embedding_cache_misses: int = 0
    embedding_failed_batches: int = 0

    entities_extracted: int = 0
    entities_reused: int = 0
    entities_created: int = 0
    mentions_created: int = 0
    relationships_created: int = 0
    relationships_dropped: int = 0

    summary_status: StageStatus = StageStatus.SKIPPED
    extraction_status: StageStatus = StageStatus.SKIPPED
    embedding_status: StageStatus = StageStatus.SKIPPED
    stage_errors: dict[str, str] = Field(
        default_factory=dict,
        description="Reason per stage that did not fully succeed",
    )

    @contextmanager
    def timed(self, stage: str) -> Iterator[None]:
        """Record the wall time of a block under `stage`, even if it raises."""
        started = time.perf_counter()
        try:
            yield
        finally:
            self.stage_timings_ms[stage] = round((time.perf_counter() - started) * 1000, 2)

    def record_stage(self, stage: str, result: StageResult) -> None:
        """Keep a degradable stage's tag, and its reason when it has one."""
        setattr(self, f"{stage}_status", result.status)
        if result.error:
            self.stage_errors[stage] = result.error

    @property
    def total_ms(self) -> float:
        return round(sum(self.stage_timings_ms.values()), 2)


class GraphUpsertResult(BaseModel):
    """Counts from resolving one document's extraction into the graph."""

    entity_ids: dict[str, UUID] = Field(
        default_factory=dict,
        description="Entity name -> id for every entity resolved in this document",
    )
    entities_reused: int = 0
    entities_created: int = 0
    entities_without_embedding: int = 0
    mentions_created: int = 0
    relationships_created: int = 0
    relationships_dropped: int = 0


class PipelineResult(BaseModel):
    """Outcome of one ingestion run."""

    document_id: UUID
    status: DocumentStatus
    skipped: bool = Field(default=False, description="Unchanged content, nothing reprocessed")
    metrics: IngestionMetrics


class DocumentStatusView(BaseModel):
    """Processing state and derived-data counts of a document."""

    document_id: UUID
    title: str
    status: DocumentStatus
    error_message: str | None = None
    has_summary: bool = False
    embedding_model: str | None = None
    chunk_count: int = 0
    embedded_chunks: int = 0
    pending_chunks: int = 0
    mention_count: int = 0
    relationship_count: int = 0


class EmbeddingRetryResult(BaseModel):
    """Outcome of re-embedding PENDING chunks."""

    embedded: int = 0
    still_pending: int = 0


class ReingestOutcome(BaseModel):
    """Per-document entry of a bulk re-ingestion."""

    document_id: UUID
    status: DocumentStatus | None = None
    skipped: bool = False
    error: str | None = None


class BulkReingestResult(BaseModel):
    """Outcomes of a bulk re-ingestion, one per requested document."""

    outcomes: list[ReingestOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.error is None)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.error is not None)
