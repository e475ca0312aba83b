"""
Document ingestion orchestrator.

Runs one document through chunk -> summarize -> extract -> embed ->
persist -> graph upsert and moves it through
PENDING -> PROCESSING -> COMPLETED | FAILED.

Summary, extraction and chunk embedding are best-effort: each returns a
StageResult whose tag decides what happens next (extraction falls back
to the content without a summary, the graph upsert is skipped when
extraction produced nothing). Anything else raised after PROCESSING
starts marks the document FAILED and is re-raised. A FAILED document is
never retried automatically.

Dependencies: sqlalchemy, knowledge_core.core.*, knowledge_core.boundary
System role: Pipeline orchestration (coordinates only)
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD import chunk_crud, document_crud
from knowledge_core.boundary.db.models import (
    ChunkModel,
    DocumentModel,
    DocumentStatus,
    EmbeddingPurpose,
    EmbeddingStatus,
)
from knowledge_core.boundary.providers.embedding_provider import EmbeddingProvider
from knowledge_core.boundary.providers.llm_provider import LanguageModelProvider
from knowledge_core.configs import PipelineConfig
from knowledge_core.core.chunking import StructuredChunker, dedupe_segments
from knowledge_core.core.embedding import EmbeddingCache, EmbeddingOrchestrator
from knowledge_core.core.exceptions import KnowledgeBaseError, PersistenceError
from knowledge_core.core.fingerprint import document_fingerprint
from knowledge_core.core.graph import EntityResolver
from knowledge_core.core.ingestion.change_detector import needs_reprocessing
from knowledge_core.models import (
    EmbeddingBatchResult,
    ExtractionResult,
    IngestionMetrics,
    PipelineResult,
    StageResult,
    StageStatus,
)
from knowledge_core.observability.log_utils import log_degraded

logger = logging.getLogger(__name__)

EMBEDDING_VERSION = "1"


class IngestionPipeline:
    """Orchestrate ingestion of a single document."""

    def __init__(
        self,
        config: PipelineConfig,
        embedding_provider: EmbeddingProvider,
        llm_provider: LanguageModelProvider,
        cache: EmbeddingCache | None = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            config: Immutable configuration for every run of this pipeline
            embedding_provider: Embedding backend
            llm_provider: Summarization and extraction backend
            cache: Shared embedding cache (default instance when None)
        """
        self._config = config
        self._llm = llm_provider
        self._chunker = StructuredChunker.from_config(config)
        self._orchestrator = EmbeddingOrchestrator.from_config(embedding_provider, config, cache)
        self._resolver = EntityResolver(self._orchestrator)

    @property
    def config(self) -> PipelineConfig:
        return self._config

    async def process(
        self,
        session: AsyncSession,
        document: DocumentModel,
        force: bool = False,
    ) -> PipelineResult:
        """
        Ingest a document's current content.

        A COMPLETED document whose content and embedding model are unchanged
        is left as is. Otherwise its previous chunks, mentions and asserted
        relationships are replaced wholesale.

        Args:
            session: Async database session (committed by this method)
            document: Loaded document; its content is the input
            force: Reprocess even when nothing changed

        Returns:
            PipelineResult: Final status, skip flag and run metrics

        Raises:
            DocumentProcessingError: Fatal error; the document is now FAILED
            KnowledgeBaseError: Other domain errors, after marking FAILED
        """
        document_id = document.id
        metrics = IngestionMetrics(document_id=document_id)
        model = self._config.embedding_model

        if (
            not force
            and document.status == DocumentStatus.COMPLETED
            and not needs_reprocessing(
                document.content,
                document.content_hash,
                document.embedding_model,
                model,
            )
        ):
            logger.info(
                f"{__name__}:process - Content and model unchanged, skipping",
                extra={"document_id": str(document_id)},
            )
            return PipelineResult(
                document_id=document_id,
                status=DocumentStatus.COMPLETED,
                skipped=True,
                metrics=metrics,
            )

        await document_crud.mark_processing(session, document)
        await session.commit()

        try:
            await self._run(session, document, metrics)
        except Exception as e:
            await self._fail(session, document, document_id, e)
            if isinstance(e, SQLAlchemyError):
                raise PersistenceError(
                    f"Failed to persist ingestion output: {type(e).__name__}",
                    document_id=str(document_id),
                ) from e
            raise

        logger.info(
            f"{__name__}:process - Completed in {metrics.total_ms}ms",
            extra={"document_id": str(document_id), "metrics": metrics.model_dump(mode="json")},
        )
        return PipelineResult(
            document_id=document_id,
            status=DocumentStatus.COMPLETED,
            metrics=metrics,
        )

    async def embed_pending(
        self,
        session: AsyncSession,
        chunks: Sequence[ChunkModel],
    ) -> tuple[int, int]:
        """
        Retry embeddings for chunks left PENDING by an earlier run.

        Args:
            session: Async database session (flushed, not committed)
            chunks: Chunks with embedding_status PENDING

        Returns:
            tuple: (chunks embedded now, chunks still pending)
        """
        if not chunks:
            return 0, 0
        embedded = await self._orchestrator.embed(
            session,
            [chunk.content for chunk in chunks],
            model=self._config.embedding_model,
            purpose=EmbeddingPurpose.RETRIEVAL,
        )
        done = 0
        for chunk, vector in zip(chunks, embedded.vectors):
            if vector is not None:
                await chunk_crud.set_embedding(session, chunk, vector)
                done += 1
        return done, len(chunks) - done

    async def _run(
        self,
        session: AsyncSession,
        document: DocumentModel,
        metrics: IngestionMetrics,
    ) -> None:
        content = document.content
        model = self._config.embedding_model

        cleared = await document_crud.clear_derived_data(session, document.id)
        if any(cleared.values()):
            logger.info(
                f"{__name__}:_run - Cleared previous derived data",
                extra={"document_id": str(document.id), **cleared},
            )

        with metrics.timed("chunking"):
            segments = self._chunker.chunk(content)
            segments, duplicates = dedupe_segments(segments)
        metrics.chunks_produced = len(segments) + duplicates
        metrics.duplicate_chunks = duplicates

        with metrics.timed("summary"):
            summary = await self._summarize(content)
        metrics.record_stage("summary", summary)

        # Extract from the summary only when one was produced
        source = content
        if summary.status == StageStatus.SUCCESS and summary.value:
            source = summary.value
        with metrics.timed("extraction"):
            extraction = await self._extract(source)
        metrics.record_stage("extraction", extraction)
        metrics.entities_extracted = len(extraction.value.entities)

        with metrics.timed("chunk_embedding"):
            embedding = await self._embed_chunks(session, [segment.content for segment in segments])
        metrics.record_stage("embedding", embedding)
        embedded = embedding.value
        metrics.embedding_cache_hits = embedded.hits
        metrics.embedding_cache_misses = embedded.misses
        metrics.embedding_failed_batches = embedded.failed_batches
        if not embedding.ok:
            logger.warning(
                f"{__name__}:_run - No chunk embeddings, chunks stay pending",
                extra={"document_id": str(document.id), "chunks": len(segments)},
            )

        with metrics.timed("chunk_persistence"):
            rows = [
                {
                    "chunk_index": segment.index,
                    "content": segment.content,
                    "content_hash": segment.content_hash,
                    "token_count": segment.token_count,
                    "embedding": vector,
                    "embedding_status": (
                        EmbeddingStatus.EMBEDDED if vector is not None else EmbeddingStatus.PENDING
                    ),
                }
                for segment, vector in zip(segments, embedded.vectors)
            ]
            chunks = await chunk_crud.create_many(session, document.id, rows)
            document.summary = summary.value
            await session.commit()
        metrics.chunks_persisted = len(chunks)
        metrics.chunks_pending = sum(1 for chunk in chunks if chunk.embedding is None)

        if extraction.ok and not extraction.value.is_empty:
            with metrics.timed("graph_upsert"):
                graph = await self._resolver.upsert(
                    session, document.id, extraction.value, chunks, model
                )
            metrics.entities_reused = graph.entities_reused
            metrics.entities_created = graph.entities_created
            metrics.mentions_created = graph.mentions_created
            metrics.relationships_created = graph.relationships_created
            metrics.relationships_dropped = graph.relationships_dropped
        else:
            logger.info(
                f"{__name__}:_run - No entities to resolve, graph upsert skipped",
                extra={"document_id": str(document.id), "extraction": extraction.status.value},
            )

        await document_crud.mark_completed(
            session,
            document,
            content_hash=document_fingerprint(content),
            embedding_model=model,
            embedding_version=EMBEDDING_VERSION,
        )
        await session.commit()

    async def _summarize(self, content: str) -> StageResult[str | None]:
        text = content[: self._config.summary_char_limit]
        if not text.strip():
            return StageResult.skipped(None)
        try:
            summary = await self._llm.summarize(text)
        except Exception as e:
            log_degraded(logger, f"{__name__}:_summarize - Summary unavailable", e)
            return StageResult.failure(None, f"{type(e).__name__}: {e}")
        return StageResult.success(summary.strip() or None)

    async def _extract(self, source: str) -> StageResult[ExtractionResult]:
        text = source[: self._config.extraction_char_limit]
        if not text.strip():
            return StageResult.skipped(ExtractionResult.empty())
        try:
            extraction = await self._llm.extract(text)
        except Exception as e:
            log_degraded(logger, f"{__name__}:_extract - Extraction unavailable", e)
            return StageResult.failure(ExtractionResult.empty(), f"{type(e).__name__}: {e}")
        return StageResult.success(extraction)

    async def _embed_chunks(
        self,
        session: AsyncSession,
        texts: list[str],
    ) -> StageResult[EmbeddingBatchResult]:
        if not texts:
            return StageResult.skipped(EmbeddingBatchResult())
        embedded = await self._orchestrator.embed(
            session,
            texts,
            model=self._config.embedding_model,
            purpose=EmbeddingPurpose.RETRIEVAL,
        )
        missing = embedded.missing_count
        if missing == 0:
            return StageResult.success(embedded)
        reason = f"{missing} of {len(texts)} chunks without embedding"
        if missing == len(texts):
            return StageResult.failure(embedded, reason)
        return StageResult.partial(embedded, reason)

    async def _fail(
        self,
        session: AsyncSession,
        document: DocumentModel,
        document_id: UUID,
        error: Exception,
    ) -> None:
        await session.rollback()
        if isinstance(error, KnowledgeBaseError):
            message = error.message
        else:
            message = f"{type(error).__name__}: {error}"
        await document_crud.mark_failed(session, document, message)
        await session.commit()
        await session.refresh(document)
        logger.error(
            f"{__name__}:process - Ingestion failed: {message}",
            extra={"document_id": str(document_id), "error_type": type(error).__name__},
        )
