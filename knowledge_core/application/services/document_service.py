"""
Document service orchestrator.

Coordinates document creation, ingestion, re-ingestion, status queries
and deletion on top of IngestionPipeline.

Dependencies: knowledge_core.core.ingestion, knowledge_core.boundary
System role: Document lifecycle orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD import (
    chunk_crud,
    document_crud,
    entity_mention_crud,
    relationship_crud,
)
from knowledge_core.boundary.db.models import (
    DocumentModel,
    DocumentStatus,
    EmbeddingStatus,
    SourceType,
)
from knowledge_core.boundary.providers.content_fetcher import ContentFetcher, WebContentFetcher
from knowledge_core.core.exceptions import (
    ContentFetchError,
    DocumentNotFoundError,
    ValidationError,
)
from knowledge_core.core.ingestion import IngestionPipeline
from knowledge_core.models import (
    BulkReingestResult,
    DocumentStatusView,
    EmbeddingRetryResult,
    PipelineResult,
    ReingestOutcome,
)

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Every ingestion entry point (new text, new URL, refresh, re-ingest,
    bulk) goes through the same IngestionPipeline.process contract.
    """

    def __init__(
        self,
        db: AsyncSession,
        pipeline: IngestionPipeline,
        fetcher: ContentFetcher | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for all persistence
            pipeline: Configured ingestion pipeline
            fetcher: Content acquisition adapter (WebContentFetcher if None)
        """
        self.db = db
        self._pipeline = pipeline
        self._fetcher = fetcher

    @property
    def fetcher(self) -> ContentFetcher:
        """Lazy-load fetcher to avoid initialization cost."""
        if self._fetcher is None:
            self._fetcher = WebContentFetcher()
        return self._fetcher

    async def get_document(self, document_id: UUID) -> DocumentModel:
        """
        Load a document or raise.

        Raises:
            DocumentNotFoundError: Unknown id
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def ingest_text(
        self,
        title: str,
        content: str,
        source_url: str | None = None,
    ) -> PipelineResult:
        """
        Create a document from pasted text and ingest it.

        Args:
            title: Document title
            content: Raw text
            source_url: Optional origin locator

        Returns:
            PipelineResult: Final status and metrics

        Raises:
            ValidationError: Blank title or content
            DocumentProcessingError: Ingestion failed; document is FAILED
        """
        if not title or not title.strip():
            raise ValidationError("Title must not be empty", field="title")
        if not content or not content.strip():
            raise ValidationError("Content must not be empty", field="content")

        document = await document_crud.create(
            self.db,
            title=title.strip(),
            content=content,
            source_url=source_url,
            source_type=SourceType.ARTICLE if source_url else SourceType.NOTE,
            status=DocumentStatus.PENDING,
        )
        await self.db.commit()
        logger.info(
            f"{__name__}:ingest_text - Created document",
            extra={"document_id": str(document.id), "chars": len(content)},
        )
        return await self._pipeline.process(self.db, document)

    async def ingest_url(self, url: str) -> PipelineResult:
        """
        Fetch a URL, create a document from it and ingest it.

        A fetch failure is raised before any document row exists.

        Args:
            url: Page URL

        Returns:
            PipelineResult: Final status and metrics

        Raises:
            ContentFetchError: Page could not be fetched
        """
        fetched = await self.fetcher.fetch(url)
        return await self.ingest_text(
            title=fetched.title,
            content=fetched.content,
            source_url=fetched.source_url or url,
        )

    async def refresh_from_source(self, document_id: UUID) -> PipelineResult:
        """
        Refetch a document's source URL and re-ingest it.

        Unchanged content completes without reprocessing.

        Args:
            document_id: Document UUID

        Returns:
            PipelineResult: Final status and metrics

        Raises:
            DocumentNotFoundError: Unknown id
            ValidationError: Document has no source URL
            ContentFetchError: Refetch failed; document is marked FAILED
        """
        document = await self.get_document(document_id)
        if not document.source_url:
            raise ValidationError("Document has no source URL to refresh from", field="source_url")

        try:
            fetched = await self.fetcher.fetch(document.source_url)
        except ContentFetchError as e:
            await document_crud.mark_failed(self.db, document, e.message)
            await self.db.commit()
            raise

        document.content = fetched.content
        if fetched.title and fetched.title != document.source_url:
            document.title = fetched.title
        return await self._pipeline.process(self.db, document)

    async def reingest(
        self,
        document_id: UUID,
        content: str | None = None,
        force: bool = False,
    ) -> PipelineResult:
        """
        Re-run ingestion on new or stored content.

        Changed content (or a changed embedding model) fully replaces the
        document's chunks, mentions and relationships; unchanged content on a
        COMPLETED document is a no-op.

        Args:
            document_id: Document UUID
            content: Replacement content (stored content when None)
            force: Reprocess even if unchanged

        Returns:
            PipelineResult: Final status and metrics

        Raises:
            DocumentNotFoundError: Unknown id
            ValidationError: Blank replacement content
        """
        document = await self.get_document(document_id)
        if content is not None:
            if not content.strip():
                raise ValidationError("Content must not be empty", field="content")
            document.content = content
        return await self._pipeline.process(self.db, document, force=force)

    async def reingest_many(self, document_ids: list[UUID] | None = None) -> BulkReingestResult:
        """
        Re-ingest several documents, continuing past individual failures.

        Args:
            document_ids: Documents to process (all documents when None)

        Returns:
            BulkReingestResult: One outcome per document, in request order
        """
        if document_ids is None:
            document_ids = await document_crud.get_all_ids(self.db)

        outcomes: list[ReingestOutcome] = []
        for document_id in document_ids:
            try:
                result = await self.reingest(document_id)
                outcomes.append(
                    ReingestOutcome(
                        document_id=document_id,
                        status=result.status,
                        skipped=result.skipped,
                    )
                )
            except DocumentNotFoundError as e:
                outcomes.append(ReingestOutcome(document_id=document_id, error=e.message))
            except Exception as e:
                logger.error(
                    f"{__name__}:reingest_many - Document failed: {type(e).__name__}: {e}",
                    extra={"document_id": str(document_id)},
                )
                outcomes.append(
                    ReingestOutcome(
                        document_id=document_id,
                        status=DocumentStatus.FAILED,
                        error=f"{type(e).__name__}: {e}",
                    )
                )

        result = BulkReingestResult(outcomes=outcomes)
        logger.info(
            f"{__name__}:reingest_many - {result.succeeded} succeeded, {result.failed} failed",
        )
        return result

    async def retry_pending_embeddings(self, document_id: UUID | None = None) -> EmbeddingRetryResult:
        """
        Embed chunks a previous run left PENDING.

        Args:
            document_id: Restrict to one document (all documents when None)

        Returns:
            EmbeddingRetryResult: Chunks embedded now and still pending

        Raises:
            DocumentNotFoundError: Unknown id
        """
        if document_id is not None:
            await self.get_document(document_id)

        pending = await chunk_crud.get_pending(self.db, document_id)
        embedded, still_pending = await self._pipeline.embed_pending(self.db, pending)
        await self.db.commit()
        logger.info(
            f"{__name__}:retry_pending_embeddings - {embedded} embedded, {still_pending} still pending",
            extra={"document_id": str(document_id) if document_id else None},
        )
        return EmbeddingRetryResult(embedded=embedded, still_pending=still_pending)

    async def get_status(self, document_id: UUID) -> DocumentStatusView:
        """
        Processing state and derived-data counts of a document.

        Raises:
            DocumentNotFoundError: Unknown id
        """
        document = await self.get_document(document_id)
        counts = await chunk_crud.count_by_status(self.db, document_id)
        return DocumentStatusView(
            document_id=document.id,
            title=document.title,
            status=document.status,
            error_message=document.error_message,
            has_summary=document.summary is not None,
            embedding_model=document.embedding_model,
            chunk_count=sum(counts.values()),
            embedded_chunks=counts[EmbeddingStatus.EMBEDDED],
            pending_chunks=counts[EmbeddingStatus.PENDING],
            mention_count=await entity_mention_crud.count_by_document(self.db, document_id),
            relationship_count=await relationship_crud.count_by_document(self.db, document_id),
        )

    async def delete_document(self, document_id: UUID) -> None:
        """
        Delete a document with its chunks, mentions and asserted relationships.

        Entities stay: they may be shared with other documents.

        Raises:
            DocumentNotFoundError: Unknown id
        """
        await self.get_document(document_id)
        await document_crud.delete_with_children(self.db, document_id)
        await self.db.commit()
        logger.info(
            f"{__name__}:delete_document - Deleted document",
            extra={"document_id": str(document_id)},
        )
