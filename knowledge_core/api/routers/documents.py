"""
Document API endpoints.

Routes: POST /documents, POST /documents/url, POST /documents/reingest,
    POST /documents/embeddings/retry, GET /documents/{id}/status,
    POST /documents/{id}/reingest, POST /documents/{id}/refresh,
    DELETE /documents/{id}

Dependencies: knowledge_core.application.services.document_service
System role: Document ingestion HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from knowledge_core.api.deps import get_document_service
from knowledge_core.api.routers.router_utils import to_http_exception
from knowledge_core.application.services import DocumentService
from knowledge_core.core.exceptions import KnowledgeBaseError
from knowledge_core.models import (
    BulkReingestRequest,
    BulkReingestResult,
    DocumentStatusView,
    EmbeddingRetryResult,
    IngestTextRequest,
    IngestUrlRequest,
    PipelineResult,
    ReingestRequest,
)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=PipelineResult, status_code=status.HTTP_201_CREATED)
async def ingest_text(
    request: IngestTextRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> PipelineResult:
    """
    Create a document from pasted text and ingest it.

    Ingestion runs within the request; the response carries the final
    status and run metrics.
    """
    try:
        return await document_service.ingest_text(
            title=request.title,
            content=request.content,
            source_url=request.source_url,
        )
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.post("/url", response_model=PipelineResult, status_code=status.HTTP_201_CREATED)
async def ingest_url(
    request: IngestUrlRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> PipelineResult:
    """Fetch a web page and ingest it. 502 when the page cannot be fetched."""
    try:
        return await document_service.ingest_url(request.url)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.post("/reingest", response_model=BulkReingestResult)
async def reingest_many(
    request: BulkReingestRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> BulkReingestResult:
    """Re-ingest the given documents (or all). Per-document failures are reported, not raised."""
    return await document_service.reingest_many(request.document_ids)


@router.post("/embeddings/retry", response_model=EmbeddingRetryResult)
async def retry_pending_embeddings(
    document_id: UUID | None = None,
    document_service: DocumentService = Depends(get_document_service),
) -> EmbeddingRetryResult:
    """Re-embed chunks left pending by provider failures."""
    try:
        return await document_service.retry_pending_embeddings(document_id)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.get("/{document_id}/status", response_model=DocumentStatusView)
async def get_document_status(
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentStatusView:
    """Get processing status and derived-data counts."""
    try:
        return await document_service.get_status(document_id)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.post("/{document_id}/reingest", response_model=PipelineResult)
async def reingest_document(
    document_id: UUID,
    request: ReingestRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> PipelineResult:
    """Re-ingest one document with new or stored content."""
    try:
        return await document_service.reingest(document_id, content=request.content, force=request.force)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.post("/{document_id}/refresh", response_model=PipelineResult)
async def refresh_document(
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> PipelineResult:
    """Refetch the document's source URL and re-ingest it."""
    try:
        return await document_service.refresh_from_source(document_id)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """Delete a document with its chunks, mentions and asserted relationships."""
    try:
        await document_service.delete_document(document_id)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
