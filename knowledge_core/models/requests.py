"""
HTTP request and response schemas.

Dependencies: pydantic
System role: API contracts
"""

from uuid import UUID

from pydantic import BaseModel, Field

from knowledge_core.models.retrieval import RetrievalResult


class IngestTextRequest(BaseModel):
    """Request schema for ingesting pasted text."""

    title: str = Field(min_length=1, max_length=512)
    content: str = Field(min_length=1)
    source_url: str | None = Field(default=None, max_length=2048)


class IngestUrlRequest(BaseModel):
    """Request schema for ingesting a web page."""

    url: str = Field(min_length=1, max_length=2048)


class ReingestRequest(BaseModel):
    """Request schema for re-ingesting one document."""

    content: str | None = Field(default=None, description="Replacement content; stored content when omitted")
    force: bool = Field(default=False, description="Reprocess even when unchanged")


class BulkReingestRequest(BaseModel):
    """Request schema for bulk re-ingestion."""

    document_ids: list[UUID] | None = Field(default=None, description="All documents when omitted")


class RetrieveRequest(BaseModel):
    """Request schema for hybrid retrieval."""

    query: str = Field(min_length=1)
    k: int | None = Field(default=None, ge=1, le=100)


class RetrieveResponse(BaseModel):
    """Retrieval result with its rendered prompt context."""

    result: RetrievalResult
    prompt_context: str
