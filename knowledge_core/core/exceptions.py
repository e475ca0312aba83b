"""
Errors raised by the knowledge base core.

Every error carries a ``details`` dict so callers and log records get the
same structured context. Keyword context passed to any constructor
(``field=``, ``url=``, ``batch_size=`` ...) is folded into ``details``;
``None`` values are dropped.

Degradable stages (embedding batches, summary, extraction) raise these
internally and are turned into tagged stage results by their callers;
only ``DocumentProcessingError`` and its subclasses end an ingestion run.
"""

from typing import Any


class KnowledgeBaseError(Exception):
    """Root of the knowledge base error hierarchy."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} | Details: {self.details}"


class ValidationError(KnowledgeBaseError):
    """Input rejected before any work started (empty title, k < 1, ...)."""


class DocumentNotFoundError(KnowledgeBaseError):
    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Document not found: {document_id}", details, document_id=document_id)


class EntityNotFoundError(KnowledgeBaseError):
    def __init__(self, entity_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Entity not found: {entity_id}", details, entity_id=entity_id)


class DocumentProcessingError(KnowledgeBaseError):
    """Fatal to one document's ingestion; the document is marked failed."""


class ContentFetchError(DocumentProcessingError):
    """Source content could not be acquired."""


class PersistenceError(DocumentProcessingError):
    """Pipeline output could not be written."""


class EmbeddingError(KnowledgeBaseError):
    """An embedding provider call failed or returned the wrong shape."""


class ExtractionError(KnowledgeBaseError):
    """Summarization or extraction failed or returned malformed output."""


class RetrievalError(KnowledgeBaseError):
    """Invalid retrieval request."""

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details, query=query[:200] if query is not None else None)
