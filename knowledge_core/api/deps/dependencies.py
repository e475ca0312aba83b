"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: knowledge_core.configs, knowledge_core.application, knowledge_core.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.application.services import DocumentService, GraphService, RetrievalService
from knowledge_core.boundary.db import get_async_db
from knowledge_core.configs import Settings, get_settings


class ServiceCache:
    """
    Container for cached service instances.

    Providers, the embedding cache, the pipeline and the retriever are
    built once per process from a PipelineConfig snapshot of the settings.
    """

    def __init__(self) -> None:
        self._embedding_provider = None
        self._llm_provider = None
        self._content_fetcher = None
        self._embedding_cache = None
        self._pipeline = None
        self._retriever = None

    @property
    def embedding_provider(self):
        """Get cached embedding provider."""
        if self._embedding_provider is None:
            from knowledge_core.boundary.providers import build_embedding_provider

            self._embedding_provider = build_embedding_provider(get_settings().embedding)
        return self._embedding_provider

    @property
    def llm_provider(self):
        """Get cached language model provider."""
        if self._llm_provider is None:
            from knowledge_core.boundary.providers import build_language_model_provider

            self._llm_provider = build_language_model_provider(get_settings().llm)
        return self._llm_provider

    @property
    def content_fetcher(self):
        """Get cached content fetcher."""
        if self._content_fetcher is None:
            from knowledge_core.boundary.providers import WebContentFetcher

            self._content_fetcher = WebContentFetcher()
        return self._content_fetcher

    @property
    def embedding_cache(self):
        """Get the process-wide embedding cache."""
        if self._embedding_cache is None:
            from knowledge_core.core.embedding import EmbeddingCache

            self._embedding_cache = EmbeddingCache()
        return self._embedding_cache

    @property
    def pipeline(self):
        """Get cached ingestion pipeline."""
        if self._pipeline is None:
            from knowledge_core.core.ingestion import IngestionPipeline

            self._pipeline = IngestionPipeline(
                config=get_settings().pipeline_config(),
                embedding_provider=self.embedding_provider,
                llm_provider=self.llm_provider,
                cache=self.embedding_cache,
            )
        return self._pipeline

    @property
    def retriever(self):
        """Get cached hybrid retriever."""
        if self._retriever is None:
            from knowledge_core.core.retrieval import HybridRetriever

            self._retriever = HybridRetriever.from_config(
                self.embedding_provider,
                get_settings().pipeline_config(),
                cache=self.embedding_cache,
            )
        return self._retriever

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedding_provider = None
        self._llm_provider = None
        self._content_fetcher = None
        self._embedding_cache = None
        self._pipeline = None
        self._retriever = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentService: Document service with the shared ingestion pipeline
    """
    cache = get_service_cache()
    return DocumentService(db=db, pipeline=cache.pipeline, fetcher=cache.content_fetcher)


def get_retrieval_service(db: AsyncSession = Depends(get_async_db)) -> RetrievalService:
    """
    Get retrieval service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        RetrievalService: Retrieval service with the shared hybrid retriever
    """
    return RetrievalService(db=db, retriever=get_service_cache().retriever)


def get_graph_service(db: AsyncSession = Depends(get_async_db)) -> GraphService:
    """
    Get graph service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        GraphService: Graph read service
    """
    return GraphService(db=db)
