"""
Embedding provider adapter.

Wraps langchain Embeddings (Google Generative AI or Bedrock) behind a
single async embed_batch call. Any backend failure surfaces as
EmbeddingError so the orchestrator can fail just that batch.

Dependencies: langchain_core, langchain_google_genai, langchain_aws
System role: Texts -> vectors boundary
"""

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from langchain_core.embeddings import Embeddings

from knowledge_core.configs.embedding import EmbeddingSettings
from knowledge_core.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

EmbeddingsFactory = Callable[[str], Embeddings]


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Anything that can embed a batch of texts with a named model."""

    async def embed_batch(self, texts: list[str], model: str) -> list[list[float]]: ...


class LangChainEmbeddingProvider:
    """EmbeddingProvider backed by langchain Embeddings instances, one per model."""

    def __init__(
        self,
        factory: EmbeddingsFactory,
        embed_kwargs: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            factory: Builds an Embeddings client for a model identifier
            embed_kwargs: Extra keyword arguments for aembed_documents
        """
        self._factory = factory
        self._embed_kwargs = embed_kwargs or {}
        self._clients: dict[str, Embeddings] = {}

    def _client(self, model: str) -> Embeddings:
        if model not in self._clients:
            self._clients[model] = self._factory(model)
            logger.info(f"{__name__}:_client - Initialized embeddings client for model={model}")
        return self._clients[model]

    async def embed_batch(self, texts: list[str], model: str) -> list[list[float]]:
        """
        Embed texts with the given model.

        Args:
            texts: Texts to embed
            model: Embedding model identifier

        Returns:
            list of vectors, one per text

        Raises:
            EmbeddingError: Backend call failed
        """
        if not texts:
            return []
        try:
            return await self._client(model).aembed_documents(texts, **self._embed_kwargs)
        except Exception as e:
            raise EmbeddingError(
                f"Embedding call failed: {type(e).__name__}: {e}",
                batch_size=len(texts),
                details={"model": model},
            ) from e


def build_embedding_provider(settings: EmbeddingSettings) -> LangChainEmbeddingProvider:
    """
    Create the embedding provider selected by settings.

    Args:
        settings: Embedding settings (provider, region, dimension)

    Returns:
        LangChainEmbeddingProvider

    Raises:
        ValueError: Unknown provider name
    """
    provider = settings.provider.lower()

    if provider == "google":
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        return LangChainEmbeddingProvider(
            factory=lambda model: GoogleGenerativeAIEmbeddings(model=model),
            embed_kwargs={"output_dimensionality": settings.dimension},
        )

    if provider == "bedrock":
        from langchain_aws import BedrockEmbeddings

        return LangChainEmbeddingProvider(
            factory=lambda model: BedrockEmbeddings(model_id=model, region_name=settings.region),
        )

    raise ValueError(f"Unknown embedding provider: {settings.provider}")
