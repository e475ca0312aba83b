"""
Adapters for the external collaborators of the pipeline.

Exports:
  - EmbeddingProvider / LangChainEmbeddingProvider: texts -> vectors
  - LanguageModelProvider / LangChainLanguageModelProvider: summarize, extract
  - ContentFetcher / WebContentFetcher: url -> title + text
  - build_* factories selecting a backend from settings

Dependencies: langchain_core, langchain_google_genai, langchain_aws, langchain_community
System role: Boundary to model providers and content sources
"""

from knowledge_core.boundary.providers.content_fetcher import (
    ContentFetcher,
    WebContentFetcher,
)
from knowledge_core.boundary.providers.embedding_provider import (
    EmbeddingProvider,
    LangChainEmbeddingProvider,
    build_embedding_provider,
)
from knowledge_core.boundary.providers.llm_provider import (
    LangChainLanguageModelProvider,
    LanguageModelProvider,
    build_language_model_provider,
)

__all__ = [
    "ContentFetcher",
    "WebContentFetcher",
    "EmbeddingProvider",
    "LangChainEmbeddingProvider",
    "build_embedding_provider",
    "LangChainLanguageModelProvider",
    "LanguageModelProvider",
    "build_language_model_provider",
]
