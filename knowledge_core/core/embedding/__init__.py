"""Embedding cache and batched embedding orchestration."""

from knowledge_core.core.embedding.cache import ComputeFn, EmbeddingCache
from knowledge_core.core.embedding.orchestrator import EmbeddingOrchestrator

__all__ = ["ComputeFn", "EmbeddingCache", "EmbeddingOrchestrator"]
