"""Hybrid (vector + graph) retrieval."""

from knowledge_core.core.retrieval.context_builder import build_prompt_context
from knowledge_core.core.retrieval.hybrid_retriever import HybridRetriever, cosine_top_k

__all__ = ["HybridRetriever", "build_prompt_context", "cosine_top_k"]
