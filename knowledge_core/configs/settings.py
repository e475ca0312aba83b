"""
Top-level settings object.

Groups the per-concern settings and derives the frozen PipelineConfig
that ingestion and retrieval receive explicitly.
"""

from functools import lru_cache

from knowledge_core.configs.base import BaseSettings
from knowledge_core.configs.chunking import ChunkingSettings
from knowledge_core.configs.database import DatabaseSettings
from knowledge_core.configs.embedding import EmbeddingSettings
from knowledge_core.configs.llm import LLMSettings
from knowledge_core.configs.pipeline import PipelineConfig
from knowledge_core.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """All settings groups, read once from the environment."""

    database: DatabaseSettings = DatabaseSettings()
    embedding: EmbeddingSettings = EmbeddingSettings()
    llm: LLMSettings = LLMSettings()
    chunking: ChunkingSettings = ChunkingSettings()
    retrieval: RetrievalSettings = RetrievalSettings()

    def pipeline_config(self) -> PipelineConfig:
        """
        Snapshot the current settings into an immutable PipelineConfig.

        Returns:
            PipelineConfig: Value passed explicitly to ingestion and retrieval
        """
        return PipelineConfig(
            min_chunk_tokens=self.chunking.min_tokens,
            target_chunk_tokens=self.chunking.target_tokens,
            max_chunk_tokens=self.chunking.max_tokens,
            chars_per_token=self.chunking.chars_per_token,
            embedding_model=self.embedding.model,
            embedding_batch_size=self.embedding.batch_size,
            embedding_max_concurrency=self.embedding.max_concurrency,
            summary_char_limit=self.llm.summary_char_limit,
            extraction_char_limit=self.llm.extraction_char_limit,
            top_k=self.retrieval.top_k,
            neighbor_fanout=self.retrieval.neighbor_fanout,
        )


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings; call ``get_settings.cache_clear()`` to reload."""
    return Settings()
