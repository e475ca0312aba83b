"""
Immutable per-run pipeline configuration.

Built once from Settings and passed explicitly through ingestion and
retrieval calls, so concurrent runs with different configurations never
read shared mutable state.

Dependencies: pydantic
System role: Configuration value threaded through the pipeline
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PipelineConfig(BaseModel):
    """Frozen configuration for one ingestion or retrieval call."""

    model_config = ConfigDict(frozen=True)

    # Chunking
    min_chunk_tokens: int = Field(default=100, ge=1)
    target_chunk_tokens: int = Field(default=500, ge=1)
    max_chunk_tokens: int = Field(default=800, ge=1)
    chars_per_token: int = Field(default=4, ge=1)

    # Embedding
    embedding_model: str = Field(default="models/gemini-embedding-001")
    embedding_batch_size: int = Field(default=16, ge=1)
    embedding_max_concurrency: int = Field(default=2, ge=1)

    # LLM stages
    summary_char_limit: int = Field(default=8000, ge=1)
    extraction_char_limit: int = Field(default=8000, ge=1)

    # Retrieval
    top_k: int = Field(default=5, ge=1)
    neighbor_fanout: int = Field(default=3, ge=0)

    @model_validator(mode="after")
    def _check_budgets(self) -> "PipelineConfig":
        if not self.min_chunk_tokens <= self.target_chunk_tokens <= self.max_chunk_tokens:
            raise ValueError(
                "chunk budgets must satisfy min_chunk_tokens <= target_chunk_tokens <= max_chunk_tokens"
            )
        return self
