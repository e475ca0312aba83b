"""
Chunking configuration settings.

Token budgets for structure-aware chunking. Tokens are estimated from
character counts, so no tokenizer is needed.

Dependencies: pydantic, pydantic_settings
System role: Chunk sizing configuration for ingestion
"""

from pydantic import Field

from knowledge_core.configs.base import BaseSettings, settings_config


class ChunkingSettings(BaseSettings):
    """Chunk size budgets."""

    model_config = settings_config("CHUNKING_")

    min_tokens: int = Field(default=100, ge=1, description="Merge chunks smaller than this")
    target_tokens: int = Field(default=500, ge=1, description="Preferred chunk size")
    max_tokens: int = Field(default=800, ge=1, description="Split chunks larger than this")
    chars_per_token: int = Field(default=4, ge=1, description="Character-to-token ratio")
