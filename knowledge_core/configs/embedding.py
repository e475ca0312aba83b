"""
Embedding provider configuration settings.

Selects the langchain embedding backend and the batching limits applied
when calling it.

Dependencies: pydantic, pydantic_settings
System role: Embedding model configuration for chunk and entity vectors
"""

from pydantic import Field

from knowledge_core.configs.base import BaseSettings, settings_config


class EmbeddingSettings(BaseSettings):
    """Embedding backend and batching configuration."""

    model_config = settings_config("EMBEDDING_")

    provider: str = Field(
        default="google",
        description="Embedding backend: 'google' (Gemini) or 'bedrock' (Titan)",
    )
    model: str = Field(
        default="models/gemini-embedding-001",
        description="Embedding model identifier, stored on every document",
    )
    region: str = Field(default="us-east-1", description="AWS region when provider is bedrock")
    dimension: int = Field(default=1024, description="Requested output dimensionality")

    batch_size: int = Field(default=16, ge=1, description="Texts per provider call")
    max_concurrency: int = Field(
        default=2,
        ge=1,
        description="Provider calls allowed in flight at once",
    )
