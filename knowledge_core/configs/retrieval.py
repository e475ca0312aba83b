"""
Retrieval configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Hybrid retrieval defaults
"""

from pydantic import Field

from knowledge_core.configs.base import BaseSettings, settings_config


class RetrievalSettings(BaseSettings):
    """Hybrid retrieval defaults."""

    model_config = settings_config("RETRIEVAL_")

    top_k: int = Field(default=5, ge=1, description="Number of chunks returned")
    neighbor_fanout: int = Field(
        default=3,
        ge=0,
        description="Neighbours fetched per direction for each seed entity",
    )
