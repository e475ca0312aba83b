"""
Language model configuration settings.

Controls the chat model used for summarization and entity extraction.

Dependencies: pydantic, pydantic_settings
System role: LLM configuration for best-effort ingestion stages
"""

from pydantic import Field

from knowledge_core.configs.base import BaseSettings, settings_config


class LLMSettings(BaseSettings):
    """Chat model configuration."""

    model_config = settings_config("LLM_")

    provider: str = Field(
        default="google",
        description="Chat backend: 'google' (Gemini) or 'bedrock' (Converse)",
    )
    model: str = Field(default="gemini-2.5-flash", description="Chat model identifier")
    region: str = Field(default="us-east-1", description="AWS region when provider is bedrock")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)

    summary_char_limit: int = Field(
        default=8000,
        description="Characters of document content sent for summarization",
    )
    extraction_char_limit: int = Field(
        default=8000,
        description="Characters of content used for extraction when no summary exists",
    )
