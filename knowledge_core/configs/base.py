"""
Shared settings base.

Every settings class reads the process environment and ``.env``; concern
specific classes add an ``env_prefix`` via ``settings_config``.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


def settings_config(env_prefix: str = "") -> SettingsConfigDict:
    """Settings config reading ``.env`` with an optional variable prefix."""
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix=env_prefix,
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Process-level settings shared by every config module."""

    model_config = settings_config()

    environment: Literal["development", "test", "staging", "production"] = Field(default="development")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level name")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level
