"""
Database configuration settings.

Manages the SQLAlchemy async connection URL and pool parameters.
PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local use.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field

from knowledge_core.configs.base import BaseSettings, settings_config


class DatabaseSettings(BaseSettings):
    """Relational store configuration."""

    model_config = settings_config("DATABASE_")

    url: str = Field(
        default="sqlite+aiosqlite:///./knowledge.db",
        description="SQLAlchemy async database URL",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def is_sqlite(self) -> bool:
        """
        Whether the configured URL targets SQLite.

        Returns:
            bool: True for sqlite URLs (no pool sizing, foreign keys via PRAGMA)
        """
        return self.url.startswith("sqlite")
