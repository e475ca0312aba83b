"""Logging configuration and helpers."""

from knowledge_core.observability.logger import configure_logging

__all__ = ["configure_logging"]
