"""
Helpers for attaching bounded context to log records.

Chunk texts and vectors end up in log context easily; everything passed
through here is summarised or truncated first.
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log record.

    Lists, tuples and dicts become a size summary; anything else is
    stringified and cut to ``max_length`` characters.
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    text = value if isinstance(value, str) else str(value)
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}... (truncated, {len(text)} total)"


def _extra(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_degraded(logger: logging.Logger, message: str, exc: BaseException, **context) -> None:
    """
    Record a caught failure that the caller recovers from.

    Logged at WARNING; ``error_type`` and ``error_msg`` are added to the
    record so degraded stages can be counted by type.
    """
    extra = _extra(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.warning(f"{message}: {type(exc).__name__}: {exc}", extra=extra)
