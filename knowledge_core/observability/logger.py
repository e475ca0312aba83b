"""
Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)`` with messages shaped
``"<module>:<function> - <message>"``; this module only owns the root handler.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty at INFO: HTTP clients, AWS SDK, SQL echo and provider SDKs.
QUIET_LOGGERS = (
    "urllib3",
    "botocore",
    "httpx",
    "sqlalchemy.engine",
    "google_genai",
    "langchain_community.document_loaders",
)


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stdout handler on the root logger.

    Calling it again replaces the handler instead of stacking a second one.

    Args:
        level: Root level name, case-insensitive
    """
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
