"""
Router utility functions.

Dependencies: fastapi, knowledge_core.core.exceptions
System role: Domain error -> HTTP status mapping
"""

import logging

from fastapi import HTTPException

from knowledge_core.core.exceptions import (
    ContentFetchError,
    DocumentNotFoundError,
    EntityNotFoundError,
    KnowledgeBaseError,
    RetrievalError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: KnowledgeBaseError) -> HTTPException:
    """
    Map a domain error to an HTTPException.

    404 for unknown documents or entities, 422 for invalid input, 502 when
    the content source failed, 500 for everything else.

    Args:
        error: Domain exception

    Returns:
        HTTPException with the error message as detail
    """
    if isinstance(error, (DocumentNotFoundError, EntityNotFoundError)):
        status_code = 404
    elif isinstance(error, (ValidationError, RetrievalError)):
        status_code = 422
    elif isinstance(error, ContentFetchError):
        status_code = 502
    else:
        status_code = 500

    if status_code >= 500:
        logger.error(f"{__name__}:to_http_exception - {error}")
    return HTTPException(status_code=status_code, detail=error.message)
