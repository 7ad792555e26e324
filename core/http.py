"""
Traducción de excepciones de la librería a respuestas HTTP para FastAPI.
"""

import logging

from fastapi import HTTPException, status

from core.exceptions import AppException

logger = logging.getLogger(__name__)


def to_http_exception(e: Exception) -> HTTPException:
    """Convert repository exceptions to HTTP exceptions."""
    if isinstance(e, AppException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message
        )
    logger.error(f"Unexpected error: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Error interno del servidor"
    )
