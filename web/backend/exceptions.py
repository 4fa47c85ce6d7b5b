#!/usr/bin/env python3
"""
Service exceptions and handlers mapping engine errors to JSON error bodies.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from personalization.exceptions import (
    InvalidInteractionError,
    PersonalizationError,
    SubjectNotFoundError,
)

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base for errors raised by the API layer itself (lookups, not engine faults)."""
    pass


class CacheKeyNotFoundException(ServiceException):
    """Raised when a cache key is absent or expired."""
    pass


class MetricsNotFoundException(ServiceException):
    """Raised when an item has no recorded metrics."""
    pass


def _error_body(exc: Exception) -> dict:
    return {
        "success": False,
        "error": str(exc),
        "type": exc.__class__.__name__
    }


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    if isinstance(exc, (CacheKeyNotFoundException, MetricsNotFoundException)):
        status_code = 404
        logger.info(f"{request.url.path}: {exc}")
    else:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(status_code=status_code, content=_error_body(exc))


async def personalization_exception_handler(
    request: Request,
    exc: PersonalizationError
) -> JSONResponse:
    """Map engine errors: unknown subjects -> 404, bad interactions -> 400."""
    status_code = 500
    if isinstance(exc, SubjectNotFoundError):
        status_code = 404
    elif isinstance(exc, InvalidInteractionError):
        status_code = 400

    if status_code == 500:
        logger.error(f"Engine error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"{request.url.path}: {exc}")

    return JSONResponse(status_code=status_code, content=_error_body(exc))


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Wrap FastAPI HTTP errors in the same body shape as service errors.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Last resort: log the traceback and return a generic 500.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
