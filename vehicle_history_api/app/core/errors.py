"""
Error taxonomy and its HTTP mapping.

Services raise the exceptions defined here; ``register_exception_handlers``
turns them into JSON responses of the form ``{"error": "<message>"}``.
Internal failures are reported with a generic message only, the
underlying storage error is logged but never returned to the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class NotFoundError(ApiError):
    """A referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ApiError):
    """A unique key is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(ApiError):
    """Storage failure or any other unexpected condition."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body validation problems as 400 instead of FastAPI's 422."""
    errors = exc.errors()
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    if any(err.get("type") == "missing" for err in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, ValidationError.default_message)
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
