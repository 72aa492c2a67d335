"""Typed domain errors and their HTTP rendering.

Every error is terminal for the current request. The core raises the typed
error and leaves wording for end users to the client.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppException):
    """Raised on malformed or missing input. Fixed by correcting the input."""

    status_code = 422
    code = "validation_error"


class ConflictError(AppException):
    """Raised when a requested slot is no longer available."""

    status_code = 409
    code = "conflict"


class InvalidStateError(AppException):
    """Raised when an operation targets an object in the wrong state."""

    status_code = 409
    code = "invalid_state"


class NotFoundError(AppException):
    """Raised when a referenced teacher, slot, match or booking is missing."""

    status_code = 404
    code = "not_found"


class ForbiddenError(AppException):
    """Raised when the actor has no rights for the operation."""

    status_code = 403
    code = "forbidden"


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": "http_error", "message": str(exc.detail)}},
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "internal_error", "message": "Internal server error"}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
