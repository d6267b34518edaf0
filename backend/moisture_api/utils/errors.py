"""
API Errors
==========

The three kinds of failure the API reports back to a caller:

- ValidationError (400): the request was missing something or had the wrong type
- NotFoundError   (404): there is nothing stored for what was asked for
- InternalError   (500): the database or the filesystem let us down

Routers raise these; the handlers registered by ``register_error_handlers``
turn them into ``{"detail": "..."}`` JSON responses. Internal errors always
carry a generic message - the real cause only goes to the server log.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map straight onto an HTTP status code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class InternalError(ApiError):
    status_code = 500


def describe_validation_errors(errors) -> str:
    """
    Flatten pydantic/FastAPI validation errors into one readable line.

    Example:
        [{"loc": ("body", "value"), "msg": "Field required"}]
        -> "value: Field required"
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    return "; ".join(parts) or "Invalid request"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # FastAPI answers 422 by default; this API promises 400 for bad input
    detail = describe_validation_errors(exc.errors())
    logger.info(f"[API] rejected {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=400, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
