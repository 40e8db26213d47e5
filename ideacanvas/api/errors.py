"""Exception handlers mapping the error taxonomy onto HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from ideacanvas.errors import (
    AuthenticationError,
    CanvasError,
    ConflictError,
    ForbiddenError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)

# Starlette renamed its 422 constant between releases.
_UNPROCESSABLE = 422

# Checked in order; subclasses must precede their bases.
_STATUS_BY_ERROR: list[tuple[type[CanvasError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidReferenceError, _UNPROCESSABLE),
    (ValidationError, _UNPROCESSABLE),
]


def status_for(exc: CanvasError) -> int:
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def canvas_exception_handler(request: Request, exc: CanvasError) -> JSONResponse:
    """Render a :class:`CanvasError` as ``{"error", "detail", "status_code"}``."""
    code = status_for(exc)
    if code >= 500:
        logger.opt(exception=exc).error("Unmapped canvas error on {}: {}", request.url.path, exc.message)
    else:
        logger.info("{} on {} {}: {}", type(exc).__name__, request.method, request.url.path, exc.message)

    body = {
        "error": type(exc).__name__,
        "detail": exc.message,
        "status_code": code,
    }
    if exc.detail:
        body["context"] = exc.detail
    return JSONResponse(status_code=code, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic's error list into ``field``/``message`` pairs."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg"),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]
    logger.info("Request validation failed on {}: {}", request.url.path, errors)
    return JSONResponse(
        status_code=_UNPROCESSABLE,
        content={
            "error": "ValidationError",
            "detail": "Request validation failed",
            "status_code": _UNPROCESSABLE,
            "errors": errors,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CanvasError, canvas_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
