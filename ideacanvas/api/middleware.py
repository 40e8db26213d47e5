"""Request/response logging middleware with correlation ids."""

from __future__ import annotations

import time
from typing import Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from ideacanvas.logging import set_correlation_id


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request and its outcome, tagging both with a correlation id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
        logger.info("{} {}", request.method, request.url.path)

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            level = "ERROR" if status_code >= 500 else "WARNING" if status_code >= 400 else "INFO"
            logger.log(level, "{} {} -> {} ({:.1f} ms)", request.method, request.url.path, status_code, elapsed_ms)

        response.headers["X-Correlation-ID"] = correlation_id
        return response
