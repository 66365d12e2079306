"""
Request logging middleware.
"""
import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable


logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request and the status and duration of its response."""

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"

        logger.info(
            f"Incoming request: {request.method} {request.url.path}",
            extra={
                "client": client,
                "user_agent": request.headers.get("user-agent"),
            }
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} "
            f"({duration_ms:.1f}ms)"
        )
        return response
