"""
Infrastructure layer: Per-client rate limiting.

Uses slowapi (a Starlette-compatible wrapper around the `limits` library).
The limiter is built per application and stored on `app.state.limiter`, where
`SlowAPIMiddleware` picks it up and applies the default limit to every route.
Counters live in the configured storage backend, so a Redis URI can replace
the in-memory default when the API runs on several processes.
"""
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.config import Settings, settings as default_settings


def build_limiter(config: Optional[Settings] = None) -> Limiter:
    """
    Create a limiter keyed by client IP address.

    Args:
        config: Settings to read limits from (defaults to the global settings)

    Returns:
        Limiter applying `rate_limit_requests` per minute to every route
    """
    config = config or default_settings
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{config.rate_limit_requests}/minute"],
        storage_uri=config.rate_limit_storage_uri,
        enabled=config.rate_limit_enabled,
        headers_enabled=False,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a rate limit rejection in the API error format."""
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": "Too many requests. Please try again later.",
            }
        },
    )
