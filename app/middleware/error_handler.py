"""
Global error handling middleware.
"""
import logging
from http import HTTPStatus
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable, Mapping, Optional

from app.domain.exceptions import StorageError, TrashLogError


logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    code: str,
    message: str,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """Build a response in the API error format."""
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content={
            "error": {
                "code": code,
                "message": message,
            }
        },
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches domain and unhandled exceptions and returns consistent error
    responses. Storage failures and unexpected errors are logged with request
    context; their details never reach the response body.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """
        Process the request and handle any exceptions.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            Response object
        """
        try:
            response = await call_next(request)
            return response

        except StorageError as e:
            logger.exception(
                f"Storage error: {e.message}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                }
            )
            return error_response(
                e.status_code,
                e.code,
                "The request could not be completed. Please try again later.",
            )

        except TrashLogError as e:
            logger.warning(
                f"Request rejected ({e.code}): {e.message}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return error_response(e.status_code, e.code, e.message)

        except Exception as e:
            logger.exception(
                f"Unhandled exception: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                }
            )
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_SERVER_ERROR",
                "An unexpected error occurred. Please try again later.",
            )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report FastAPI parameter validation failures as invalid input."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("query", "path", "body"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"

    logger.warning(
        f"Validation error: {message}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "INVALID_INPUT", message)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Report routing errors (unknown path, wrong method) in the API error format."""
    phrase = HTTPStatus(exc.status_code).phrase
    code = phrase.upper().replace(" ", "_").replace("-", "_")
    message = exc.detail if isinstance(exc.detail, str) else phrase

    logger.info(
        f"HTTP {exc.status_code}: {message}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return error_response(exc.status_code, code, message, headers=exc.headers)
