"""
Error handling with sanitized, uniformly shaped error responses.

Every error leaves the API as::

    {"error": {"code": ..., "message": ..., "path": ..., "method": ...}}
"""

import logging
import re
import traceback
from typing import Any, Callable, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.services.interviews.errors import InterviewEngineError

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be returned or logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'eyJ[\w-]+\.[\w-]+\.[\w-]+'),  # JWT
    re.compile(r'[\w.+-]+@[\w-]+\.[\w.-]+'),  # Email
]


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def error_body(
    code: str,
    message: str,
    path: str,
    method: str,
    details: Optional[Any] = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "error": {
            "code": code,
            "message": sanitize_error_message(message),
            "path": path,
            "method": method,
        }
    }
    if details is not None:
        body["error"]["details"] = details
    return body


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic validation errors without echoing inputs back."""
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def classify_exception(exc: Exception) -> tuple[int, str, str]:
    """
    Map an exception to (status code, error code, client message).

    Args:
        exc: The exception to classify

    Returns:
        Tuple of HTTP status, machine-readable code and safe message
    """
    if isinstance(exc, InterviewEngineError):
        return exc.status_code, exc.code, exc.message
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code, "HTTP_EXCEPTION", str(exc.detail)
    if isinstance(exc, IntegrityError):
        return status.HTTP_409_CONFLICT, "INTEGRITY_ERROR", "Database integrity constraint violated"
    if isinstance(exc, OperationalError):
        return (
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "DATABASE_ERROR",
            "Database service temporarily unavailable",
        )
    if isinstance(exc, SQLAlchemyError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR", "A database error occurred"
    if isinstance(exc, RedisConnectionError):
        return (
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "BROKER_ERROR",
            "Message broker temporarily unavailable",
        )
    if isinstance(exc, TimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT, "TIMEOUT", "The request timed out"
    return (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


class ErrorHandlingMiddleware:
    """
    Outermost ASGI guard turning escaped exceptions into JSON error responses.

    FastAPI exception handlers cover errors raised in route handlers; this
    middleware catches whatever escapes other middleware.
    """

    def __init__(self, app: Callable, debug: bool = False):
        """
        Initialize error handling middleware.

        Args:
            app: The ASGI application
            debug: Whether to include a traceback in responses
        """
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = self._handle_exception(exc, scope)
            await response(scope, receive, send)

    def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        request_path = scope.get("path", "unknown")
        request_method = scope.get("method", "unknown")

        status_code, error_code, message = classify_exception(exc)
        if status_code >= 500:
            logger.error(
                f"Unhandled exception: {request_method} {request_path} - "
                f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
                exc_info=True,
            )
        else:
            logger.warning(f"{error_code}: {request_method} {request_path}")

        details = None
        if self.debug and status_code >= 500:
            details = {"type": type(exc).__name__, "traceback": traceback.format_exc()}

        body = error_body(error_code, message, request_path, request_method, details)

        # Add request ID if available
        headers = dict(scope.get("headers") or [])
        request_id = headers.get(b"x-request-id")
        if request_id:
            body["error"]["request_id"] = request_id.decode()

        return JSONResponse(status_code=status_code, content=body)


def setup_error_handlers(app):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(InterviewEngineError)
    async def interview_engine_exception_handler(request: Request, exc: InterviewEngineError):
        """Handle interview engine errors."""
        log = logger.error if exc.status_code >= 500 else logger.info
        log(f"{exc.code}: {request.method} {request.url.path} - {sanitize_error_message(exc.message)}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message, str(request.url.path), request.method),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                "HTTP_EXCEPTION", str(exc.detail), str(request.url.path), request.method
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body(
                "VALIDATION_ERROR",
                "Request validation failed",
                str(request.url.path),
                request.method,
                format_validation_errors(exc),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        status_code, error_code, message = classify_exception(exc)
        logger.error(
            f"Unhandled exception: {request.method} {request.url.path} - "
            f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status_code,
            content=error_body(error_code, message, str(request.url.path), request.method),
        )
