"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

ERROR_SEPARATOR = "、"


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.message = message
        self.errors = errors if errors is not None else [message]
        super().__init__(message)


class ValidationFailedException(AppException):
    """Raised when user input violates one or more rules."""

    status_code = 400
    code = "validation_error"

    def __init__(self, errors: list[str]) -> None:
        super().__init__(ERROR_SEPARATOR.join(errors), errors)


class AuthenticationRequiredException(AppException):
    """Raised when no valid session is present."""

    status_code = 401
    code = "unauthenticated"


class ForbiddenException(AppException):
    """Raised when the signed-in user may not perform the operation."""

    status_code = 403
    code = "forbidden"


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class RateLimitException(AppException):
    """Raised when client exceeds configured request rate."""

    status_code = 429
    code = "rate_limited"


class BackendException(AppException):
    """Raised when the hosted database or identity provider fails."""

    status_code = 500
    code = "backend_error"


def _error_response(status_code: int, code: str, message: str, errors: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "errors": errors, "code": code},
    )


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    return _error_response(exc.status_code, exc.code, exc.message, exc.errors)


async def request_validation_exception_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed request bodies as plain 400 validation errors."""
    errors = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
        errors.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return _error_response(400, ValidationFailedException.code, ERROR_SEPARATOR.join(errors), errors)


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    message = str(exc.detail)
    return _error_response(exc.status_code, "http_error", message, [message])


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    message = "サーバーエラーが発生しました。"
    return _error_response(500, "internal_error", message, [message])


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
