"""Error types and the handlers that render them.

Every failure leaves the API in the same envelope as ``ApiResponse``:
``{"success": false, "error": {"code", "message", "details"}}``.
"""

import enum
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from helpdesk.core.constants import COMMENT_MAX_LENGTH, COMMENT_MIN_LENGTH
from helpdesk.core.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Request errors reported verbatim to the caller."""

    INVALID_CONTENT = "INVALID_CONTENT"
    INVALID_TICKET = "INVALID_TICKET"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_FILE = "INVALID_FILE"
    NO_PERMISSION = "NO_PERMISSION"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_CONTENT: (
        f"Content must be between {COMMENT_MIN_LENGTH} and {COMMENT_MAX_LENGTH} characters"
    ),
    ErrorKind.INVALID_TICKET: "Invalid ticket",
    ErrorKind.INVALID_TOKEN: "Invalid token",
    ErrorKind.INVALID_FILE: "Invalid file",
    ErrorKind.NO_PERMISSION: "You have no permission to perform this action",
}


class AppError(Exception):
    """Base class for errors rendered by ``app_exception_handler``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RequestError(AppError):
    """Terminal, user-visible request failure carrying one ErrorKind."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, kind: ErrorKind, field: str | None = None):
        self.kind = kind
        self.error_code = kind.value
        super().__init__(ERROR_MESSAGES[kind], {"field": field} if field else None)


class ConflictError(AppError):
    """The resource changed underneath the request and retrying did not help."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"

    def __init__(self, message: str = "Resource conflict", resource: str | None = None):
        super().__init__(message, {"resource": resource} if resource else None)


def error_response(
    status_code: int, code: str, message: str, details: dict[str, Any] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or None))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level,
        "%s %s failed: %s (code=%s, status=%d)",
        request.method,
        request.url.path,
        exc.message,
        exc.error_code,
        exc.status_code,
        extra={"details": exc.details},
    )
    return error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()]
    logger.info("Rejected malformed %s body: %s", request.url.path, fields)
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "INVALID_REQUEST",
        "Malformed request",
        {"fields": fields},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "An unexpected error occurred"
    )


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Register exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
        debug: If True, unhandled exceptions propagate with stack traces.
    """
    app.add_exception_handler(AppError, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_exception_handler  # type: ignore[arg-type]
    )
    if not debug:
        app.add_exception_handler(Exception, unhandled_exception_handler)
