"""Application errors and their mapping to JSON envelope responses.

Every failure leaves the service through :func:`error_response`, so clients
always receive ``{"success": false, "message": ..., "data": null, "errors": ...}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from postfeed.config import get_settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.headers = headers


class ValidationError(AppError):
    """Request input failed one or more constraints."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[dict[str, Any]], message: str = "Validation failed"):
        super().__init__(message, errors=errors)

    @classmethod
    def from_pydantic(
        cls, exc: PydanticValidationError | RequestValidationError
    ) -> "ValidationError":
        """Build from pydantic/FastAPI errors, one entry per failing field."""
        return cls(errors=[_field_error(err) for err in exc.errors()])


class ConflictError(AppError):
    """Resource already exists."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    """Credentials or bearer token rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    """Caller is authenticated but may not act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class UploadError(AppError):
    """Uploaded file rejected for size or type."""

    status_code = status.HTTP_400_BAD_REQUEST


def _field_error(err: dict[str, Any]) -> dict[str, Any]:
    # loc looks like ("body", "email"), ("query", "page") or () for model-level checks
    names = [part for part in err.get("loc", ()) if isinstance(part, str)]
    names = [part for part in names if part not in ("body", "query", "form", "path", "header")]
    message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
    return {"field": names[-1] if names else None, "message": message}


def error_response(
    status_code: int,
    message: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "data": None, "errors": errors},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{exc.status_code} {exc.message} - {request.method} {request.url.path}")
    return error_response(exc.status_code, exc.message, exc.errors, exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError.from_pydantic(exc)
    logger.warning(f"Validation failed - {request.method} {request.url.path}: {error.errors}")
    return error_response(error.status_code, error.message, error.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(f"{exc.status_code} {exc.detail} - {request.method} {request.url.path}")
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded - {request.client.host if request.client else '-'}")
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS, f"Rate limit exceeded: {exc.detail}"
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"500 - {exc} - {request.method} {request.url.path}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    message = "Internal server error"
    if not get_settings().is_production:
        message = str(exc) or message
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the failure-to-envelope mapping on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
