"""Application exceptions and their FastAPI handlers.

Every error leaves the service as an :class:`ErrorResponse` body. Route
handlers raise :class:`AppException` subclasses, which fix the HTTP status
and error code at class level; framework errors are translated by the
handlers registered in :func:`setup_exception_handlers`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from fastapi import Request


logger = get_logger(__name__)


class ErrorDetail(BaseModel):
    """One field-level problem in a rejected request."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = None


class AppException(Exception):
    """Base for errors that map onto an HTTP response."""

    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: ClassVar[str] = "INTERNAL_SERVER_ERROR"
    default_message: ClassVar[str] = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: list[ErrorDetail] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        self.headers = headers
        super().__init__(self.message)


class NotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any) -> None:
        self.resource = resource
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class CatalogEmptyException(AppException):
    """No recipes have been ingested yet."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "NOT_FOUND"
    default_message = "The recipe catalog is empty"


class InvalidInputException(AppException):
    """A request that parsed but breaks a business rule (e.g. password policy)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "VALIDATION_ERROR"


class UnauthorizedException(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "UNAUTHORIZED"
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenException(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    error = "FORBIDDEN"
    default_message = "Not allowed to modify another user"


class ConflictException(AppException):
    status_code = status.HTTP_409_CONFLICT
    error = "CONFLICT"


class ServiceUnavailableException(AppException):
    """The database is not reachable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "SERVICE_UNAVAILABLE"
    default_message = "Service temporarily unavailable"


def validation_details(errors: Sequence[dict[str, Any]]) -> list[ErrorDetail]:
    """Flatten pydantic errors into details keyed by dotted location."""
    return [
        ErrorDetail(
            code="VALIDATION_ERROR",
            message=error["msg"],
            field=".".join(str(part) for part in error["loc"]),
        )
        for error in errors
    ]


def _render(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    *,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> ORJSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        details=details,
        request_id=getattr(request.state, "request_id", None),
    )
    return ORJSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
        return _render(
            request,
            exc.status_code,
            exc.error,
            exc.message,
            details=exc.details,
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        return _render(
            request,
            exc.status_code,
            "HTTP_ERROR",
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        return _render(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            details=validation_details(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.opt(exception=exc).error("Unhandled exception", path=request.url.path)
        return _render(
            request,
            AppException.status_code,
            AppException.error,
            AppException.default_message,
        )
