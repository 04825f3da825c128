"""
Error taxonomy shared by services and controllers.

Services raise these; the handlers registered in ``homesphere.main`` turn them
into JSON bodies that always carry a ``message`` field.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, OperationalError, InterfaceError
from starlette.exceptions import HTTPException as StarletteHTTPException

from homesphere.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error occurred. Please try again later."

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        details: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors or []
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        if self.details and not settings.is_production:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication credentials"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class StorageError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database service unavailable. Please try again later."


class ConfigError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server configuration error. Please contact administrator."


class EmailDeliveryError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Unable to send email right now. Please try again later."


def field_error(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message} ({exc.details})")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/path validation failures use the same 400 shape as query-parameter failures"""
    errors = []
    for error in exc.errors():
        # Drop the leading "body"/"query" location segment
        location = [str(part) for part in error.get("loc", ())[1:]]
        errors.append(field_error(".".join(location) or "request", error.get("msg", "Invalid value")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "errors": errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Last line of defence for storage failures not already wrapped by a service"""
    logger.exception(f"Database error on {request.method} {request.url.path}")
    if isinstance(exc, (OperationalError, InterfaceError)):
        error = StorageError(details=str(exc))
    else:
        error = StorageError(
            "Server error occurred while accessing the database.",
            details=str(exc),
        )
        error.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything not mapped above still answers with a message body"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = AppError("Internal server error", details=f"{type(exc).__name__}: {exc}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.to_dict())
