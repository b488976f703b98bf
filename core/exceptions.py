"""
Service error hierarchy and HTTP mapping

Services raise these errors; the application maps them to status codes in
one place. Each service subclasses them in its own protocols module.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class ServiceError(Exception):
    """Base exception for service errors"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """Referenced entity does not exist"""
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(ServiceError):
    """Request is well-formed but violates a business rule"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidStateError(ServiceError):
    """Operation not allowed in the entity's current status"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status


class PermissionDeniedError(ServiceError):
    """Caller is authenticated but may not touch this entity"""
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    """Unique constraint would be violated"""
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(ServiceError):
    """Missing or invalid credentials"""
    status_code = status.HTTP_401_UNAUTHORIZED


def error_body(status_code: int, message, path: str) -> dict:
    return {
        "success": False,
        "statusCode": status_code,
        "message": message,
        "path": path,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _validation_messages(exc: RequestValidationError) -> list:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error-to-HTTP mapping on an application"""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(f"Unhandled service error on {request.url.path}: {exc.message}")
            message = GENERIC_ERROR_MESSAGE
        else:
            message = exc.message
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, message, request.url.path),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(status.HTTP_400_BAD_REQUEST, _validation_messages(exc), request.url.path),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.detail, request.url.path),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE, request.url.path),
        )
