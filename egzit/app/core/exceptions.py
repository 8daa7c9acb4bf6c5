"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger("egzit.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found (or not visible to the caller)."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class InvalidTransitionError(AppException):
    """Raised when a lifecycle event is not legal from the move's current status."""

    def __init__(self, current_status: str, event: str):
        super().__init__(
            message=f"Cannot {event} a move that is {current_status}",
            error_code="ERR_MOVE_001",
            status_code=status.HTTP_409_CONFLICT,
            details={"current_status": current_status, "event": event}
        )


class MoveValidationError(AppException):
    """Raised when a transition guard or request input check fails."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_MOVE_002",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class StaleMoveError(AppException):
    """Raised when the caller acted on an outdated version of a move."""

    def __init__(self, move_id: Any, expected_version: Any = None, current_version: Any = None):
        super().__init__(
            message=f"Move {move_id} was modified by someone else. Reload and retry.",
            error_code="ERR_MOVE_003",
            status_code=status.HTTP_409_CONFLICT,
            details={
                "move_id": move_id,
                "expected_version": expected_version,
                "current_version": current_version
            }
        )


class TransientBackendError(AppException):
    """Raised when the record store rejects a write. The transition was not applied."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Could not {operation}. Please try again.",
            error_code="ERR_BACKEND_001",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"operation": operation, "retryable": True}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_errors(exc)
            }
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip non-serializable context (e.g. exception objects) from pydantic errors."""
    errors = []
    for error in exc.errors():
        cleaned = {k: v for k, v in error.items() if k != "ctx"}
        if "ctx" in error:
            cleaned["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(cleaned)
    return errors


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception: %s",
        type(exc).__name__,
        extra={"path": request.url.path, "method": request.method}
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
