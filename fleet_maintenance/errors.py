"""
Centralized Error Handling for the Fleet Maintenance Engine

- Engine exception hierarchy with category and HTTP status code
- Standardized error response format
- FastAPI exception handlers

The engine performs no retries of its own; storage errors reach the caller
unmodified and are only translated to a response at the HTTP edge.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# Error Categories
# =============================================================================


class ErrorCategory(str, Enum):
    """Categories for error classification"""

    DATABASE = "database"
    VALIDATION = "validation"
    INTERNAL = "internal"
    NOT_FOUND = "not_found"


# =============================================================================
# Custom Exceptions
# =============================================================================


class FleetEngineError(Exception):
    """Base exception for the fleet maintenance engine"""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = utc_now().isoformat()


class DatabaseError(FleetEngineError):
    """Database-related errors"""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.DATABASE,
            status_code=503,
            details=details,
        )


class ValidationError(FleetEngineError):
    """Input or record validation errors"""

    def __init__(self, message: str, field: str = None, details: Optional[Dict] = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            status_code=400,
            details=details,
        )


class NotFoundError(FleetEngineError):
    """Resource not found errors"""

    def __init__(self, resource: str, resource_id: str = None):
        details = {"resource": resource}
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(
            message=f"{resource} not found",
            category=ErrorCategory.NOT_FOUND,
            status_code=404,
            details=details,
        )


class TruckNotFoundError(NotFoundError):
    """Raised when a truck id has no record in storage"""

    def __init__(self, truck_id: str):
        super().__init__("Truck", truck_id)
        self.truck_id = truck_id


# =============================================================================
# Error Response Builder
# =============================================================================


def build_error_response(error: Exception) -> Dict[str, Any]:
    """
    Build a standardized error response.

    Args:
        error: The exception to format

    Returns:
        Dict with error details
    """
    if isinstance(error, FleetEngineError):
        response = {
            "error": True,
            "category": error.category.value,
            "message": error.message,
            "status_code": error.status_code,
            "timestamp": error.timestamp,
            "details": error.details,
        }
    else:
        response = {
            "error": True,
            "category": ErrorCategory.INTERNAL.value,
            "message": str(error) or "An unexpected error occurred",
            "status_code": 500,
            "timestamp": utc_now().isoformat(),
            "details": {},
        }

    return response


# =============================================================================
# Exception Handlers for FastAPI
# =============================================================================


async def fleet_engine_exception_handler(
    request: Request, exc: FleetEngineError
) -> JSONResponse:
    """Handle FleetEngineError exceptions"""
    logger.error(
        f"[{exc.category.value}] {exc.message}",
        extra={
            "status_code": exc.status_code,
            "details": exc.details,
            "path": request.url.path,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_response(exc),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.exception(f"Unexpected error: {exc}", extra={"path": request.url.path})
    return JSONResponse(
        status_code=500,
        content=build_error_response(exc),
    )


async def database_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate driver errors (pymysql.MySQLError) into a 503 DatabaseError response"""
    error = DatabaseError(
        "Storage backend unavailable",
        details={"reason": str(exc), "type": type(exc).__name__},
    )
    logger.error(f"[{error.category.value}] {exc}", extra={"path": request.url.path})
    return JSONResponse(
        status_code=error.status_code,
        content=build_error_response(error),
    )
