"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger("shuttle.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InvalidCapacityError(AppException):
    """Raised when a trip capacity is not a positive number of seats."""

    def __init__(self, capacity: Any):
        super().__init__(
            message=f"Capacity must be a positive integer, got {capacity!r}",
            error_code="ERR_CAPACITY_001",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"capacity": capacity}
        )


class InvalidBookingError(AppException):
    """Raised when a booking cannot take part in consolidation."""

    def __init__(self, message: str, booking_id: Any = None, field: str = None):
        super().__init__(
            message=message,
            error_code="ERR_BOOKING_001",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"booking_id": booking_id, "field": field}
        )


class InvalidStatusTransitionError(AppException):
    """Raised when a dispatcher action does not fit the booking lifecycle."""

    def __init__(self, booking_id: str, current: str, requested: str):
        super().__init__(
            message=f"Cannot move booking {booking_id} from {current} to {requested}",
            error_code="ERR_BOOKING_002",
            status_code=status.HTTP_409_CONFLICT,
            details={"booking_id": booking_id, "current": current, "requested": requested}
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

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


class AssignmentIncompleteError(AppException):
    """Raised when passengers are notified before a vehicle and driver are set."""

    def __init__(self, trip_key: str):
        super().__init__(
            message="Assign both a vehicle and a driver before notifying passengers",
            error_code="ERR_DISPATCH_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"trip": trip_key}
        )


class AssignmentLockedError(AppException):
    """Raised when a trip was already notified (or is being notified)."""

    def __init__(self, trip_key: str, reason: str = "Passengers of this trip were already notified"):
        super().__init__(
            message=reason,
            error_code="ERR_DISPATCH_002",
            status_code=status.HTTP_409_CONFLICT,
            details={"trip": trip_key}
        )


class EmptyTripError(AppException):
    """Raised when a trip has no accepted seats to notify."""

    def __init__(self, trip_key: str):
        super().__init__(
            message="Trip has no accepted passengers",
            error_code="ERR_DISPATCH_003",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"trip": trip_key}
        )


class VehicleNotEligibleError(AppException):
    """Raised when a vehicle cannot run a shuttle trip."""

    def __init__(self, vehicle_id: int, reason: str):
        super().__init__(
            message=f"Vehicle {vehicle_id} cannot be assigned: {reason}",
            error_code="ERR_DISPATCH_004",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"vehicle_id": vehicle_id}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    logger.info("%s on %s: %s", exc.error_code, request.url.path, exc.message)
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
    error_code_map = {
        400: "ERR_BAD_REQUEST",
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
        }
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
    # ctx may carry the raw ValueError raised inside a validator
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s: %s", type(exc).__name__, exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
