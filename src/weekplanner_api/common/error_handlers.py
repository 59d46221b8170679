"""
Common error handling utilities
"""

import logging
from uuid import UUID

from fastapi import status
from sqlmodel import Session

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for service-layer errors"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ResourceNotFoundError(ServiceError):
    """Raised when a requested resource is not found"""

    def __init__(self, resource_type: str, resource_id: str | UUID):
        message = f"{resource_type} with ID {resource_id} not found"
        super().__init__(message, "RESOURCE_NOT_FOUND")


class ValidationError(ServiceError):
    """Raised when validation fails"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, "VALIDATION_ERROR")


class StorageError(ServiceError):
    """Raised when a read or write against the database fails"""

    def __init__(self, message: str):
        super().__init__(message, "STORAGE_ERROR")


class SchedulerBusyError(ServiceError):
    """Raised when another auto-schedule run holds the calendar too long"""

    def __init__(self, waited_seconds: float):
        message = (
            f"Another auto-schedule run is still in progress after {waited_seconds:g}s"
        )
        super().__init__(message, "SCHEDULER_BUSY")


_STATUS_BY_ERROR: dict[type[ServiceError], int] = {
    ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: 422,
    SchedulerBusyError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for_error(error: ServiceError) -> int:
    """HTTP status code a service error maps to"""
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def safe_execute(session: Session, operation):
    """Safely execute database operations with error handling"""
    try:
        result = operation()
        session.commit()
        return result
    except ServiceError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()

        logger.error(f"Database operation failed: {e}")

        if "constraint" in str(e).lower():
            raise ValidationError("Database constraint violation") from e
        raise StorageError(f"Database operation failed: {str(e)}") from e


def validate_uuid(value: str | UUID, name: str) -> UUID:
    """Validate UUID format"""
    if isinstance(value, UUID):
        return value

    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid UUID format for {name}: {value}") from None
