"""
Common utilities module
"""

from weekplanner_api.common.error_handlers import (
    ResourceNotFoundError,
    SchedulerBusyError,
    ServiceError,
    StorageError,
    ValidationError,
    safe_execute,
    status_for_error,
    validate_uuid,
)

__all__ = [
    "ServiceError",
    "ResourceNotFoundError",
    "ValidationError",
    "StorageError",
    "SchedulerBusyError",
    "safe_execute",
    "status_for_error",
    "validate_uuid",
]
