import logging

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from weekplanner_api.common.error_handlers import (
    SchedulerBusyError,
    ServiceError,
    ValidationError,
    status_for_error,
)
from weekplanner_api.models import ErrorResponse

logger = logging.getLogger(__name__)


def _error_json(
    status_code: int, code: str, message: str, details: dict | None = None
) -> JSONResponse:
    body = ErrorResponse.create(code=code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    return _error_json(
        exc.status_code,
        "HTTP_ERROR",
        str(exc.detail),
        {"path": request.url.path},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    return _error_json(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": errors, "path": request.url.path},
    )


async def service_exception_handler(request: Request, exc: ServiceError):
    """Handle service-layer exceptions"""
    status_code = status_for_error(exc)
    details: dict = {"path": request.url.path}
    if isinstance(exc, ValidationError) and exc.field:
        details["field"] = exc.field

    if status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
    elif isinstance(exc, SchedulerBusyError):
        logger.warning(f"⚠️ {exc.message}")

    return _error_json(
        status_code, exc.error_code or "SERVICE_ERROR", exc.message, details
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Internal server error",
        {"path": request.url.path},
    )
