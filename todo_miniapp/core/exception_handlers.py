"""
Exception Handlers.

FastAPI exception handlers that convert application exceptions to the
standard ``{success: false, error, code}`` response. All exceptions are
logged; for server errors the client only ever sees a generic message.

Usage:
    from todo_miniapp.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_miniapp.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from todo_miniapp.core.logging import get_logger
from todo_miniapp.schemas.base import ErrorResponse

logger = get_logger(__name__)

# Map exception types to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    InternalError: 500,
    DatabaseError: 500,
}

GENERIC_SERVER_ERROR = "Internal server error"


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle all ApplicationError subclasses.

    Converts application exceptions to JSON responses with the
    HTTP status from EXCEPTION_STATUS_MAP (500 for anything unmapped).
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    request_id = _get_request_id(request)

    log_extra = {
        "code": exc.code,
        "message": exc.message,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if request_id:
        log_extra["request_id"] = request_id

    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
        message = GENERIC_SERVER_ERROR
    else:
        logger.warning("Client error", extra=log_extra)
        message = exc.message

    response = ErrorResponse(error=message, code=exc.code, request_id=request_id)
    if isinstance(exc, ValidationError) and exc.details:
        response.details = exc.details

    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", exclude_none=True),
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle FastAPI/Pydantic request validation errors.

    Malformed bodies and query parameters are client errors and
    are reported as 400 with per-field details.
    """
    request_id = _get_request_id(request)

    errors = exc.errors()
    details = {
        "validation_errors": [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Validation error"),
                "type": err.get("type", "unknown"),
            }
            for err in errors
        ]
    }

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "request_id": request_id,
        },
    )

    response = ErrorResponse(
        error="Request validation failed",
        code="VAL_REQUEST_INVALID",
        details=details,
        request_id=request_id,
    )

    return JSONResponse(
        status_code=400,
        content=response.model_dump(mode="json", exclude_none=True),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    The full exception is logged; the client gets a generic 500.
    """
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": request_id,
        },
    )

    response = ErrorResponse(
        error="An unexpected error occurred",
        code="SYS_INTERNAL_ERROR",
        request_id=request_id,
    )

    return JSONResponse(
        status_code=500,
        content=response.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
