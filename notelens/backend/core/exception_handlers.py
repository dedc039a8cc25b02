"""
Exception Handlers.

Turn exceptions raised by routes and dependencies into the ErrorResponse
envelope. Registered once in create_app():

    register_exception_handlers(app)

ApplicationError subclasses map to a status through EXCEPTION_STATUS_MAP,
matched along the class hierarchy so a subclass inherits its parent's
status. Anything unmapped is a 500.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notelens.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ExternalServiceError,
    FeatureDisabledError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from notelens.backend.core.logging import get_logger
from notelens.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    FeatureDisabledError: 403,
    PayloadTooLargeError: 413,
    ExternalServiceError: 502,
}


def status_for(exc: ApplicationError) -> int:
    """HTTP status of the nearest mapped class in the exception's MRO."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return 500


def _get_request_id(request: Request) -> str | None:
    """Request id set by RequestContextMiddleware, else the raw header."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _error_response(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _request_context(request: Request, **fields: Any) -> dict[str, Any]:
    return {"path": request.url.path, "method": request.method, **fields}


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """Map an ApplicationError to its status; client errors log at warning, server errors at error."""
    status_code = status_for(exc)
    context = _request_context(request, code=exc.code, message=exc.message, status=status_code)

    if status_code >= 500:
        logger.error("Server error", extra=context)
    else:
        logger.warning("Client error", extra=context)

    details = getattr(exc, "details", None) or None
    return _error_response(
        request,
        status_code,
        ErrorDetail(code=exc.code, message=exc.message, details=details),
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Schema failures on request bodies, params and headers become 422 VAL_REQUEST_INVALID."""
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        extra=_request_context(request, error_count=len(errors)),
    )

    validation_errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", [])),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in errors
    ]
    return _error_response(
        request,
        422,
        ErrorDetail(
            code="VAL_REQUEST_INVALID",
            message="Request validation failed",
            details={"validation_errors": validation_errors},
        ),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Last resort. Logs the traceback; the response never includes exception text."""
    logger.exception(
        "Unhandled exception",
        extra=_request_context(request, exception_type=type(exc).__name__),
    )
    return _error_response(
        request,
        500,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the three handlers on `app`."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
