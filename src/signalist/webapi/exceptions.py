"""Maps exceptions to the Signalist JSON error envelope."""

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..config.logging import get_logger
from ..exceptions import SignalistException
from .models.responses import ErrorResponse

logger = get_logger(__name__)


def _request_id(request: Request, fallback: Optional[str] = None) -> Optional[str]:
    return getattr(request.state, "request_id", None) or fallback


def _error_response(
    request_id: Optional[str],
    status_code: int,
    error_type: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    error: Dict[str, Any] = {"type": error_type, "message": message, "status_code": status_code}
    if details is not None:
        error["details"] = details

    body = ErrorResponse(success=False, error=error, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def signalist_exception_handler(request: Request, exc: SignalistException) -> JSONResponse:
    """Domain errors carry their own status code; only 5xx are logged as errors."""
    request_id = _request_id(request, exc.request_id)

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=request_id,
        path=request.url.path,
    )

    return _error_response(
        request_id, exc.status_code, type(exc).__name__, exc.message, exc.details
    )


async def validation_exception_handler(request: Request, exc) -> JSONResponse:
    """Request bodies, path parameters and model construction that fail validation."""
    request_id = _request_id(request)
    field_errors = {
        ".".join(str(part) for part in error["loc"]): error["msg"] for error in exc.errors()
    }

    logger.warning(
        "Request validation failed",
        field_errors=field_errors,
        request_id=request_id,
        path=request.url.path,
    )

    return _error_response(
        request_id,
        422,
        "ValidationError",
        "Request validation failed",
        {"field_errors": field_errors},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    request_id = _request_id(request)

    logger.warning(
        "HTTP error",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=request_id,
        path=request.url.path,
    )

    return _error_response(
        request_id,
        exc.status_code,
        "HTTPException",
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)

    logger.error(
        "Unhandled exception",
        exception_type=type(exc).__name__,
        request_id=request_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )

    # Internal details stay in the log
    return _error_response(request_id, 500, "InternalServerError", "An unexpected error occurred")


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI app."""
    app.add_exception_handler(SignalistException, signalist_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
