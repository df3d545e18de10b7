"""
Exception handlers for the FastAPI application.

Every error leaves the API in the same shape: timestamp, numeric status, short
error category, human message, request path and an optional list of per-field
validation errors.
"""

import logging
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic_scheduler.clock import utcnow
from clinic_scheduler.exceptions import ClinicError, ValidationError
from clinic_scheduler.schemas.error import ErrorResponse, FieldError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = ("body", "query", "path", "header")


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    validation_errors: Optional[list[dict]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        timestamp=utcnow(),
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
        validation_errors=[FieldError(**e) for e in validation_errors] if validation_errors else None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


async def clinic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render NotFound/Business/Validation/Authentication/Authorization errors."""
    if not isinstance(exc, ClinicError):
        return await global_exception_handler(request, exc)

    logger.warning("%s on %s %s: %s", exc.error, request.method, request.url.path, exc.message)
    errors = exc.errors if isinstance(exc, ValidationError) else None
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(request, exc.status_code, exc.error, exc.message, errors, headers)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException (unknown routes, wrong methods) with the common shape."""
    if not isinstance(exc, StarletteHTTPException):
        return await global_exception_handler(request, exc)
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    return error_response(request, exc.status_code, phrase, str(exc.detail), headers=exc.headers)


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed or missing request data is a 400 with one entry per offending field."""
    if not isinstance(exc, RequestValidationError):
        return await global_exception_handler(request, exc)

    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        errors.append({"field": ".".join(loc) or "request", "message": error["msg"]})

    logger.warning("Validation error on %s: %s", request.url.path, errors)
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        ValidationError.error,
        "Invalid data in request",
        errors,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc!s}", exc_info=exc)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "Unexpected server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicError, clinic_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
