"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses with a uniform body:
{"error": code, "kind": kind, "message": text, "details": {...}}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from projectgrid.core.config import get_settings
from projectgrid.domain.exceptions import ErrorKind, ProjectGridException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; unmapped codes fall back to 400.
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "PASSWORDS_DO_NOT_MATCH": 400,
    "REGISTRATION_DENIED": 400,
    "DUPLICATE_EMAIL": 400,
    "RESET_ALREADY_IN_PROGRESS": 400,
    "ALREADY_VERIFIED": 400,
    "INVALID_CREDENTIALS": 400,
    "EMAIL_NOT_VERIFIED": 400,
    "UNKNOWN_EMAIL": 400,
    "OTP_NOT_REQUESTED": 400,
    "OTP_EXPIRED": 400,
    "INVALID_OTP": 400,
    "AUTHENTICATION_ERROR": 401,
    "INVALID_OR_EXPIRED_TOKEN": 401,
    "TOKEN_EXPIRED": 401,
    "PERMISSION_DENIED": 403,
    "INVALID_CURRENT_PASSWORD": 403,
    "USER_NOT_FOUND": 404,
    "RESOURCE_NOT_FOUND": 404,
    "DELIVERY_FAILED": 500,
    "SERVICE_UNAVAILABLE": 503,
}

_STATUS_KIND: dict[int, str] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTH,
    403: ErrorKind.AUTH,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.VALIDATION,
}


def status_for(exc: ProjectGridException) -> int:
    """HTTP status for a domain exception."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _projectgrid_exception_handler(
    request: Request, exc: ProjectGridException
) -> JSONResponse:
    """Return JSON from ProjectGridException.to_dict() with appropriate status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with validation error details."""
    errors = jsonable_encoder(exc.errors())
    first = errors[0].get("msg") if errors else None
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "kind": ErrorKind.VALIDATION,
            "message": first or "Request validation failed",
            "details": {"errors": errors},
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    kind = _STATUS_KIND.get(
        exc.status_code,
        ErrorKind.INTERNAL if exc.status_code >= 500 else ErrorKind.VALIDATION,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "HTTP_ERROR",
            "kind": kind,
            "message": exc.detail,
            "details": {},
        },
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "kind": ErrorKind.INTERNAL,
            "message": detail,
            "details": {},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: ProjectGridException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(ProjectGridException, _projectgrid_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
