"""Application error types and their JSON envelope.

Every error leaving the API is rendered as::

    {"success": false, "error": {"message": ..., "errors": [...], "stack": "..."}}

``errors`` is present only for validation failures and ``stack`` only when
running in development mode.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status and optional field errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


def error_body(
    message: str,
    errors: list[dict[str, Any]] | None = None,
    exc: BaseException | None = None,
) -> dict[str, Any]:
    """Build the ``{success: false, error: {...}}`` envelope."""
    error: dict[str, Any] = {"message": message}
    if errors:
        error["errors"] = errors
    if exc is not None and settings.is_development:
        error["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return {"success": False, "error": error}


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    field_errors: list[dict[str, Any]] = []
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix from the location
        loc = [str(part) for part in err.get("loc", ())][1:]
        field_errors.append(
            {
                "field": ".".join(loc) or None,
                "message": err.get("msg", "Invalid value"),
            }
        )
    return field_errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_failed",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_message": exc.message,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.errors, exc),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    field_errors = _field_errors(exc)
    logger.warning(
        "request_validation_failed",
        extra={
            "method": request.method,
            "path": request.url.path,
            "errors": field_errors,
        },
    )
    return JSONResponse(
        status_code=400,
        content=error_body("Validation error", field_errors),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Cannot find {request.url.path} on this server!"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=exc.headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=500,
        content=error_body("Something went wrong", exc=exc),
    )


def register_error_handlers(application: FastAPI) -> None:
    """Install the envelope-producing exception handlers on *application*."""
    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)
