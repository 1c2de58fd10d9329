"""Error taxonomy and the JSON/redirect handlers registered on the app."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("quizportal.errors")


class PortalError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailure(PortalError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateKey(PortalError):
    status_code = 400
    default_message = "User already exists"


class Unauthenticated(PortalError):
    status_code = 401
    default_message = "Not authenticated"

    def __init__(self, message: Optional[str] = None, redirect_to: Optional[str] = None):
        super().__init__(message)
        self.redirect_to = redirect_to


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class Unavailable(PortalError):
    status_code = 500
    default_message = "Server error"


def _json_safe(value):
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_json_safe(v) for v in value]
    return str(value)


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"error": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def portal_error_handler(request: Request, exc: PortalError):
    if isinstance(exc, Unauthenticated) and exc.redirect_to:
        return RedirectResponse(url=exc.redirect_to, status_code=302)
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with detail so malformed submissions can be diagnosed."""
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return error_response(
        400,
        ValidationFailure.default_message,
        detail=_json_safe(exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, detail)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, Unavailable.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
