# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers mapping errors to API responses.

Every error response has the shape {"status": false, "message": ...}.
Unexpected exceptions are logged with their traceback and answered with a
generic 500 that never echoes the exception.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from academia.api.middleware.rate_limit import rate_limit_exceeded_handler
from academia.core.exceptions import AcademiaError, TenantConnectionError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build an error response."""
    return JSONResponse(status_code=status_code, content={"status": False, "message": message})


async def academia_error_handler(request: Request, exc: AcademiaError) -> JSONResponse:
    """Answer a domain error with its own status and message."""
    if isinstance(exc, TenantConnectionError):
        logger.error("Tenant %s unavailable: %s", exc.tenant_code, exc.reason)
    elif exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer a malformed body or query string with 400."""
    logger.debug("Invalid request to %s: %s", request.url.path, exc.errors())
    return error_response(400, "Invalid request")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer any other exception with a generic 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application.

    Args:
        app: FastAPI application.
    """
    app.add_exception_handler(AcademiaError, academia_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
