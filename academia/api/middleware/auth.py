# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session cookie authentication middleware.

This middleware runs the auth gate's verification on the token and role
cookies and populates request.state with the outcome. It never rejects a
request itself: route dependencies decide whether a principal is required
and turn a stored rejection into the error response.

Example:
    # Request with session cookies set by /api/login
    GET /api/classes
    Cookie: token=eyJhbGciOiJIUzI1NiIs...; role=Head
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from academia.core.exceptions import AcademiaError
from academia.domains.auth.roles import Principal
from academia.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"
ROLE_COOKIE = "role"

# Paths that don't require authentication
PUBLIC_PATHS = frozenset({
    "/",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/api/login",
    "/api/signup",
    "/api/logout",
})


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware for session cookie authentication.

    Sets request.state.principal to the verified Principal, or to None with
    the rejection stored in request.state.auth_error. Public paths and CORS
    preflight requests are skipped.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request and verify the session.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response.
        """
        clear_context()
        request.state.principal = None
        request.state.auth_error = None

        if request.method == "OPTIONS" or request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        gate = request.app.state.auth_gate
        try:
            principal = await gate.verify(
                request.cookies.get(TOKEN_COOKIE),
                request.cookies.get(ROLE_COOKIE),
            )
            request.state.principal = principal
            bind_context(role=str(principal.role), school_code=principal.school_code)
            logger.debug("Authenticated %s %s", principal.role, principal.id)

        except AcademiaError as e:
            logger.debug("Session rejected: %s", e.message)
            request.state.auth_error = e

        except Exception:
            logger.exception("Auth middleware error")
            request.state.auth_error = AcademiaError("Internal Error -> Verify User")

        return await call_next(request)


def get_principal(request: Request) -> Principal | None:
    """Get the authenticated principal from request state.

    Args:
        request: HTTP request with state.

    Returns:
        Principal or None if the request is not authenticated.
    """
    return getattr(request.state, "principal", None)
