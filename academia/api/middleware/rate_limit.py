# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Every endpoint gets the default per-client limit through SlowAPIMiddleware.
Authenticated callers are limited per school and principal, anonymous
callers per IP address.

Example:
    # Tighter limit on a single endpoint
    @limiter.limit("5/minute")
    async def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from academia.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses the principal if authenticated, otherwise the IP address.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return f"tenant:{principal.school_code}:user:{principal.id}"
    return f"ip:{get_remote_address(request)}"


settings = get_settings()
limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.rate_limit.requests_per_minute}/minute"],
    storage_uri="memory://",
)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> JSONResponse:
    """Handle rate limit exceeded errors.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        429 response in the API's error shape.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    return JSONResponse(
        status_code=429,
        content={"status": False, "message": "Too many requests. Please try again later."},
        headers={"Retry-After": "60"},
    )
