# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for authentication:
- POST /signup - Register a school and its head
- POST /login - Log in as any role
- GET /verify - Return the current session's principal
- POST /logout - Clear the session cookies

Login and signup take the school code from the code header. The session is
carried by two httpOnly cookies, token and role, which must be sent
together.

Example:
    POST /api/login
    Headers:
        code: XYZ123
    Body:
        {"email": "h@x.com", "password": "p1", "role": "Head"}
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response, status

from academia.api.dependencies import AnyPrincipal, get_auth_gate, get_tenant_registry
from academia.api.middleware.auth import ROLE_COOKIE, TOKEN_COOKIE
from academia.core.config import get_settings
from academia.core.exceptions import AcademiaError
from academia.domains.auth.gate import AuthGate
from academia.domains.school.service import SchoolService
from academia.infrastructure.database.tenant_registry import TenantConnectionRegistry
from academia.models.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    VerifyResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _cookie_options() -> dict:
    """Cookie attributes shared by setting and clearing."""
    settings = get_settings()
    return {
        "path": settings.cookie.path,
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "lax",
    }


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a school",
    description="Reserve a new school code and create the school head's account.",
)
async def signup(
    body: SignupRequest,
    registry: Annotated[TenantConnectionRegistry, Depends(get_tenant_registry)],
    gate: Annotated[AuthGate, Depends(get_auth_gate)],
    code: Annotated[str | None, Header()] = None,
) -> MessageResponse:
    """Register a school and its head."""
    service = SchoolService(registry, gate.hasher)
    await service.signup(code, body)
    return MessageResponse(message="User Created")


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Check credentials for any role and set the token and role cookies.",
)
async def login(
    body: LoginRequest,
    response: Response,
    gate: Annotated[AuthGate, Depends(get_auth_gate)],
    code: Annotated[str | None, Header()] = None,
) -> LoginResponse:
    """Log in and start a session."""
    result = await gate.login(code, body.email, body.password, body.role)

    max_age = get_settings().cookie.max_age_seconds
    options = _cookie_options()
    response.set_cookie(TOKEN_COOKIE, result.token, max_age=max_age, **options)
    response.set_cookie(ROLE_COOKIE, str(result.role), max_age=max_age, **options)

    return LoginResponse(token=result.token, role=str(result.role), data=result.profile)


@router.get(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify session",
    description="Return the profile of the principal owning the session cookies.",
)
async def verify(principal: AnyPrincipal) -> VerifyResponse:
    """Return the current principal."""
    return VerifyResponse(data=principal.profile)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookies."""
    try:
        options = _cookie_options()
        response.delete_cookie(TOKEN_COOKIE, **options)
        response.delete_cookie(ROLE_COOKIE, **options)
    except (TypeError, ValueError) as e:
        logger.error("Error clearing session cookies: %s", str(e))
        raise AcademiaError("Error logging out", status_code=401) from e

    return MessageResponse(message="Cookie Cleared")
