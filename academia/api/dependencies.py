# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the tenant connection registry and auth gate from application state
- Require an authenticated principal, optionally with given roles
- Get the tenant database of the authenticated principal

The tenant database always comes from the principal's school code, never
from anything else the caller sends.

Example:
    @router.get("/classes")
    async def list_classes(
        principal: Principal = Depends(require_roles(Role.HEAD, Role.TEACHER)),
        db: AsyncDatabase = Depends(get_tenant_db),
    ):
        ...
"""

import logging
from typing import Annotated, Callable

from fastapi import Depends, Request
from pymongo.asynchronous.database import AsyncDatabase

from academia.api.middleware.auth import get_principal
from academia.core.exceptions import ForbiddenError, MissingCredentialError
from academia.domains.auth.gate import AuthGate
from academia.domains.auth.password import PasswordHasher
from academia.domains.auth.roles import Principal, Role
from academia.infrastructure.database.tenant_registry import TenantConnectionRegistry

logger = logging.getLogger(__name__)


def get_tenant_registry(request: Request) -> TenantConnectionRegistry:
    """Get the tenant connection registry built at startup."""
    return request.app.state.tenant_registry


def get_auth_gate(request: Request) -> AuthGate:
    """Get the auth gate built at startup."""
    return request.app.state.auth_gate


def get_password_hasher(gate: Annotated[AuthGate, Depends(get_auth_gate)]) -> PasswordHasher:
    """Get the password hasher shared by every role."""
    return gate.hasher


def require_principal(request: Request) -> Principal:
    """Get the authenticated principal, raising if there is none.

    Args:
        request: HTTP request processed by AuthMiddleware.

    Returns:
        The authenticated Principal.

    Raises:
        AcademiaError: The rejection recorded by AuthMiddleware, or
            MissingCredentialError if no session was presented.
    """
    principal = get_principal(request)
    if principal is not None:
        return principal

    error = getattr(request.state, "auth_error", None)
    if error is not None:
        raise error
    raise MissingCredentialError("Token is missing")


def require_roles(*roles: Role) -> Callable[[Principal], Principal]:
    """Build a dependency that admits only the given roles.

    Args:
        *roles: Roles allowed to use the endpoint.

    Returns:
        Dependency returning the Principal.
    """
    allowed = frozenset(roles)

    def dependency(principal: Annotated[Principal, Depends(require_principal)]) -> Principal:
        if principal.role not in allowed:
            logger.info("Denied %s access to a %s endpoint", principal.role, "/".join(map(str, roles)))
            raise ForbiddenError("Access denied")
        return principal

    return dependency


async def get_tenant_db(
    principal: Annotated[Principal, Depends(require_principal)],
    registry: Annotated[TenantConnectionRegistry, Depends(get_tenant_registry)],
) -> AsyncDatabase:
    """Get the database of the principal's school.

    Raises:
        TenantConnectionError: If the database is unreachable.
    """
    return await registry.resolve(principal.school_code)


# Role groups
STAFF = (Role.HEAD, Role.MANAGEMENT)
EDUCATORS = (Role.HEAD, Role.MANAGEMENT, Role.TEACHER)

# Annotated shortcuts
TenantDB = Annotated[AsyncDatabase, Depends(get_tenant_db)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
HeadOnly = Annotated[Principal, Depends(require_roles(Role.HEAD))]
StaffOnly = Annotated[Principal, Depends(require_roles(*STAFF))]
EducatorsOnly = Annotated[Principal, Depends(require_roles(*EDUCATORS))]
AnyPrincipal = Annotated[Principal, Depends(require_principal)]
