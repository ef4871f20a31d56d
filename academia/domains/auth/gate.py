# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Auth gate: login and session verification.

The gate binds every authenticated request to exactly one role and one
tenant database. Login checks credentials against the role's collection in
the tenant database and issues a role-signed session token. Verification
checks the token against the role's secret and produces a Principal.

Student sessions are special: the token deliberately omits performance data,
so verification re-reads the student's current record from the tenant
database named in the token.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from academia.core.config.settings import AuthSettings
from academia.core.exceptions import (
    MissingCredentialError,
    NotFoundError,
    TokenInvalidError,
    ValidationError,
)
from academia.domains.auth.jwt import SessionTokenManager
from academia.domains.auth.password import PasswordHasher
from academia.domains.auth.roles import ROLE_SPECS, Principal, Role
from academia.infrastructure.database.documents import parse_object_id, serialize, without
from academia.infrastructure.database.tenant_registry import TenantConnectionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login.

    Attributes:
        token: Signed session token.
        role: Role the token is bound to.
        profile: Sanitized profile (same fields as the token payload).
    """

    token: str
    role: Role
    profile: dict[str, Any]


class AuthGate:
    """Authenticates callers for every role.

    Attributes:
        _registry: Tenant connection registry.
        _tokens: Session token manager.
        _hasher: Password hasher shared by all roles.
        _settings: Authentication tuning.
    """

    def __init__(
        self,
        registry: TenantConnectionRegistry,
        token_manager: SessionTokenManager,
        hasher: PasswordHasher,
        settings: AuthSettings,
    ) -> None:
        """Initialize the gate.

        Args:
            registry: Tenant connection registry.
            token_manager: Signs and verifies session tokens.
            hasher: Password hasher shared by all roles.
            settings: Authentication tuning (verification timeout).
        """
        self._registry = registry
        self._tokens = token_manager
        self._hasher = hasher
        self._settings = settings

    @property
    def hasher(self) -> PasswordHasher:
        """Password hasher used for every role."""
        return self._hasher

    async def login(
        self,
        school_code: str | None,
        identifier: str | None,
        password: str | None,
        role: str | None,
    ) -> LoginResult:
        """Check credentials and issue a session token.

        Args:
            school_code: Tenant the caller belongs to.
            identifier: Email (Head, Management, Teacher) or roll number (Student).
            password: Plain text password.
            role: Role name.

        Returns:
            LoginResult with the token and sanitized profile.

        Raises:
            ValidationError: If an input is missing or the school code is malformed.
            InvalidRoleError: If the role is unknown (400).
            NotFoundError: If no record matches the identifier (401).
            TenantConnectionError: If the tenant database is unreachable.
        """
        if not identifier or not password or not role:
            raise ValidationError("Both Email, Password are Required")
        if not school_code:
            raise ValidationError("School code is required")
        if not self._registry.is_valid_tenant_code(school_code):
            raise ValidationError("Invalid school code")

        parsed_role = Role.parse(role, status_code=400)
        spec = ROLE_SPECS[parsed_role]

        database = await self._registry.resolve(school_code)
        record = await database[spec.collection].find_one({spec.login_field: identifier})
        if record is None:
            logger.info("Login failed for %s in %s: no such principal", parsed_role, school_code)
            raise NotFoundError("User Not Exist", status_code=401)

        if not self._hasher.verify(password, record.get("password") or ""):
            logger.info("Login failed for %s in %s: bad password", parsed_role, school_code)
            raise ValidationError("Either Username or Password is Invalid")

        profile = serialize(without(record, *spec.token_excluded))
        profile["schoolCode"] = school_code
        token = self._tokens.create_token(parsed_role, profile)

        logger.info("Login succeeded for %s %s in %s", parsed_role, profile.get("_id"), school_code)
        return LoginResult(token=token, role=parsed_role, profile=profile)

    async def verify(self, token: str | None, role: str | None) -> Principal:
        """Authenticate a request from its session cookies.

        Args:
            token: Value of the token cookie.
            role: Value of the role cookie.

        Returns:
            Principal for the caller.

        Raises:
            MissingCredentialError: If either cookie is absent.
            InvalidRoleError: If the role cookie is not a known role.
            TokenInvalidError: If the token is rejected, the student record
                is gone, or verification times out.
            TenantConnectionError: If a student's tenant database is unreachable.
        """
        if not role:
            raise MissingCredentialError("Role is missing")
        if not token:
            raise MissingCredentialError("Token is missing")

        parsed_role = Role.parse(role)

        try:
            return await asyncio.wait_for(
                self._verify(token, parsed_role),
                timeout=self._settings.verify_timeout_seconds,
            )
        except TimeoutError as e:
            logger.warning("Session verification timed out for %s", parsed_role)
            raise TokenInvalidError("JWT not verified") from e

    async def _verify(self, token: str, role: Role) -> Principal:
        """Decode the token and resolve the principal's profile."""
        payload = self._tokens.decode_token(token, role)
        payload.pop("password", None)

        school_code = payload.get("schoolCode")
        if not isinstance(school_code, str) or not school_code:
            raise TokenInvalidError("JWT not verified")

        if not ROLE_SPECS[role].refresh_on_verify:
            return Principal(role=role, school_code=school_code, profile=payload)

        try:
            record_id = parse_object_id(payload.get("_id"))
        except ValidationError as e:
            raise TokenInvalidError("JWT not verified") from e

        database = await self._registry.resolve(school_code)
        record = await database[ROLE_SPECS[role].collection].find_one(
            {"_id": record_id},
            {"password": 0},
        )
        if record is None:
            logger.info("Session for removed %s %s rejected", role, record_id)
            raise TokenInvalidError("JWT not verified")

        profile = serialize(without(record, "password"))
        profile["schoolCode"] = school_code
        return Principal(role=role, school_code=school_code, profile=profile)
