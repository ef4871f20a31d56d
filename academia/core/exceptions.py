# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception hierarchy for the Academia API.

Every error a request can end with derives from AcademiaError, which carries
the client-facing message and the HTTP status it maps to. The API layer turns
these into {"status": false, "message": ...} responses.

- AcademiaError: Base exception
- ValidationError: Missing or malformed input
- NotFoundError: Principal or referenced entity absent
- DuplicateError: School code, email, roll number or section already exists
- InvalidRoleError: Role outside Head/Management/Teacher/Student
- MissingCredentialError: Session cookie absent
- TokenInvalidError: Session token expired, tampered or stale
- ForbiddenError: Authenticated, but the role may not use the endpoint
- TenantConnectionError: Tenant database unreachable
"""


class AcademiaError(Exception):
    """Base exception for all Academia errors.

    Attributes:
        message: Client-facing error description.
        status_code: HTTP status code the error maps to.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize the error.

        Args:
            message: Client-facing error description.
            status_code: Override for the class default status code.
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with status code."""
        return f"[{self.status_code}] {self.message}"


class ValidationError(AcademiaError):
    """Raised when required input is missing or malformed."""

    status_code = 400


class NotFoundError(AcademiaError):
    """Raised when a principal or referenced entity does not exist."""

    status_code = 404


class DuplicateError(AcademiaError):
    """Raised when a unique value is already taken."""

    status_code = 400


class InvalidRoleError(AcademiaError):
    """Raised when a role is not one of the four known roles."""

    status_code = 401


class MissingCredentialError(AcademiaError):
    """Raised when the token or role cookie is absent."""

    status_code = 401


class TokenInvalidError(AcademiaError):
    """Raised when a session token fails signature or expiry checks."""

    status_code = 401


class ForbiddenError(AcademiaError):
    """Raised when the caller's role may not access a resource."""

    status_code = 403


class TenantConnectionError(AcademiaError, ConnectionError):
    """Raised when a tenant database cannot be reached.

    Attributes:
        tenant_code: The school code whose database failed.
        reason: Internal failure description, never sent to clients.
    """

    status_code = 500

    def __init__(self, tenant_code: str, reason: str) -> None:
        """Initialize the error.

        Args:
            tenant_code: The school code whose database failed.
            reason: Internal failure description.
        """
        self.tenant_code = tenant_code
        self.reason = reason
        super().__init__("Database connection failed")
