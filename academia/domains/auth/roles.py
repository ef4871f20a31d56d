# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Principal roles and their per-role authentication rules.

The four roles form a closed set. Each role owns a separate credential
collection in every tenant database and a separate token signing secret.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from academia.core.exceptions import InvalidRoleError
from academia.infrastructure.database import collections


class Role(str, Enum):
    """Caller role."""

    HEAD = "Head"
    MANAGEMENT = "Management"
    TEACHER = "Teacher"
    STUDENT = "Student"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any, status_code: int | None = None) -> "Role":
        """Parse a role name from a cookie or request body.

        Args:
            value: Raw role value.
            status_code: Override for the error status code.

        Returns:
            Matching Role.

        Raises:
            InvalidRoleError: If the value is not one of the four roles.
        """
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidRoleError("Invalid role", status_code=status_code) from e


@dataclass(frozen=True)
class RoleSpec:
    """How a role is looked up, signed and verified.

    Attributes:
        collection: Tenant collection holding the role's credential records.
        login_field: Field matched against the login identifier.
        token_excluded: Fields never written into the signed payload.
        refresh_on_verify: Whether verification re-reads the stored record.
    """

    collection: str
    login_field: str
    token_excluded: frozenset[str] = field(default_factory=lambda: frozenset({"password"}))
    refresh_on_verify: bool = False


ROLE_SPECS: dict[Role, RoleSpec] = {
    Role.HEAD: RoleSpec(collection=collections.HEADS, login_field="email"),
    Role.MANAGEMENT: RoleSpec(collection=collections.MANAGEMENTS, login_field="email"),
    Role.TEACHER: RoleSpec(collection=collections.TEACHERS, login_field="email"),
    Role.STUDENT: RoleSpec(
        collection=collections.STUDENTS,
        login_field="rollNumber",
        token_excluded=frozenset({"password", "performance"}),
        refresh_on_verify=True,
    ),
}


@dataclass(frozen=True)
class Principal:
    """An authenticated caller.

    Attributes:
        role: The caller's role.
        school_code: Tenant the caller belongs to.
        profile: Sanitized profile data (never holds a password).
    """

    role: Role
    school_code: str
    profile: dict[str, Any]

    @property
    def id(self) -> str | None:
        """Identifier of the caller's record."""
        value = self.profile.get("_id")
        return str(value) if value is not None else None
