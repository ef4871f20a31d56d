# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain.

Exports:
    Role: Closed set of caller roles.
    Principal: An authenticated caller.
    AuthGate: Login and session verification.
    SessionTokenManager: Role-bound session token signing.
    PasswordHasher: Password hashing with bcrypt.
"""

from academia.domains.auth.gate import AuthGate, LoginResult
from academia.domains.auth.jwt import SessionTokenManager
from academia.domains.auth.password import PasswordHasher
from academia.domains.auth.roles import ROLE_SPECS, Principal, Role, RoleSpec

__all__ = [
    "AuthGate",
    "LoginResult",
    "SessionTokenManager",
    "PasswordHasher",
    "Role",
    "RoleSpec",
    "ROLE_SPECS",
    "Principal",
]
