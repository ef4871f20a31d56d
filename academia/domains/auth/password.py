# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account password hashing shared by heads, management, teachers and students.

bcrypt only reads the first 72 bytes of a secret, so longer passwords are
refused as bad input instead of being silently truncated.
"""

import logging

import bcrypt

from academia.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


class PasswordTooLongError(ValidationError):
    """Raised when a password exceeds what bcrypt can hash."""

    def __init__(self) -> None:
        super().__init__(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


class PasswordHasher:
    """Hashes and checks account passwords with bcrypt.

    Attributes:
        _rounds: bcrypt cost factor.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def check(self, password: str | None) -> bytes:
        """Validate a new password and return its encoded form.

        Raises:
            ValidationError: If the password is empty.
            PasswordTooLongError: If it is longer than bcrypt accepts.
        """
        if not password:
            raise ValidationError("Password is required")

        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            raise PasswordTooLongError()
        return secret

    def hash(self, password: str | None) -> str:
        """Return the salted bcrypt hash stored on an account document."""
        secret = self.check(password)
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str | None, stored: str | None) -> bool:
        """Check a login password against the stored account value.

        Stored values that are not bcrypt hashes (legacy plaintext) and
        passwords too long to have been hashed never match.
        """
        if not password or not stored:
            return False

        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            return False

        try:
            return bcrypt.checkpw(secret, stored.encode("utf-8"))
        except ValueError as e:
            logger.warning("Stored password is not a bcrypt hash: %s", str(e))
            return False
