# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session token management utilities.

This module signs and verifies session tokens using python-jose. A session
token carries a snapshot of the principal's profile and is bound to its role
by the signing secret: every role has its own secret, so a token issued for
one role never verifies for another.

Example:
    >>> from academia.core.config import get_settings
    >>> manager = SessionTokenManager(get_settings().jwt)
    >>> token = manager.create_token(Role.HEAD, {"_id": "abc", "schoolCode": "XYZ123"})
    >>> payload = manager.decode_token(token, Role.HEAD)
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from academia.core.config.settings import JWTSettings
from academia.core.exceptions import TokenInvalidError
from academia.domains.auth.roles import Role
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Claims added by the token manager, not part of the profile
_REGISTERED_CLAIMS = ("exp", "iat")


class SessionTokenManager:
    """Session token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the token manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    @property
    def lifetime(self) -> timedelta:
        """How long a session token stays valid."""
        return timedelta(days=self._settings.expire_days)

    def create_token(
        self,
        role: Role,
        profile: dict[str, Any],
        now: datetime | None = None,
    ) -> str:
        """Sign a profile snapshot with the role's secret.

        Args:
            role: Role whose secret signs the token.
            profile: JSON-serializable profile fields (no password).
            now: Issue time. Defaults to the current time.

        Returns:
            Signed JWT string.
        """
        issued_at = now or utc_now()
        payload = {
            **profile,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }

        return jwt.encode(
            payload,
            self._settings.secret_for(role),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str, role: Role) -> dict[str, Any]:
        """Verify a token with the role's secret and return its profile.

        Args:
            token: JWT string from the session cookie.
            role: Role whose secret must have signed the token.

        Returns:
            Profile fields from the payload, without registered claims.

        Raises:
            TokenInvalidError: If the token is expired, tampered with or
                signed for another role.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_for(role),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as e:
            logger.info("Expired %s token rejected", role)
            raise TokenInvalidError("JWT not verified") from e
        except JWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise TokenInvalidError("JWT not verified") from e

        return {key: value for key, value in payload.items() if key not in _REGISTERED_CLAIMS}
