# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the Academia API.

Example:
    >>> from academia.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.jwt.expire_days
    25
"""

from academia.core.config.settings import (
    APISettings,
    AuthSettings,
    CookieSettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "JWTSettings",
    "CookieSettings",
    "AuthSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
