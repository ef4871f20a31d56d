# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    AuthMiddleware: Session cookie authentication middleware.
    limiter: Shared slowapi rate limiter.
"""

from academia.api.middleware.auth import AuthMiddleware
from academia.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = [
    "AuthMiddleware",
    "limiter",
    "rate_limit_exceeded_handler",
]
