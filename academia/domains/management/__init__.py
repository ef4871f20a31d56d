# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Management staff domain services."""

from academia.domains.management.service import (
    ManagementEmailExistsError,
    ManagementNotFoundError,
    ManagementService,
)

__all__ = [
    "ManagementService",
    "ManagementNotFoundError",
    "ManagementEmailExistsError",
]
