# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the Academia API.

Exports:
    TenantConnectionRegistry: Per-school MongoDB connection cache.
    TenantConnection: An open connection to one school database.
    ensure_tenant_indexes: Index bootstrap run on first connection.
"""

from academia.infrastructure.database.collections import ensure_tenant_indexes
from academia.infrastructure.database.tenant_registry import (
    TenantConnection,
    TenantConnectionRegistry,
)

__all__ = [
    "TenantConnectionRegistry",
    "TenantConnection",
    "ensure_tenant_indexes",
]
