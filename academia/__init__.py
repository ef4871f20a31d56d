# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academia: multi-tenant school management API."""

__version__ = "1.0.0"
