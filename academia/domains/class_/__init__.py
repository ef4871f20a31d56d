# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class domain services."""

from academia.domains.class_.service import (
    SECTION_NAMES,
    ClassNotFoundError,
    ClassService,
    ResourceExistsError,
    SectionExistsError,
)

__all__ = [
    "ClassService",
    "ClassNotFoundError",
    "SectionExistsError",
    "ResourceExistsError",
    "SECTION_NAMES",
]
