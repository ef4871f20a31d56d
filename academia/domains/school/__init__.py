# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School domain services.

Exports:
    SchoolService: School registration (head signup).
"""

from academia.domains.school.service import (
    HeadExistsError,
    SchoolCodeExistsError,
    SchoolService,
)

__all__ = [
    "SchoolService",
    "SchoolCodeExistsError",
    "HeadExistsError",
]
