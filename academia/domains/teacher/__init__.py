# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher domain services."""

from academia.domains.teacher.service import (
    TeacherEmailExistsError,
    TeacherNotFoundError,
    TeacherService,
)

__all__ = [
    "TeacherService",
    "TeacherNotFoundError",
    "TeacherEmailExistsError",
]
