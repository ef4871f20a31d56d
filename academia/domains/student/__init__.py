# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student domain services."""

from academia.domains.student.service import (
    RollNumberExistsError,
    StudentNotFoundError,
    StudentService,
)

__all__ = [
    "StudentService",
    "StudentNotFoundError",
    "RollNumberExistsError",
]
