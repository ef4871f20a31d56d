# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance domain services."""

from academia.domains.attendance.service import AttendanceService, build_toggle_pipeline

__all__ = [
    "AttendanceService",
    "build_toggle_pipeline",
]
