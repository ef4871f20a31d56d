# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API Routes package.

Every router except health is mounted under /api by api_router.
"""

from fastapi import APIRouter

from academia.api.routes import attendance, auth, classes, health, management, students, teachers

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(management.router, tags=["Management"])
api_router.include_router(classes.router, tags=["Classes"])
api_router.include_router(teachers.router, tags=["Teachers"])
api_router.include_router(students.router, tags=["Students"])
api_router.include_router(attendance.router, tags=["Attendance"])

__all__ = ["api_router", "health"]
