# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance endpoints.

Days default to today (UTC); pass date=YYYY-MM-DD to read or mark another
day.
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Query

from academia.api.dependencies import AnyPrincipal, EducatorsOnly, TenantDB
from academia.domains.attendance.service import AttendanceService

router = APIRouter(prefix="/attendance")


@router.get("", summary="Check attendance")
async def check_attendance(
    principal: EducatorsOnly,
    db: TenantDB,
    studentId: str | None = None,
    classId: str | None = None,
    day: date | None = Query(default=None, alias="date"),
) -> dict[str, Any]:
    marked = await AttendanceService(db).check(studentId, classId, day)
    return {"status": True, "marked": marked}


@router.post("", summary="Toggle attendance")
async def mark_attendance(
    principal: EducatorsOnly,
    db: TenantDB,
    studentId: str | None = None,
    classId: str | None = None,
    day: date | None = Query(default=None, alias="date"),
) -> dict[str, Any]:
    marked = await AttendanceService(db).mark(studentId, classId, day)
    message = "Attendance marked as Present" if marked else "Attendance marked as Absent"
    return {"status": True, "message": message, "marked": marked}


@router.get("/monthly", summary="Monthly attendance summary")
async def monthly_attendance(
    principal: AnyPrincipal,
    db: TenantDB,
    year: int,
    month: int,
    classId: str | None = None,
) -> dict[str, Any]:
    data = await AttendanceService(db).monthly_summary(classId, year, month)
    return {"status": True, "data": data}


@router.get("/yearly", summary="Yearly attendance summary")
async def yearly_attendance(
    principal: AnyPrincipal,
    db: TenantDB,
    year: int,
    classId: str | None = None,
) -> dict[str, Any]:
    data = await AttendanceService(db).yearly_summary(classId, year)
    return {"status": True, "data": data}
