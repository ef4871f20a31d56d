# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student endpoints.

Students may read only their own record; every other operation is for
staff and teachers.
"""

from typing import Any

from fastapi import APIRouter, status

from academia.api.dependencies import AnyPrincipal, EducatorsOnly, Hasher, TenantDB
from academia.core.exceptions import ForbiddenError
from academia.domains.auth.roles import Role
from academia.domains.student.service import StudentService
from academia.models.student import ExamResultRequest, StudentCreateRequest

router = APIRouter()


@router.post("/student", status_code=status.HTTP_201_CREATED, summary="Add student")
async def add_student(
    body: StudentCreateRequest,
    principal: EducatorsOnly,
    db: TenantDB,
    hasher: Hasher,
) -> dict[str, Any]:
    data = await StudentService(db, hasher).add(body, principal.school_code)
    return {"status": True, "message": "Student added successfully", "data": data}


@router.get("/students", summary="List students of a class section")
async def list_students(
    principal: EducatorsOnly,
    db: TenantDB,
    className: str | None = None,
    sectionName: str | None = None,
) -> dict[str, Any]:
    data = await StudentService(db).list_by_class(className, sectionName)
    return {"status": True, "data": data}


@router.get("/student/{student_id}", summary="Get student")
async def get_student(
    student_id: str,
    principal: AnyPrincipal,
    db: TenantDB,
) -> dict[str, Any]:
    if principal.role is Role.STUDENT and principal.id != student_id:
        raise ForbiddenError("Access denied")
    return {"status": True, "data": await StudentService(db).get_student(student_id)}


@router.post("/student/{student_id}/exam", summary="Record exam result")
async def add_exam(
    student_id: str,
    body: ExamResultRequest,
    principal: EducatorsOnly,
    db: TenantDB,
) -> dict[str, Any]:
    data = await StudentService(db).add_exam(student_id, body)
    return {"status": True, "message": "Exam details added successfully", "data": data}


@router.delete("/student/{student_id}", summary="Delete student")
async def delete_student(
    student_id: str,
    principal: EducatorsOnly,
    db: TenantDB,
) -> dict[str, Any]:
    await StudentService(db).delete(student_id)
    return {"status": True, "message": "Student deleted successfully"}
