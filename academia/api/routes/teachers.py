# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher endpoints."""

from typing import Any

from fastapi import APIRouter, status

from academia.api.dependencies import EducatorsOnly, Hasher, StaffOnly, TenantDB
from academia.domains.teacher.service import TeacherService
from academia.models.teacher import TeacherCreateRequest, TeacherUpdateRequest

router = APIRouter()


@router.post("/teachers", status_code=status.HTTP_201_CREATED, summary="Add teacher")
async def add_teacher(
    body: TeacherCreateRequest,
    principal: StaffOnly,
    db: TenantDB,
    hasher: Hasher,
) -> dict[str, Any]:
    data = await TeacherService(db, hasher).add(body, principal.school_code)
    return {"status": True, "message": "Teacher added successfully", "data": data}


@router.get("/teachers", summary="List teachers")
async def list_teachers(principal: EducatorsOnly, db: TenantDB) -> dict[str, Any]:
    return {"status": True, "data": await TeacherService(db).list_teachers()}


@router.get("/teacher/{teacher_id}", summary="Get teacher")
async def get_teacher(
    teacher_id: str,
    principal: EducatorsOnly,
    db: TenantDB,
) -> dict[str, Any]:
    return {"status": True, "data": await TeacherService(db).get_teacher(teacher_id)}


@router.put("/teacher/{teacher_id}", summary="Update teacher")
async def update_teacher(
    teacher_id: str,
    body: TeacherUpdateRequest,
    principal: StaffOnly,
    db: TenantDB,
    hasher: Hasher,
) -> dict[str, Any]:
    data = await TeacherService(db, hasher).update(teacher_id, body)
    return {"status": True, "message": "Teacher updated successfully", "data": data}


@router.delete("/teacher/{teacher_id}", summary="Delete teacher")
async def delete_teacher(
    teacher_id: str,
    principal: StaffOnly,
    db: TenantDB,
) -> dict[str, Any]:
    await TeacherService(db).delete(teacher_id)
    return {"status": True, "message": "Teacher deleted successfully"}
