# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class section and learning resource endpoints.

Structure changes (create, rename, delete, assigning teachers) are limited
to the head and management. Teachers can read classes and add resources.
Every role can list a section's resources.
"""

from typing import Any

from fastapi import APIRouter, status

from academia.api.dependencies import AnyPrincipal, EducatorsOnly, StaffOnly, TenantDB
from academia.domains.class_.service import ClassService
from academia.models.class_ import (
    AssignTeacherRequest,
    ClassCreateRequest,
    ClassUpdateRequest,
    ResourceCreateRequest,
)

router = APIRouter()


@router.post(
    "/class",
    status_code=status.HTTP_201_CREATED,
    summary="Create class",
    description="Create a class with sections A, B, ... up to numSections (1 to 5).",
)
async def create_class(body: ClassCreateRequest, principal: StaffOnly, db: TenantDB) -> dict[str, Any]:
    data = await ClassService(db).create_classes(body)
    return {"status": True, "message": "Classes created successfully", "data": data}


@router.get("/classes", summary="List class names")
async def list_classes(principal: EducatorsOnly, db: TenantDB) -> dict[str, Any]:
    return {"status": True, "data": await ClassService(db).list_class_names()}


@router.get("/classes/{class_name}/sections", summary="List sections of a class")
async def list_sections(class_name: str, principal: EducatorsOnly, db: TenantDB) -> dict[str, Any]:
    return {"status": True, "data": await ClassService(db).list_sections(class_name)}


@router.post("/class/teacher", summary="Assign teacher to class")
async def assign_teacher(body: AssignTeacherRequest, principal: StaffOnly, db: TenantDB) -> dict[str, Any]:
    data = await ClassService(db).assign_teacher(body)
    return {"status": True, "message": "Teacher added to class", "data": data}


@router.get("/class/{class_id}/students", summary="Get class with students")
async def get_class_students(class_id: str, principal: EducatorsOnly, db: TenantDB) -> dict[str, Any]:
    return {"status": True, "data": await ClassService(db).get_class_students(class_id)}


@router.put("/class", summary="Rename class section")
async def update_class(body: ClassUpdateRequest, principal: StaffOnly, db: TenantDB) -> dict[str, Any]:
    data = await ClassService(db).update_class(body)
    return {"status": True, "message": "Class updated successfully", "data": data}


@router.delete("/class/{class_id}", summary="Delete class section")
async def delete_class(class_id: str, principal: StaffOnly, db: TenantDB) -> dict[str, Any]:
    await ClassService(db).delete_class(class_id)
    return {"status": True, "message": "Class deleted successfully"}


@router.post(
    "/resource/{class_id}",
    status_code=status.HTTP_201_CREATED,
    summary="Add learning resource",
)
async def add_resource(
    class_id: str,
    body: ResourceCreateRequest,
    principal: EducatorsOnly,
    db: TenantDB,
) -> dict[str, Any]:
    data = await ClassService(db).add_resource(class_id, body)
    return {"status": True, "message": "Resource added successfully", "data": data}


@router.get("/resource/{class_id}", summary="List learning resources")
async def list_resources(class_id: str, principal: AnyPrincipal, db: TenantDB) -> dict[str, Any]:
    return {"status": True, "data": await ClassService(db).list_resources(class_id)}
