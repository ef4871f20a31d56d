# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Management staff endpoints (school head only)."""

from typing import Any

from fastapi import APIRouter, status

from academia.api.dependencies import Hasher, HeadOnly, TenantDB
from academia.domains.management.service import ManagementService
from academia.models.management import ManagementCreateRequest, ManagementUpdateRequest

router = APIRouter(prefix="/management")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add management person")
async def add_management(
    body: ManagementCreateRequest,
    principal: HeadOnly,
    db: TenantDB,
    hasher: Hasher,
) -> dict[str, Any]:
    data = await ManagementService(db, hasher).add(body, principal.school_code)
    return {"status": True, "message": "Management person added successfully", "data": data}


@router.get("", summary="List management staff")
async def list_management(principal: HeadOnly, db: TenantDB) -> dict[str, Any]:
    data = await ManagementService(db).list_all()
    return {"status": True, "data": data}


@router.put("/{management_id}", summary="Update management person")
async def update_management(
    management_id: str,
    body: ManagementUpdateRequest,
    principal: HeadOnly,
    db: TenantDB,
    hasher: Hasher,
) -> dict[str, Any]:
    data = await ManagementService(db, hasher).update(management_id, body)
    return {"status": True, "message": "Management person updated successfully", "data": data}


@router.delete("/{management_id}", summary="Remove management person")
async def remove_management(
    management_id: str,
    principal: HeadOnly,
    db: TenantDB,
) -> dict[str, Any]:
    await ManagementService(db).remove(management_id)
    return {"status": True, "message": "Management person removed successfully"}
