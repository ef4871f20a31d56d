# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Management service for managing a school's administrative staff.

This module provides the ManagementService class for:
- Adding, listing, updating and removing management staff
"""

import logging
from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from academia.core.exceptions import DuplicateError, NotFoundError, ValidationError
from academia.domains.auth.password import PasswordHasher
from academia.infrastructure.database import collections
from academia.infrastructure.database.documents import parse_object_id, serialize, without
from academia.models.management import ManagementCreateRequest, ManagementUpdateRequest
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class ManagementNotFoundError(NotFoundError):
    """Raised when a management staff member is not found."""

    def __init__(self) -> None:
        super().__init__("Management person not found")


class ManagementEmailExistsError(DuplicateError):
    """Raised when the email is already used by another staff member."""

    def __init__(self) -> None:
        super().__init__("Management person already exists with this email")


class ManagementService:
    """Service for managing management staff.

    Attributes:
        db: Tenant database.
        hasher: Password hasher.
    """

    def __init__(self, db: AsyncDatabase, hasher: PasswordHasher | None = None) -> None:
        """Initialize management service.

        Args:
            db: Tenant database.
            hasher: Password hasher. Only needed by operations that store a password.
        """
        self.db = db
        self.hasher = hasher

    @property
    def _collection(self):
        return self.db[collections.MANAGEMENTS]

    async def add(self, request: ManagementCreateRequest, school_code: str) -> dict[str, Any]:
        """Add a management staff member.

        Args:
            request: Staff member data.
            school_code: School the staff member works for.

        Returns:
            Created staff member without the password.

        Raises:
            ValidationError: If a field is missing.
            ManagementEmailExistsError: If the email is taken.
        """
        if not all([request.username, request.email, request.password, request.role]):
            raise ValidationError("All Fields are Required")

        if await self._collection.find_one({"email": request.email}) is not None:
            raise ManagementEmailExistsError()

        document = {
            "username": request.username,
            "email": request.email,
            "password": self.hasher.hash(request.password),
            "role": request.role,
            "schoolCode": school_code,
            "createdAt": utc_now(),
        }
        try:
            result = await self._collection.insert_one(document)
        except DuplicateKeyError as e:
            raise ManagementEmailExistsError() from e

        document["_id"] = result.inserted_id
        logger.info("Added management person %s", result.inserted_id)
        return serialize(without(document, "password"))

    async def list_all(self) -> list[dict[str, Any]]:
        """List all management staff without passwords."""
        cursor = self._collection.find({}, {"password": 0})
        return serialize(await cursor.to_list(None))

    async def update(self, management_id: str, request: ManagementUpdateRequest) -> dict[str, Any]:
        """Update a management staff member.

        Args:
            management_id: Staff member id.
            request: Fields to change. A new password is hashed.

        Returns:
            Updated staff member without the password.

        Raises:
            ValidationError: If the id is malformed or nothing is to change.
            ManagementNotFoundError: If the staff member does not exist.
            ManagementEmailExistsError: If the new email is taken.
        """
        object_id = parse_object_id(management_id, "management id")
        changes = {
            key: value for key, value in request.model_dump(exclude_none=True).items() if value != ""
        }
        if not changes:
            raise ValidationError("No fields to update")
        if "password" in changes:
            changes["password"] = self.hasher.hash(changes["password"])

        try:
            updated = await self._collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                projection={"password": 0},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ManagementEmailExistsError() from e

        if updated is None:
            raise ManagementNotFoundError()

        logger.info("Updated management person %s", management_id)
        return serialize(updated)

    async def remove(self, management_id: str) -> None:
        """Remove a management staff member.

        Raises:
            ManagementNotFoundError: If the staff member does not exist.
        """
        object_id = parse_object_id(management_id, "management id")
        result = await self._collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise ManagementNotFoundError()

        logger.info("Removed management person %s", management_id)
