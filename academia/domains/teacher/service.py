# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher service for managing a school's teachers.

A teacher always leads one class section (its class teacher) and may be
linked to further sections through the classes list.
"""

import logging
from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from academia.core.exceptions import DuplicateError, NotFoundError, ValidationError
from academia.domains.auth.password import PasswordHasher
from academia.infrastructure.database import collections
from academia.infrastructure.database.documents import (
    fetch_many,
    parse_object_id,
    serialize,
    without,
)
from academia.models.teacher import TeacherCreateRequest, TeacherUpdateRequest
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_NO_PASSWORD = {"password": 0}


class TeacherNotFoundError(NotFoundError):
    """Raised when a teacher is not found."""

    def __init__(self) -> None:
        super().__init__("Teacher not found")


class TeacherEmailExistsError(DuplicateError):
    """Raised when the email is already used by another teacher."""

    def __init__(self) -> None:
        super().__init__("Teacher already exists with this email")


class TeacherService:
    """Service for managing teachers.

    Attributes:
        db: Tenant database.
        hasher: Password hasher.
    """

    def __init__(self, db: AsyncDatabase, hasher: PasswordHasher | None = None) -> None:
        """Initialize teacher service.

        Args:
            db: Tenant database.
            hasher: Password hasher. Only needed by operations that store a password.
        """
        self.db = db
        self.hasher = hasher

    @property
    def _teachers(self):
        return self.db[collections.TEACHERS]

    @property
    def _classes(self):
        return self.db[collections.CLASSES]

    async def add(self, request: TeacherCreateRequest, school_code: str) -> dict[str, Any]:
        """Add a teacher and make them class teacher of their section.

        Args:
            request: Teacher data including className and sectionName.
            school_code: School the teacher works for.

        Returns:
            Created teacher without the password.

        Raises:
            ValidationError: If a field is missing.
            TeacherEmailExistsError: If the email is taken.
            NotFoundError: If the class section does not exist.
        """
        required = [
            request.username,
            request.email,
            request.password,
            request.subject,
            request.className,
            request.sectionName,
        ]
        if not all(required):
            raise ValidationError("All Fields are Required")

        if await self._teachers.find_one({"email": request.email}) is not None:
            raise TeacherEmailExistsError()

        class_ = await self._classes.find_one(
            {"className": request.className, "sectionName": request.sectionName}
        )
        if class_ is None:
            raise NotFoundError("Class not found for the given className and sectionName")

        teacher = {
            "username": request.username,
            "email": request.email,
            "password": self.hasher.hash(request.password),
            "subject": request.subject,
            "class": class_["_id"],
            "classes": [class_["_id"]],
            "schoolCode": school_code,
            "createdAt": utc_now(),
        }
        try:
            result = await self._teachers.insert_one(teacher)
        except DuplicateKeyError as e:
            raise TeacherEmailExistsError() from e
        teacher["_id"] = result.inserted_id

        await self._classes.update_one(
            {"_id": class_["_id"]},
            {"$set": {"classTeacher": result.inserted_id}, "$addToSet": {"teachers": result.inserted_id}},
        )

        logger.info("Added teacher %s to class %s", result.inserted_id, class_["_id"])
        return serialize(without(teacher, "password"))

    async def list_teachers(self) -> list[dict[str, Any]]:
        """List teachers with their class section populated."""
        teachers = await self._teachers.find({}, _NO_PASSWORD).to_list(None)
        class_ids = list({t["class"] for t in teachers if t.get("class") is not None})
        classes = {c["_id"]: c for c in await fetch_many(self._classes, class_ids)}
        for teacher in teachers:
            teacher["class"] = classes.get(teacher.get("class"))
        return serialize(teachers)

    async def get_teacher(self, teacher_id: str) -> dict[str, Any]:
        """Get a teacher with all linked class sections populated.

        Raises:
            TeacherNotFoundError: If the teacher does not exist.
        """
        object_id = parse_object_id(teacher_id, "teacher id")
        teacher = await self._teachers.find_one({"_id": object_id}, _NO_PASSWORD)
        if teacher is None:
            raise TeacherNotFoundError()
        teacher["classes"] = await fetch_many(self._classes, teacher.get("classes", []))
        return serialize(teacher)

    async def update(self, teacher_id: str, request: TeacherUpdateRequest) -> dict[str, Any]:
        """Update a teacher and move them to the given class section.

        Args:
            teacher_id: Teacher id.
            request: New values; className and sectionName are required.

        Returns:
            Updated teacher without the password.

        Raises:
            ValidationError: If the class fields are missing or invalid.
            TeacherNotFoundError: If the teacher does not exist.
            TeacherEmailExistsError: If the new email is taken.
        """
        object_id = parse_object_id(teacher_id, "teacher id")
        if not request.className or not request.sectionName:
            raise ValidationError("className and sectionName are required")

        class_ = await self._classes.find_one(
            {"className": request.className, "sectionName": request.sectionName}
        )
        if class_ is None:
            raise ValidationError("Class details are invalid")

        changes: dict[str, Any] = {
            key: value
            for key, value in request.model_dump(
                include={"username", "email", "password", "subject"},
                exclude_none=True,
            ).items()
            if value != ""
        }
        if "password" in changes:
            changes["password"] = self.hasher.hash(changes["password"])
        changes["class"] = class_["_id"]

        try:
            teacher = await self._teachers.find_one_and_update(
                {"_id": object_id},
                {"$set": changes, "$addToSet": {"classes": class_["_id"]}},
                projection=_NO_PASSWORD,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise TeacherEmailExistsError() from e

        if teacher is None:
            raise TeacherNotFoundError()

        await self._classes.update_one(
            {"_id": class_["_id"]},
            {"$addToSet": {"teachers": object_id}},
        )

        logger.info("Updated teacher %s", teacher_id)
        return serialize(teacher)

    async def delete(self, teacher_id: str) -> None:
        """Delete a teacher and unlink them from every class section.

        Raises:
            TeacherNotFoundError: If the teacher does not exist.
        """
        object_id = parse_object_id(teacher_id, "teacher id")
        teacher = await self._teachers.find_one_and_delete({"_id": object_id})
        if teacher is None:
            raise TeacherNotFoundError()

        await self._classes.update_many({"teachers": object_id}, {"$pull": {"teachers": object_id}})
        await self._classes.update_many({"classTeacher": object_id}, {"$set": {"classTeacher": None}})

        logger.info("Deleted teacher %s", teacher_id)
