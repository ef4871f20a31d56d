# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class service for managing class/section operations.

This module provides the ClassService class for:
- Creating a class with its sections
- Listing class names and sections
- Assigning teachers to sections
- Renaming and deleting sections
- Managing a section's learning resources

Each class section is one document in the classes collection, unique on
(className, sectionName).
"""

import logging
from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import BulkWriteError, DuplicateKeyError

from academia.core.exceptions import DuplicateError, NotFoundError, ValidationError
from academia.infrastructure.database import collections
from academia.infrastructure.database.documents import fetch_many, parse_object_id, serialize
from academia.models.class_ import (
    AssignTeacherRequest,
    ClassCreateRequest,
    ClassUpdateRequest,
    ResourceCreateRequest,
)
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SECTION_NAMES = ("A", "B", "C", "D", "E")


class ClassNotFoundError(NotFoundError):
    """Raised when a class section is not found."""

    def __init__(self, message: str = "Class not found") -> None:
        super().__init__(message)


class SectionExistsError(DuplicateError):
    """Raised when a class section already exists."""

    pass


class ResourceExistsError(DuplicateError):
    """Raised when a resource link is already attached to the section."""

    def __init__(self) -> None:
        super().__init__("Resource link already exists")


class ClassService:
    """Service for managing class sections.

    Attributes:
        db: Tenant database.
    """

    def __init__(self, db: AsyncDatabase) -> None:
        """Initialize class service.

        Args:
            db: Tenant database.
        """
        self.db = db

    @property
    def _classes(self):
        return self.db[collections.CLASSES]

    async def create_classes(self, request: ClassCreateRequest) -> list[dict[str, Any]]:
        """Create a class with sections A, B, ... up to numSections.

        Args:
            request: Class name and number of sections.

        Returns:
            Created sections.

        Raises:
            ValidationError: If a field is missing or numSections is out of range.
            SectionExistsError: If any of the sections already exists.
        """
        if not request.className or request.numSections is None:
            raise ValidationError("className and numSections are required")
        if not 1 <= request.numSections <= len(SECTION_NAMES):
            raise ValidationError("numSections must be between 1 and 5")

        sections = list(SECTION_NAMES[: request.numSections])
        cursor = self._classes.find(
            {"className": request.className, "sectionName": {"$in": sections}},
            {"sectionName": 1},
        )
        existing = sorted(doc["sectionName"] for doc in await cursor.to_list(None))
        if existing:
            raise SectionExistsError(
                f"Classes with sections {', '.join(existing)} already exist"
            )

        now = utc_now()
        documents = [
            {
                "className": request.className,
                "sectionName": section,
                "classTeacher": None,
                "teachers": [],
                "students": [],
                "resources": [],
                "createdAt": now,
            }
            for section in sections
        ]
        try:
            result = await self._classes.insert_many(documents)
        except BulkWriteError as e:
            raise SectionExistsError(
                f"Classes with sections {', '.join(sections)} already exist"
            ) from e

        for document, inserted_id in zip(documents, result.inserted_ids):
            document["_id"] = inserted_id

        logger.info("Created class %s with %d sections", request.className, len(sections))
        return serialize(documents)

    async def list_class_names(self) -> list[str]:
        """List the distinct class names."""
        return sorted(await self._classes.distinct("className"))

    async def list_sections(self, class_name: str) -> list[str]:
        """List the section names of a class.

        Raises:
            ClassNotFoundError: If the class has no sections.
        """
        sections = await self._classes.distinct("sectionName", {"className": class_name})
        if not sections:
            raise ClassNotFoundError("No sections found for the specified class")
        return sorted(sections)

    async def get_class(self, class_id: str) -> dict[str, Any]:
        """Get a raw class section document.

        Args:
            class_id: Class section id.

        Returns:
            Class section document (not serialized).

        Raises:
            ValidationError: If the id is malformed.
            ClassNotFoundError: If the section does not exist.
        """
        class_ = await self._classes.find_one({"_id": parse_object_id(class_id, "class id")})
        if class_ is None:
            raise ClassNotFoundError()
        return class_

    async def assign_teacher(self, request: AssignTeacherRequest) -> dict[str, Any]:
        """Link a teacher and a class section in both directions.

        Args:
            request: Class and teacher ids.

        Returns:
            Updated class section.

        Raises:
            ValidationError: If an id is missing or malformed.
            ClassNotFoundError: If the class or the teacher does not exist.
        """
        if not request.classId or not request.teacherId:
            raise ValidationError("classId and teacherId are required")

        class_id = parse_object_id(request.classId, "class id")
        teacher_id = parse_object_id(request.teacherId, "teacher id")

        teacher = await self.db[collections.TEACHERS].find_one({"_id": teacher_id}, {"_id": 1})
        if teacher is None:
            raise ClassNotFoundError("Class or Teacher not found")

        class_ = await self._classes.find_one_and_update(
            {"_id": class_id},
            {"$addToSet": {"teachers": teacher_id}},
            return_document=ReturnDocument.AFTER,
        )
        if class_ is None:
            raise ClassNotFoundError("Class or Teacher not found")

        await self.db[collections.TEACHERS].update_one(
            {"_id": teacher_id},
            {"$addToSet": {"classes": class_id}},
        )

        logger.info("Assigned teacher %s to class %s", teacher_id, class_id)
        return serialize(class_)

    async def get_class_students(self, class_id: str) -> dict[str, Any]:
        """Get a class section with its students populated.

        Raises:
            ClassNotFoundError: If the section does not exist.
        """
        class_ = await self.get_class(class_id)
        class_["students"] = await fetch_many(
            self.db[collections.STUDENTS],
            class_.get("students", []),
            {"password": 0},
        )
        return serialize(class_)

    async def update_class(self, request: ClassUpdateRequest) -> dict[str, Any]:
        """Rename a class section.

        Args:
            request: Section id plus new className and/or sectionName.

        Returns:
            Updated class section.

        Raises:
            ValidationError: If the id is missing or nothing is to change.
            ClassNotFoundError: If the section does not exist.
            SectionExistsError: If the new name collides with another section.
        """
        if not request.classId:
            raise ValidationError("classId is required")
        class_id = parse_object_id(request.classId, "class id")

        changes = {
            key: value
            for key, value in (("className", request.className), ("sectionName", request.sectionName))
            if value
        }
        if not changes:
            raise ValidationError("className or sectionName is required")

        try:
            class_ = await self._classes.find_one_and_update(
                {"_id": class_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise SectionExistsError("Class with this section already exists") from e

        if class_ is None:
            raise ClassNotFoundError()

        logger.info("Updated class %s", class_id)
        return serialize(class_)

    async def delete_class(self, class_id: str) -> None:
        """Delete a class section and unlink its teachers.

        Raises:
            ClassNotFoundError: If the section does not exist.
        """
        object_id = parse_object_id(class_id, "class id")
        class_ = await self._classes.find_one_and_delete({"_id": object_id})
        if class_ is None:
            raise ClassNotFoundError()

        teachers = self.db[collections.TEACHERS]
        await teachers.update_many({"classes": object_id}, {"$pull": {"classes": object_id}})
        await teachers.update_many({"class": object_id}, {"$set": {"class": None}})

        logger.info("Deleted class %s", class_id)

    async def add_resource(self, class_id: str, request: ResourceCreateRequest) -> dict[str, Any]:
        """Attach a learning resource to a class section.

        Args:
            class_id: Class section id.
            request: Resource title and link.

        Returns:
            The added resource.

        Raises:
            ValidationError: If title or link is missing.
            ClassNotFoundError: If the section does not exist.
            ResourceExistsError: If the link is already attached.
        """
        if not request.title or not request.link:
            raise ValidationError("Link or Title is missing")

        class_ = await self.get_class(class_id)
        resource = {"title": request.title, "link": request.link, "createdAt": utc_now()}

        # Duplicate check and append in one write
        result = await self._classes.update_one(
            {"_id": class_["_id"], "resources.link": {"$ne": request.link}},
            {"$push": {"resources": resource}},
        )
        if result.matched_count == 0:
            raise ResourceExistsError()

        logger.info("Added resource to class %s", class_id)
        return serialize(resource)

    async def list_resources(self, class_id: str) -> list[dict[str, Any]]:
        """List the learning resources of a class section.

        Raises:
            ClassNotFoundError: If the section does not exist.
        """
        class_ = await self.get_class(class_id)
        return serialize(class_.get("resources", []))
