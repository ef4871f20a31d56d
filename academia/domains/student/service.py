# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for managing enrolment and exam results.

This module provides the StudentService class for:
- Enrolling students into a class section
- Listing a section's students
- Reading a student with their class
- Recording exam results
- Removing students
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
from academia.models.student import ExamResultRequest, StudentCreateRequest
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_NO_PASSWORD = {"password": 0}


class StudentNotFoundError(NotFoundError):
    """Raised when a student is not found."""

    def __init__(self) -> None:
        super().__init__("Student not found")


class RollNumberExistsError(DuplicateError):
    """Raised when the roll number is already used in the school."""

    def __init__(self) -> None:
        super().__init__("Student already exists with this roll number")


class StudentService:
    """Service for managing students.

    Attributes:
        db: Tenant database.
        hasher: Password hasher.
    """

    def __init__(self, db: AsyncDatabase, hasher: PasswordHasher | None = None) -> None:
        """Initialize student service.

        Args:
            db: Tenant database.
            hasher: Password hasher. Only needed by operations that store a password.
        """
        self.db = db
        self.hasher = hasher

    @property
    def _students(self):
        return self.db[collections.STUDENTS]

    @property
    def _classes(self):
        return self.db[collections.CLASSES]

    async def add(self, request: StudentCreateRequest, school_code: str) -> dict[str, Any]:
        """Enrol a student into a class section.

        Args:
            request: Student data including className and sectionName.
            school_code: School the student belongs to.

        Returns:
            Created student without the password.

        Raises:
            ValidationError: If a field is missing.
            NotFoundError: If the class section does not exist.
            RollNumberExistsError: If the roll number is taken.
        """
        required = [
            request.username,
            request.rollNumber,
            request.className,
            request.sectionName,
            request.password,
        ]
        if not all(required):
            raise ValidationError("All Fields are Required")

        class_ = await self._classes.find_one(
            {"className": request.className, "sectionName": request.sectionName},
            {"_id": 1},
        )
        if class_ is None:
            raise NotFoundError("Class name or Section not Exist")

        if await self._students.find_one({"rollNumber": request.rollNumber}) is not None:
            raise RollNumberExistsError()

        student = {
            "username": request.username,
            "rollNumber": request.rollNumber,
            "password": self.hasher.hash(request.password),
            "class": class_["_id"],
            "schoolCode": school_code,
            "performance": {"exams": []},
            "createdAt": utc_now(),
        }
        try:
            result = await self._students.insert_one(student)
        except DuplicateKeyError as e:
            raise RollNumberExistsError() from e
        student["_id"] = result.inserted_id

        await self._classes.update_one(
            {"_id": class_["_id"]},
            {"$addToSet": {"students": result.inserted_id}},
        )

        logger.info("Enrolled student %s in class %s", result.inserted_id, class_["_id"])
        return serialize(without(student, "password"))

    async def list_by_class(self, class_name: str | None, section_name: str | None) -> dict[str, Any]:
        """Get a class section with its students populated.

        Raises:
            ValidationError: If className or sectionName is missing.
            NotFoundError: If the class section does not exist.
        """
        if not class_name or not section_name:
            raise ValidationError("className and sectionName are required")

        class_ = await self._classes.find_one({"className": class_name, "sectionName": section_name})
        if class_ is None:
            raise NotFoundError("Class not found")

        class_["students"] = await fetch_many(self._students, class_.get("students", []), _NO_PASSWORD)
        return serialize(class_)

    async def get_student(self, student_id: str) -> dict[str, Any]:
        """Get a student with their class section populated.

        Raises:
            StudentNotFoundError: If the student does not exist.
        """
        object_id = parse_object_id(student_id, "student id")
        student = await self._students.find_one({"_id": object_id}, _NO_PASSWORD)
        if student is None:
            raise StudentNotFoundError()

        if student.get("class") is not None:
            student["class"] = await self._classes.find_one(
                {"_id": student["class"]},
                {"className": 1, "sectionName": 1, "classTeacher": 1},
            )
        return serialize(student)

    async def add_exam(self, student_id: str, request: ExamResultRequest) -> dict[str, Any]:
        """Append an exam result to a student's performance record.

        Args:
            student_id: Student id.
            request: Subject, exam name, marks and maximum marks.

        Returns:
            Updated student without the password.

        Raises:
            ValidationError: If exam details are missing or inconsistent.
            StudentNotFoundError: If the student does not exist.
        """
        object_id = parse_object_id(student_id, "student id")
        if (
            not request.subject
            or not request.examName
            or request.marks is None
            or request.maxMarks is None
        ):
            raise ValidationError("Exam Details are insufficient")
        if request.maxMarks <= 0 or not 0 <= request.marks <= request.maxMarks:
            raise ValidationError("marks must be between 0 and maxMarks")

        exam = {
            "subject": request.subject,
            "examName": request.examName,
            "marks": request.marks,
            "maxMarks": request.maxMarks,
            "recordedAt": utc_now(),
        }
        student = await self._students.find_one_and_update(
            {"_id": object_id},
            {"$push": {"performance.exams": exam}},
            projection=_NO_PASSWORD,
            return_document=ReturnDocument.AFTER,
        )
        if student is None:
            raise StudentNotFoundError()

        logger.info("Recorded exam %s for student %s", request.examName, student_id)
        return serialize(student)

    async def delete(self, student_id: str) -> None:
        """Delete a student and remove them from their class section.

        Raises:
            StudentNotFoundError: If the student does not exist.
        """
        object_id = parse_object_id(student_id, "student id")
        student = await self._students.find_one_and_delete({"_id": object_id})
        if student is None:
            raise StudentNotFoundError()

        await self._classes.update_many({"students": object_id}, {"$pull": {"students": object_id}})

        logger.info("Deleted student %s", student_id)
