# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for student enrolment and exam results."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from academia.core.exceptions import NotFoundError, ValidationError
from academia.domains.auth.password import PasswordHasher
from academia.domains.student.service import (
    RollNumberExistsError,
    StudentNotFoundError,
    StudentService,
)
from academia.infrastructure.database import collections
from academia.models.student import ExamResultRequest, StudentCreateRequest


@pytest.fixture
def student_service(mock_db: MagicMock, hasher: PasswordHasher) -> StudentService:
    """Create student service over the mock tenant database."""
    return StudentService(mock_db, hasher)


@pytest.fixture
def enrol_request() -> StudentCreateRequest:
    """Create a complete enrolment request."""
    return StudentCreateRequest(
        username="Asha",
        rollNumber="42",
        className="10",
        sectionName="A",
        password="s1",
    )


class TestAdd:
    """Tests for StudentService.add."""

    @pytest.mark.asyncio
    async def test_enrol_student(
        self,
        student_service: StudentService,
        mock_db: MagicMock,
        hasher: PasswordHasher,
        enrol_request: StudentCreateRequest,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that a student is stored hashed and added to the section."""
        student_id = ObjectId()
        mock_db[collections.CLASSES].find_one.return_value = {"_id": sample_class["_id"]}
        mock_db[collections.STUDENTS].insert_one.return_value = MagicMock(inserted_id=student_id)

        created = await student_service.add(enrol_request, "XYZ123")

        stored = mock_db[collections.STUDENTS].insert_one.await_args.args[0]
        assert hasher.verify("s1", stored["password"])
        assert stored["schoolCode"] == "XYZ123"
        assert stored["performance"] == {"exams": []}
        mock_db[collections.CLASSES].update_one.assert_awaited_once_with(
            {"_id": sample_class["_id"]},
            {"$addToSet": {"students": student_id}},
        )
        assert created["class"] == str(sample_class["_id"])
        assert "password" not in created

    @pytest.mark.asyncio
    async def test_enrol_requires_all_fields(self, student_service: StudentService) -> None:
        """Test that incomplete requests are refused."""
        with pytest.raises(ValidationError, match="All Fields are Required"):
            await student_service.add(StudentCreateRequest(username="Asha"), "XYZ123")

    @pytest.mark.asyncio
    async def test_enrol_into_unknown_section(
        self,
        student_service: StudentService,
        enrol_request: StudentCreateRequest,
    ) -> None:
        """Test enrolling into a section that does not exist."""
        with pytest.raises(NotFoundError, match="Class name or Section not Exist"):
            await student_service.add(enrol_request, "XYZ123")

    @pytest.mark.asyncio
    async def test_duplicate_roll_number(
        self,
        student_service: StudentService,
        mock_db: MagicMock,
        enrol_request: StudentCreateRequest,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that a roll number can be used only once per school."""
        mock_db[collections.CLASSES].find_one.return_value = {"_id": sample_class["_id"]}
        mock_db[collections.STUDENTS].find_one.return_value = {"_id": ObjectId()}

        with pytest.raises(RollNumberExistsError):
            await student_service.add(enrol_request, "XYZ123")

        mock_db[collections.STUDENTS].insert_one.assert_not_awaited()


class TestRead:
    """Tests for student listing and lookup."""

    @pytest.mark.asyncio
    async def test_list_by_class(
        self,
        student_service: StudentService,
        mock_db: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test listing the students of a section."""
        student_id = ObjectId()
        mock_db[collections.CLASSES].find_one.return_value = {
            **sample_class,
            "students": [student_id],
        }
        mock_db[collections.STUDENTS].find.return_value.to_list.return_value = [
            {"_id": student_id, "username": "Asha"}
        ]

        result = await student_service.list_by_class("10", "A")

        assert result["students"] == [{"_id": str(student_id), "username": "Asha"}]

    @pytest.mark.asyncio
    async def test_list_requires_class_and_section(self, student_service: StudentService) -> None:
        """Test that both query parameters are required."""
        with pytest.raises(ValidationError):
            await student_service.list_by_class("10", None)

    @pytest.mark.asyncio
    async def test_list_unknown_section(self, student_service: StudentService) -> None:
        """Test listing a section that does not exist."""
        with pytest.raises(NotFoundError, match="Class not found"):
            await student_service.list_by_class("10", "Z")

    @pytest.mark.asyncio
    async def test_get_student_populates_class(
        self,
        student_service: StudentService,
        mock_db: MagicMock,
        sample_student: dict[str, Any],
        sample_class: dict[str, Any],
    ) -> None:
        """Test that a student's class id is replaced by the section."""
        stored = {key: value for key, value in sample_student.items() if key != "password"}
        mock_db[collections.STUDENTS].find_one.return_value = stored
        mock_db[collections.CLASSES].find_one.return_value = sample_class

        student = await student_service.get_student(str(sample_student["_id"]))

        assert student["class"]["sectionName"] == "A"
        assert student["performance"]["exams"][0]["subject"] == "Maths"
        assert mock_db[collections.STUDENTS].find_one.await_args.args[1] == {"password": 0}

    @pytest.mark.asyncio
    async def test_get_unknown_student(self, student_service: StudentService) -> None:
        """Test reading a student that does not exist."""
        with pytest.raises(StudentNotFoundError, match="Student not found"):
            await student_service.get_student(str(ObjectId()))


class TestAddExam:
    """Tests for StudentService.add_exam."""

    @pytest.mark.asyncio
    async def test_exam_is_appended(
        self,
        student_service: StudentService,
        mock_db: MagicMock,
    ) -> None:
        """Test that a result is pushed onto the performance record."""
        student_id = ObjectId()
        students = mock_db[collections.STUDENTS]
        students.find_one_and_update.return_value = {
            "_id": student_id,
            "performance": {"exams": [{"subject": "Maths", "marks": 45.0}]},
        }

        student = await student_service.add_exam(
            str(student_id),
            ExamResultRequest(subject="Maths", examName="Midterm", marks=45, maxMarks=50),
        )

        query, update = students.find_one_and_update.await_args.args
        assert query == {"_id": student_id}
        exam = update["$push"]["performance.exams"]
        assert (exam["subject"], exam["examName"], exam["marks"], exam["maxMarks"]) == (
            "Maths",
            "Midterm",
            45,
            50,
        )
        assert student["performance"]["exams"][0]["marks"] == 45.0

    @pytest.mark.asyncio
    async def test_exam_requires_details(self, student_service: StudentService) -> None:
        """Test that every exam field is required."""
        with pytest.raises(ValidationError, match="Exam Details are insufficient"):
            await student_service.add_exam(
                str(ObjectId()), ExamResultRequest(subject="Maths", marks=10)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("marks,max_marks", [(-1, 50), (51, 50), (0, 0)])
    async def test_marks_out_of_range(
        self,
        student_service: StudentService,
        marks: float,
        max_marks: float,
    ) -> None:
        """Test that marks must lie within 0 and the maximum."""
        with pytest.raises(ValidationError, match="marks must be between 0 and maxMarks"):
            await student_service.add_exam(
                str(ObjectId()),
                ExamResultRequest(subject="Maths", examName="Midterm", marks=marks, maxMarks=max_marks),
            )

    @pytest.mark.asyncio
    async def test_exam_for_unknown_student(self, student_service: StudentService) -> None:
        """Test recording a result for a student that does not exist."""
        with pytest.raises(StudentNotFoundError):
            await student_service.add_exam(
                str(ObjectId()),
                ExamResultRequest(subject="Maths", examName="Midterm", marks=10, maxMarks=50),
            )


class TestDelete:
    """Tests for StudentService.delete."""

    @pytest.mark.asyncio
    async def test_delete_removes_from_section(
        self,
        student_service: StudentService,
        mock_db: MagicMock,
    ) -> None:
        """Test that a deleted student leaves their section."""
        student_id = ObjectId()
        mock_db[collections.STUDENTS].find_one_and_delete.return_value = {"_id": student_id}

        await student_service.delete(str(student_id))

        mock_db[collections.CLASSES].update_many.assert_awaited_once_with(
            {"students": student_id}, {"$pull": {"students": student_id}}
        )

    @pytest.mark.asyncio
    async def test_delete_unknown_student(self, student_service: StudentService) -> None:
        """Test deleting a student that does not exist."""
        with pytest.raises(StudentNotFoundError):
            await student_service.delete(str(ObjectId()))
