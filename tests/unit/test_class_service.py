# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for class section operations."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import BulkWriteError, DuplicateKeyError

from academia.core.exceptions import ValidationError
from academia.domains.class_.service import (
    ClassNotFoundError,
    ClassService,
    ResourceExistsError,
    SectionExistsError,
)
from academia.infrastructure.database import collections
from academia.models.class_ import (
    AssignTeacherRequest,
    ClassCreateRequest,
    ClassUpdateRequest,
    ResourceCreateRequest,
)


@pytest.fixture
def class_service(mock_db: MagicMock) -> ClassService:
    """Create class service over the mock tenant database."""
    return ClassService(mock_db)


@pytest.fixture
def classes(mock_db: MagicMock) -> MagicMock:
    """Get the mock classes collection."""
    return mock_db[collections.CLASSES]


class TestCreateClasses:
    """Tests for ClassService.create_classes."""

    @pytest.mark.asyncio
    async def test_creates_requested_sections(
        self,
        class_service: ClassService,
        classes: MagicMock,
    ) -> None:
        """Test that sections A.. are created up to numSections."""
        ids = [ObjectId() for _ in range(3)]
        classes.insert_many.return_value = MagicMock(inserted_ids=ids)

        created = await class_service.create_classes(
            ClassCreateRequest(className="10", numSections=3)
        )

        assert [section["sectionName"] for section in created] == ["A", "B", "C"]
        assert [section["_id"] for section in created] == [str(i) for i in ids]
        assert all(section["className"] == "10" for section in created)
        assert all(section["resources"] == [] for section in created)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("num_sections", [0, 6, -1])
    async def test_section_count_bounds(
        self,
        class_service: ClassService,
        num_sections: int,
    ) -> None:
        """Test that the section count must be between 1 and 5."""
        with pytest.raises(ValidationError, match="numSections must be between 1 and 5"):
            await class_service.create_classes(
                ClassCreateRequest(className="10", numSections=num_sections)
            )

    @pytest.mark.asyncio
    async def test_requires_class_name(self, class_service: ClassService) -> None:
        """Test that a class name is required."""
        with pytest.raises(ValidationError, match="className and numSections are required"):
            await class_service.create_classes(ClassCreateRequest(numSections=2))

    @pytest.mark.asyncio
    async def test_existing_sections_rejected(
        self,
        class_service: ClassService,
        classes: MagicMock,
    ) -> None:
        """Test that creating an existing section is refused."""
        classes.find.return_value.to_list.return_value = [
            {"_id": ObjectId(), "sectionName": "B"},
            {"_id": ObjectId(), "sectionName": "A"},
        ]

        with pytest.raises(SectionExistsError, match="Classes with sections A, B already exist"):
            await class_service.create_classes(ClassCreateRequest(className="10", numSections=2))

        classes.insert_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_insert_rejected(
        self,
        class_service: ClassService,
        classes: MagicMock,
    ) -> None:
        """Test that a unique index violation during insert maps to a duplicate error."""
        classes.insert_many.side_effect = BulkWriteError({"writeErrors": []})

        with pytest.raises(SectionExistsError):
            await class_service.create_classes(ClassCreateRequest(className="10", numSections=1))


class TestListing:
    """Tests for class and section listing."""

    @pytest.mark.asyncio
    async def test_list_class_names_sorted(
        self,
        class_service: ClassService,
        classes: MagicMock,
    ) -> None:
        """Test that class names are distinct and sorted."""
        classes.distinct.return_value = ["9", "10", "1"]

        assert await class_service.list_class_names() == ["1", "10", "9"]
        classes.distinct.assert_awaited_once_with("className")

    @pytest.mark.asyncio
    async def test_list_sections(self, class_service: ClassService, classes: MagicMock) -> None:
        """Test listing sections of a class."""
        classes.distinct.return_value = ["B", "A"]

        assert await class_service.list_sections("10") == ["A", "B"]
        classes.distinct.assert_awaited_once_with("sectionName", {"className": "10"})

    @pytest.mark.asyncio
    async def test_list_sections_of_unknown_class(self, class_service: ClassService) -> None:
        """Test listing sections of a class with none."""
        with pytest.raises(ClassNotFoundError, match="No sections found"):
            await class_service.list_sections("99")


class TestAssignTeacher:
    """Tests for ClassService.assign_teacher."""

    @pytest.mark.asyncio
    async def test_links_both_directions(
        self,
        class_service: ClassService,
        mock_db: MagicMock,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that the class gains the teacher and the teacher gains the class."""
        teacher_id = ObjectId()
        mock_db[collections.TEACHERS].find_one.return_value = {"_id": teacher_id}
        classes.find_one_and_update.return_value = {**sample_class, "teachers": [teacher_id]}

        result = await class_service.assign_teacher(
            AssignTeacherRequest(classId=str(sample_class["_id"]), teacherId=str(teacher_id))
        )

        assert result["teachers"] == [str(teacher_id)]
        assert classes.find_one_and_update.await_args.args[1] == {
            "$addToSet": {"teachers": teacher_id}
        }
        mock_db[collections.TEACHERS].update_one.assert_awaited_once_with(
            {"_id": teacher_id},
            {"$addToSet": {"classes": sample_class["_id"]}},
        )

    @pytest.mark.asyncio
    async def test_requires_ids(self, class_service: ClassService) -> None:
        """Test that both ids are required."""
        with pytest.raises(ValidationError, match="classId and teacherId are required"):
            await class_service.assign_teacher(AssignTeacherRequest(classId=str(ObjectId())))

    @pytest.mark.asyncio
    async def test_unknown_teacher(self, class_service: ClassService, classes: MagicMock) -> None:
        """Test assigning a teacher that does not exist."""
        with pytest.raises(ClassNotFoundError, match="Class or Teacher not found"):
            await class_service.assign_teacher(
                AssignTeacherRequest(classId=str(ObjectId()), teacherId=str(ObjectId()))
            )

        classes.find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_class(self, class_service: ClassService, mock_db: MagicMock) -> None:
        """Test assigning to a class that does not exist."""
        mock_db[collections.TEACHERS].find_one.return_value = {"_id": ObjectId()}

        with pytest.raises(ClassNotFoundError, match="Class or Teacher not found"):
            await class_service.assign_teacher(
                AssignTeacherRequest(classId=str(ObjectId()), teacherId=str(ObjectId()))
            )

        mock_db[collections.TEACHERS].update_one.assert_not_awaited()


class TestClassStudents:
    """Tests for ClassService.get_class_students."""

    @pytest.mark.asyncio
    async def test_students_are_populated_without_passwords(
        self,
        class_service: ClassService,
        mock_db: MagicMock,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that student ids are replaced by their records in order."""
        first, second = ObjectId(), ObjectId()
        classes.find_one.return_value = {**sample_class, "students": [first, second]}
        students = mock_db[collections.STUDENTS]
        students.find.return_value.to_list.return_value = [
            {"_id": second, "username": "Ben"},
            {"_id": first, "username": "Asha"},
        ]

        result = await class_service.get_class_students(str(sample_class["_id"]))

        assert [student["username"] for student in result["students"]] == ["Asha", "Ben"]
        assert students.find.call_args.args[1] == {"password": 0}

    @pytest.mark.asyncio
    async def test_unknown_class(self, class_service: ClassService) -> None:
        """Test reading students of a class that does not exist."""
        with pytest.raises(ClassNotFoundError):
            await class_service.get_class_students(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_malformed_id(self, class_service: ClassService) -> None:
        """Test that a malformed class id is a validation error."""
        with pytest.raises(ValidationError, match="Invalid class id"):
            await class_service.get_class_students("not-an-id")


class TestUpdateClass:
    """Tests for ClassService.update_class."""

    @pytest.mark.asyncio
    async def test_rename_section(
        self,
        class_service: ClassService,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test renaming a section."""
        classes.find_one_and_update.return_value = {**sample_class, "sectionName": "B"}

        result = await class_service.update_class(
            ClassUpdateRequest(classId=str(sample_class["_id"]), sectionName="B")
        )

        assert result["sectionName"] == "B"
        assert classes.find_one_and_update.await_args.args[1] == {"$set": {"sectionName": "B"}}

    @pytest.mark.asyncio
    async def test_requires_class_id(self, class_service: ClassService) -> None:
        """Test that a class id is required."""
        with pytest.raises(ValidationError, match="classId is required"):
            await class_service.update_class(ClassUpdateRequest(className="11"))

    @pytest.mark.asyncio
    async def test_requires_a_change(self, class_service: ClassService) -> None:
        """Test that an update must change something."""
        with pytest.raises(ValidationError, match="className or sectionName is required"):
            await class_service.update_class(ClassUpdateRequest(classId=str(ObjectId())))

    @pytest.mark.asyncio
    async def test_collision_with_existing_section(
        self,
        class_service: ClassService,
        classes: MagicMock,
    ) -> None:
        """Test that renaming onto an existing section is refused."""
        classes.find_one_and_update.side_effect = DuplicateKeyError("dup")

        with pytest.raises(SectionExistsError, match="Class with this section already exists"):
            await class_service.update_class(
                ClassUpdateRequest(classId=str(ObjectId()), sectionName="A")
            )

    @pytest.mark.asyncio
    async def test_unknown_class(self, class_service: ClassService) -> None:
        """Test updating a class that does not exist."""
        with pytest.raises(ClassNotFoundError):
            await class_service.update_class(
                ClassUpdateRequest(classId=str(ObjectId()), className="11")
            )


class TestDeleteClass:
    """Tests for ClassService.delete_class."""

    @pytest.mark.asyncio
    async def test_delete_unlinks_teachers(
        self,
        class_service: ClassService,
        mock_db: MagicMock,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that deleting a section removes it from teachers."""
        classes.find_one_and_delete.return_value = sample_class
        class_id = sample_class["_id"]

        await class_service.delete_class(str(class_id))

        teachers = mock_db[collections.TEACHERS]
        teachers.update_many.assert_any_await(
            {"classes": class_id}, {"$pull": {"classes": class_id}}
        )
        teachers.update_many.assert_any_await({"class": class_id}, {"$set": {"class": None}})

    @pytest.mark.asyncio
    async def test_delete_unknown_class(self, class_service: ClassService) -> None:
        """Test deleting a class that does not exist."""
        with pytest.raises(ClassNotFoundError):
            await class_service.delete_class(str(ObjectId()))


class TestResources:
    """Tests for class section resources."""

    @pytest.mark.asyncio
    async def test_add_resource(
        self,
        class_service: ClassService,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that a new link is appended in a single conditional write."""
        classes.find_one.return_value = sample_class
        classes.update_one.return_value = MagicMock(matched_count=1)

        resource = await class_service.add_resource(
            str(sample_class["_id"]),
            ResourceCreateRequest(title="Algebra", link="https://x.test/algebra"),
        )

        query, update = classes.update_one.await_args.args
        assert query == {
            "_id": sample_class["_id"],
            "resources.link": {"$ne": "https://x.test/algebra"},
        }
        assert update["$push"]["resources"]["title"] == "Algebra"
        assert resource["link"] == "https://x.test/algebra"

    @pytest.mark.asyncio
    async def test_duplicate_link_rejected(
        self,
        class_service: ClassService,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test that a link already attached is refused."""
        classes.find_one.return_value = sample_class
        classes.update_one.return_value = MagicMock(matched_count=0)

        with pytest.raises(ResourceExistsError, match="Resource link already exists"):
            await class_service.add_resource(
                str(sample_class["_id"]),
                ResourceCreateRequest(title="Algebra", link="https://x.test/algebra"),
            )

    @pytest.mark.asyncio
    async def test_add_resource_requires_title_and_link(
        self,
        class_service: ClassService,
    ) -> None:
        """Test that title and link are both required."""
        with pytest.raises(ValidationError, match="Link or Title is missing"):
            await class_service.add_resource(str(ObjectId()), ResourceCreateRequest(title="x"))

    @pytest.mark.asyncio
    async def test_list_resources(
        self,
        class_service: ClassService,
        classes: MagicMock,
        sample_class: dict[str, Any],
    ) -> None:
        """Test listing the resources of a section."""
        classes.find_one.return_value = {
            **sample_class,
            "resources": [{"title": "Algebra", "link": "https://x.test/algebra"}],
        }

        resources = await class_service.list_resources(str(sample_class["_id"]))

        assert resources == [{"title": "Algebra", "link": "https://x.test/algebra"}]

    @pytest.mark.asyncio
    async def test_list_resources_of_unknown_class(self, class_service: ClassService) -> None:
        """Test listing resources of a class that does not exist."""
        with pytest.raises(ClassNotFoundError):
            await class_service.list_resources(str(ObjectId()))
