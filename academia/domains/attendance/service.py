# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance service for daily class attendance.

One attendance record exists per (classId, date), where date is UTC
midnight. The record holds the ids of present and absent students.

Marking a student toggles them between present and absent. The toggle is a
single find_one_and_update with an aggregation pipeline and upsert, so the
server applies it atomically: concurrent toggles on the same record never
lose each other's changes, and the first toggle of the day creates the
record. Every toggle increments the record's version.
"""

import logging
from datetime import date
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from academia.core.exceptions import ValidationError
from academia.infrastructure.database import collections
from academia.infrastructure.database.documents import parse_object_id
from academia.utils.datetime import day_start, month_range, utc_today_start, year_range

logger = logging.getLogger(__name__)


def _without_student(array: dict[str, Any], student_id: str) -> dict[str, Any]:
    return {"$filter": {"input": array, "cond": {"$ne": ["$$this", {"$literal": student_id}]}}}


def build_toggle_pipeline(student_id: str) -> list[dict[str, Any]]:
    """Build the update pipeline that flips a student's attendance.

    All expressions in a single $set stage read the document as it was
    before the stage, so both arrays are computed from the same state.

    Args:
        student_id: Student id as a hex string.

    Returns:
        Aggregation pipeline usable as an update.
    """
    present = {"$ifNull": ["$presentStudents", []]}
    absent = {"$ifNull": ["$absentStudents", []]}
    literal_id = {"$literal": student_id}
    was_present = {"$in": [literal_id, present]}

    return [
        {
            "$set": {
                "presentStudents": {
                    "$cond": [
                        was_present,
                        _without_student(present, student_id),
                        {"$concatArrays": [present, [literal_id]]},
                    ]
                },
                "absentStudents": {
                    "$cond": [
                        was_present,
                        {"$concatArrays": [_without_student(absent, student_id), [literal_id]]},
                        _without_student(absent, student_id),
                    ]
                },
                "version": {"$add": [{"$ifNull": ["$version", 0]}, 1]},
            }
        }
    ]


class AttendanceService:
    """Service for marking and summarizing attendance.

    Attributes:
        db: Tenant database.
    """

    def __init__(self, db: AsyncDatabase) -> None:
        """Initialize attendance service.

        Args:
            db: Tenant database.
        """
        self.db = db

    @property
    def _attendances(self):
        return self.db[collections.ATTENDANCES]

    async def check(
        self,
        student_id: str | None,
        class_id: str | None,
        on: date | None = None,
    ) -> bool:
        """Check whether a student is marked present.

        Args:
            student_id: Student id.
            class_id: Class section id.
            on: Day to check. Defaults to today (UTC).

        Returns:
            True if the student is in the day's present list.

        Raises:
            ValidationError: If an id is missing or malformed, or the class
                section does not exist.
        """
        if not student_id or not class_id:
            raise ValidationError("Student Id or Class Id is missing")

        class_oid = parse_object_id(class_id, "class id")
        student_oid = parse_object_id(student_id, "student id")
        if await self.db[collections.CLASSES].find_one({"_id": class_oid}, {"_id": 1}) is None:
            raise ValidationError("No Class with this Id exists")

        record = await self._attendances.find_one(
            {"classId": class_oid, "date": self._day(on)},
            {"presentStudents": 1},
        )
        return record is not None and str(student_oid) in record.get("presentStudents", [])

    async def mark(
        self,
        student_id: str | None,
        class_id: str | None,
        on: date | None = None,
    ) -> bool:
        """Toggle a student's attendance for a day.

        Args:
            student_id: Student id.
            class_id: Class section id.
            on: Day to mark. Defaults to today (UTC).

        Returns:
            True if the student is now present, False if now absent.

        Raises:
            ValidationError: If an id is missing, or the class id is invalid.
        """
        if not student_id or not class_id:
            raise ValidationError("classId or studentId is missing")
        if not ObjectId.is_valid(class_id):
            raise ValidationError("ClassId is invalid")
        student_oid = parse_object_id(student_id, "student id")

        class_oid = ObjectId(class_id)
        if await self.db[collections.CLASSES].find_one({"_id": class_oid}, {"_id": 1}) is None:
            raise ValidationError("ClassId is invalid")

        key = {"classId": class_oid, "date": self._day(on)}
        pipeline = build_toggle_pipeline(str(student_oid))

        try:
            record = await self._toggle(key, pipeline)
        except DuplicateKeyError:
            # Lost the race to create the day's record; it exists now
            record = await self._toggle(key, pipeline)

        marked = str(student_oid) in record.get("presentStudents", [])
        logger.info(
            "Marked student %s %s in class %s (version %s)",
            student_oid,
            "present" if marked else "absent",
            class_oid,
            record.get("version"),
        )
        return marked

    async def monthly_summary(self, class_id: str | None, year: int, month: int) -> dict[str, Any]:
        """Count present and absent days per student for a month.

        Raises:
            ValidationError: If the class id is missing or month is out of range.
        """
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        start, end = month_range(year, month)
        return await self._summary(class_id, start, end)

    async def yearly_summary(self, class_id: str | None, year: int) -> dict[str, Any]:
        """Count present and absent days per student for a year."""
        start, end = year_range(year)
        return await self._summary(class_id, start, end)

    async def _summary(self, class_id: str | None, start: Any, end: Any) -> dict[str, Any]:
        if not class_id:
            raise ValidationError("classId is missing")
        class_oid = parse_object_id(class_id, "class id")

        cursor = self._attendances.find(
            {"classId": class_oid, "date": {"$gte": start, "$lt": end}},
            {"presentStudents": 1, "absentStudents": 1},
        )
        present: dict[str, int] = {}
        absent: dict[str, int] = {}
        for record in await cursor.to_list(None):
            for student in record.get("presentStudents", []):
                present[student] = present.get(student, 0) + 1
            for student in record.get("absentStudents", []):
                absent[student] = absent.get(student, 0) + 1

        return {"present": present, "absent": absent}

    async def _toggle(self, key: dict[str, Any], pipeline: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._attendances.find_one_and_update(
            key,
            pipeline,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    @staticmethod
    def _day(on: date | None):
        return day_start(on) if on is not None else utc_today_start()
