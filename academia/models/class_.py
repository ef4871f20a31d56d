# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class and resource request models."""

from pydantic import BaseModel, Field


class ClassCreateRequest(BaseModel):
    """Create a class with one or more sections."""

    className: str | None = Field(default=None, description="Class name, e.g. '10'")
    numSections: int | None = Field(default=None, description="Number of sections, 1 to 5")


class ClassUpdateRequest(BaseModel):
    """Rename a class section."""

    classId: str | None = Field(default=None, description="Class section id")
    className: str | None = None
    sectionName: str | None = None


class AssignTeacherRequest(BaseModel):
    """Link a teacher to a class section."""

    classId: str | None = None
    teacherId: str | None = None


class ResourceCreateRequest(BaseModel):
    """Learning resource for a class section."""

    title: str | None = Field(default=None, description="Resource title")
    link: str | None = Field(default=None, description="Resource URL")
