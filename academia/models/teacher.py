# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher request models."""

from pydantic import BaseModel, Field


class TeacherCreateRequest(BaseModel):
    """New teacher, who becomes the class teacher of the given section."""

    username: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Login email")
    password: str | None = Field(default=None, description="Plain text password")
    subject: str | None = Field(default=None, description="Subject taught")
    className: str | None = Field(default=None, description="Class the teacher leads")
    sectionName: str | None = Field(default=None, description="Section the teacher leads")


class TeacherUpdateRequest(BaseModel):
    """Update of a teacher; className and sectionName are required."""

    username: str | None = None
    email: str | None = None
    password: str | None = None
    subject: str | None = None
    className: str | None = None
    sectionName: str | None = None
