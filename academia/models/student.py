# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student request models."""

from pydantic import BaseModel, Field


class StudentCreateRequest(BaseModel):
    """New student enrolled in a class section."""

    username: str | None = Field(default=None, description="Display name")
    rollNumber: str | None = Field(default=None, description="Login identifier, unique per school")
    className: str | None = None
    sectionName: str | None = None
    password: str | None = Field(default=None, description="Plain text password")


class ExamResultRequest(BaseModel):
    """Exam result added to a student's performance record."""

    subject: str | None = None
    examName: str | None = None
    marks: float | None = None
    maxMarks: float | None = None
