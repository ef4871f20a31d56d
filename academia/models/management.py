# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Management staff request models."""

from pydantic import BaseModel, Field


class ManagementCreateRequest(BaseModel):
    """New management staff member."""

    username: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Login email")
    password: str | None = Field(default=None, description="Plain text password")
    role: str | None = Field(default=None, description="Job title within management")


class ManagementUpdateRequest(BaseModel):
    """Partial update of a management staff member."""

    username: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None
