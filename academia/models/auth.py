# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response models."""

from typing import Any

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login credentials.

    Students put their roll number in the email field.
    """

    email: str | None = Field(default=None, description="Email, or roll number for students")
    password: str | None = Field(default=None, description="Plain text password")
    role: str | None = Field(default=None, description="Head, Management, Teacher or Student")


class SignupRequest(BaseModel):
    """School head registration data."""

    username: str | None = Field(default=None, description="Head's display name")
    email: str | None = Field(default=None, description="Head's email")
    state: str | None = Field(default=None, description="State the school is in")
    password: str | None = Field(default=None, description="Plain text password")


class LoginResponse(BaseModel):
    """Successful login."""

    status: bool = True
    message: str = "Login Success"
    token: str
    role: str
    data: dict[str, Any]


class VerifyResponse(BaseModel):
    """Verified session."""

    status: bool = True
    data: dict[str, Any]


class MessageResponse(BaseModel):
    """Status and message only."""

    status: bool = True
    message: str
