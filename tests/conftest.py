# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests

Database access is replaced by MagicMock collections whose driver methods
are AsyncMocks, so no MongoDB server is needed.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pydantic import SecretStr

from academia.core.config.settings import AuthSettings, JWTSettings
from academia.domains.auth.gate import AuthGate
from academia.domains.auth.jwt import SessionTokenManager
from academia.domains.auth.password import PasswordHasher

SCHOOL_CODE = "XYZ123"

_ASYNC_COLLECTION_METHODS = (
    "find_one",
    "insert_one",
    "insert_many",
    "update_one",
    "update_many",
    "delete_one",
    "find_one_and_update",
    "find_one_and_delete",
    "distinct",
    "create_indexes",
)


def make_collection() -> MagicMock:
    """Create a mock collection with async driver methods.

    find_one and its find_one_and_* variants return None and find returns
    an empty cursor unless configured otherwise.
    """
    collection = MagicMock()
    for name in _ASYNC_COLLECTION_METHODS:
        setattr(collection, name, AsyncMock())
    for name in ("find_one", "find_one_and_update", "find_one_and_delete"):
        getattr(collection, name).return_value = None
    collection.distinct.return_value = []

    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


def make_database(name: str = SCHOOL_CODE) -> MagicMock:
    """Create a mock database handing out one mock per collection name."""
    collections: dict[str, MagicMock] = {}
    database = MagicMock()
    database.name = name
    database.__getitem__.side_effect = lambda key: collections.setdefault(key, make_collection())
    database.command = AsyncMock(return_value={"ok": 1})
    return database


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> MagicMock:
    """Create mock tenant database."""
    return make_database()


@pytest.fixture
def central_db() -> MagicMock:
    """Create mock central database."""
    return make_database("academia_central")


@pytest.fixture
def mock_registry(mock_db: MagicMock, central_db: MagicMock) -> MagicMock:
    """Create mock tenant connection registry serving mock_db for every school."""
    registry = MagicMock()
    registry.is_valid_tenant_code.return_value = True
    registry.resolve = AsyncMock(return_value=mock_db)
    registry.resolve_central = AsyncMock(return_value=central_db)
    registry.cached_tenants.return_value = [SCHOOL_CODE]
    registry.close_all = AsyncMock()
    return registry


# =============================================================================
# Auth Fixtures
# =============================================================================


@pytest.fixture
def jwt_settings() -> JWTSettings:
    """Create JWT settings with a distinct test secret per role."""
    return JWTSettings(
        secret_head=SecretStr("test-head-secret"),
        secret_management=SecretStr("test-management-secret"),
        secret_teacher=SecretStr("test-teacher-secret"),
        secret_student=SecretStr("test-student-secret"),
    )


@pytest.fixture
def token_manager(jwt_settings: JWTSettings) -> SessionTokenManager:
    """Create session token manager with test secrets."""
    return SessionTokenManager(jwt_settings)


@pytest.fixture
def hasher() -> PasswordHasher:
    """Create password hasher with the minimum cost for fast tests."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def auth_gate(
    mock_registry: MagicMock,
    token_manager: SessionTokenManager,
    hasher: PasswordHasher,
) -> AuthGate:
    """Create auth gate over the mock registry."""
    return AuthGate(
        registry=mock_registry,
        token_manager=token_manager,
        hasher=hasher,
        settings=AuthSettings(verify_timeout_seconds=1.0),
    )


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_head(hasher: PasswordHasher) -> dict[str, Any]:
    """Create a stored school head record with password 'p1'."""
    return {
        "_id": ObjectId(),
        "username": "Head",
        "email": "h@x.com",
        "state": "Kerala",
        "password": hasher.hash("p1"),
        "schoolCode": SCHOOL_CODE,
    }


@pytest.fixture
def sample_student(hasher: PasswordHasher) -> dict[str, Any]:
    """Create a stored student record with password 's1'."""
    return {
        "_id": ObjectId(),
        "username": "Asha",
        "rollNumber": "42",
        "password": hasher.hash("s1"),
        "class": ObjectId(),
        "schoolCode": SCHOOL_CODE,
        "performance": {"exams": [{"subject": "Maths", "marks": 90, "maxMarks": 100}]},
    }


@pytest.fixture
def sample_class() -> dict[str, Any]:
    """Create a stored class section record."""
    return {
        "_id": ObjectId(),
        "className": "10",
        "sectionName": "A",
        "classTeacher": None,
        "teachers": [],
        "students": [],
        "resources": [],
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (HTTP layer)"
    )
