# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service for registering new schools.

A school (tenant) comes into existence when its head signs up. The school
code is reserved in the central school code registry first; the head's
account is then written into the new tenant database. If writing the head
fails, the reservation is released again.
"""

import logging
from typing import Any

from pymongo.errors import DuplicateKeyError, PyMongoError

from academia.core.exceptions import DuplicateError, ValidationError
from academia.domains.auth.password import PasswordHasher
from academia.infrastructure.database import collections
from academia.infrastructure.database.documents import serialize, without
from academia.infrastructure.database.tenant_registry import TenantConnectionRegistry
from academia.models.auth import SignupRequest
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class SchoolCodeExistsError(DuplicateError):
    """Raised when a school code is already reserved."""

    def __init__(self) -> None:
        super().__init__("School code already exists")


class HeadExistsError(DuplicateError):
    """Raised when the head's email is already registered."""

    def __init__(self) -> None:
        super().__init__("User already exists")


class SchoolService:
    """Service for school registration.

    Attributes:
        registry: Tenant connection registry.
        hasher: Password hasher.
    """

    def __init__(self, registry: TenantConnectionRegistry, hasher: PasswordHasher) -> None:
        """Initialize school service.

        Args:
            registry: Tenant connection registry.
            hasher: Password hasher.
        """
        self.registry = registry
        self.hasher = hasher

    async def signup(self, school_code: str | None, request: SignupRequest) -> dict[str, Any]:
        """Register a school and its head.

        Args:
            school_code: New school code, from the request's code header.
            request: Head's account data.

        Returns:
            The head's profile without the password.

        Raises:
            ValidationError: If a field is missing or the code is malformed.
            PasswordTooLongError: If the password is longer than bcrypt accepts.
            SchoolCodeExistsError: If the code is already reserved.
            HeadExistsError: If the email is already registered.
            TenantConnectionError: If a database is unreachable.
        """
        if not all([school_code, request.username, request.email, request.state, request.password]):
            raise ValidationError("All Fields are Required")
        if not self.registry.is_valid_tenant_code(school_code):
            raise ValidationError("Invalid school code")
        self.hasher.check(request.password)

        central = await self.registry.resolve_central()
        tenant = await self.registry.resolve(school_code)

        await self._reserve_code(central, school_code)

        try:
            head = await self._create_head(tenant, school_code, request)
        except Exception:
            await central[collections.SCHOOL_CODES].delete_one({"_id": school_code})
            logger.info("Released school code %s after failed signup", school_code)
            raise

        logger.info("Registered school %s with head %s", school_code, head["_id"])
        return serialize(without(head, "password"))

    async def _reserve_code(self, central: Any, school_code: str) -> None:
        """Insert the code into the central registry.

        The code is the document _id, so the insert is the uniqueness check.
        """
        try:
            await central[collections.SCHOOL_CODES].insert_one(
                {"_id": school_code, "createdAt": utc_now()}
            )
        except DuplicateKeyError as e:
            raise SchoolCodeExistsError() from e

    async def _create_head(
        self,
        tenant: Any,
        school_code: str,
        request: SignupRequest,
    ) -> dict[str, Any]:
        """Write the head's account into the tenant database."""
        heads = tenant[collections.HEADS]
        if await heads.find_one({"email": request.email}) is not None:
            raise HeadExistsError()

        head = {
            "username": request.username,
            "email": request.email,
            "state": request.state,
            "password": self.hasher.hash(request.password),
            "schoolCode": school_code,
            "createdAt": utc_now(),
        }
        try:
            result = await heads.insert_one(head)
        except DuplicateKeyError as e:
            raise HeadExistsError() from e
        except PyMongoError:
            logger.exception("Failed to create head for %s", school_code)
            raise

        head["_id"] = result.inserted_id
        return head
