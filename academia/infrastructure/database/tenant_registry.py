# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant database connection management.

Each school (tenant) has its own isolated MongoDB database, named after its
school code, on a shared cluster. Clients are lazily created on first access
and cached for the lifetime of the process.

The registry is the only component that opens database connections.
Resolution is serialized per school code, so concurrent first requests for
the same school open exactly one client while different schools resolve in
parallel.

Example:
    from academia.infrastructure.database import TenantConnectionRegistry

    registry = TenantConnectionRegistry(settings.database)

    # Get the database handle for a school (API handlers)
    db = await registry.resolve("XYZ123")
    student = await db["students"].find_one({"rollNumber": "42"})

    # Platform-wide collections
    central = await registry.resolve_central()

    # Cleanup on shutdown
    await registry.close_all()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from academia.core.config.settings import DatabaseSettings
from academia.core.exceptions import TenantConnectionError
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Characters MongoDB rejects in database names
_FORBIDDEN_CHARACTERS = frozenset('/\\. "$*<>:|?\x00')

# MongoDB database names must be shorter than 64 bytes
_MAX_NAME_BYTES = 63

# Databases owned by the server itself
_SYSTEM_DATABASES = frozenset({"admin", "local", "config"})

ClientFactory = Callable[..., AsyncMongoClient]
TenantInitializer = Callable[[AsyncDatabase], Awaitable[None]]


@dataclass
class TenantConnection:
    """An open, reusable link to one tenant database.

    Attributes:
        tenant_code: School code the connection belongs to.
        client: MongoDB client owning the connection pool.
        database: Handle to the tenant database.
        opened_at: When the connection was established.
    """

    tenant_code: str
    client: AsyncMongoClient
    database: AsyncDatabase
    opened_at: datetime = field(default_factory=utc_now)


class TenantConnectionRegistry:
    """Process-wide registry of tenant database connections.

    Maps school codes to connection handles. A cached handle is returned as
    is, with no staleness check. A cache miss opens a new client, verifies it
    with a ping bounded by the connect timeout, runs the tenant initializer
    and caches the result. Failed attempts leave the cache untouched.

    Attributes:
        _settings: Shared database settings (cluster and credentials).
        _client_factory: Callable building a client from a URI.
        _initializer: Coroutine run once against every new tenant database.
        _connections: Cache of open connections keyed by database name.
        _locks: Per-database locks serializing first resolution.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        client_factory: ClientFactory = AsyncMongoClient,
        initializer: TenantInitializer | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            settings: Database settings with cluster host and credentials.
            client_factory: Builds a client from a URI and keyword options.
                Defaults to pymongo's AsyncMongoClient.
            initializer: Optional coroutine run against each new tenant
                database before it is cached (index creation).
        """
        self._settings = settings
        self._client_factory = client_factory
        self._initializer = initializer
        self._connections: dict[str, TenantConnection] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def central_database_name(self) -> str:
        """Name of the platform-wide database."""
        return self._settings.central_database

    def is_valid_tenant_code(self, tenant_code: Any) -> bool:
        """Check whether a value can name a tenant database.

        Args:
            tenant_code: Candidate school code.

        Returns:
            True if the code is a usable, non-reserved database name.
        """
        if not isinstance(tenant_code, str) or not tenant_code:
            return False
        if len(tenant_code.encode("utf-8")) > _MAX_NAME_BYTES:
            return False
        if any(char in _FORBIDDEN_CHARACTERS for char in tenant_code):
            return False
        reserved = _SYSTEM_DATABASES | {self.central_database_name}
        return tenant_code.lower() not in {name.lower() for name in reserved}

    async def resolve(self, tenant_code: str) -> AsyncDatabase:
        """Get the database handle for a tenant, opening it on first use.

        Args:
            tenant_code: School code identifying the tenant.

        Returns:
            Database handle shared by every request for this tenant.

        Raises:
            TenantConnectionError: If the code is malformed or the database
                cannot be reached.
        """
        if not self.is_valid_tenant_code(tenant_code):
            raise TenantConnectionError(str(tenant_code), "Malformed tenant identifier")

        return await self._get_or_open(tenant_code, self._initializer)

    async def resolve_central(self) -> AsyncDatabase:
        """Get the handle for the platform-wide database.

        Returns:
            Central database handle.

        Raises:
            TenantConnectionError: If the database cannot be reached.
        """
        return await self._get_or_open(self.central_database_name, None)

    def cached_tenants(self) -> list[str]:
        """List the database names with an open connection.

        Returns:
            Sorted database names currently cached.
        """
        return sorted(self._connections)

    async def close_all(self) -> None:
        """Close all cached connections.

        Call this at application shutdown.
        """
        connections = list(self._connections.values())
        self._connections.clear()

        for connection in connections:
            try:
                await connection.client.close()
                logger.debug("Closed connection for %s", connection.tenant_code)
            except PyMongoError as e:
                logger.warning(
                    "Error closing connection for %s: %s", connection.tenant_code, str(e)
                )

    async def _get_or_open(
        self,
        name: str,
        initializer: TenantInitializer | None,
    ) -> AsyncDatabase:
        """Return the cached handle or open a new one under the per-key lock.

        Args:
            name: Database name.
            initializer: Coroutine run against a newly opened database.

        Returns:
            Database handle.

        Raises:
            TenantConnectionError: If opening the connection fails.
        """
        connection = self._connections.get(name)
        if connection is not None:
            logger.debug("Reusing existing connection for %s", name)
            return connection.database

        # No await between lookup and insert, so setdefault is atomic here
        lock = self._locks.setdefault(name, asyncio.Lock())
        async with lock:
            connection = self._connections.get(name)
            if connection is None:
                connection = await self._open(name, initializer)
                self._connections[name] = connection
                logger.info("New connection established for %s", name)
            else:
                logger.debug("Reusing existing connection for %s", name)

        return connection.database

    async def _open(
        self,
        name: str,
        initializer: TenantInitializer | None,
    ) -> TenantConnection:
        """Open and verify a new connection.

        Args:
            name: Database name.
            initializer: Coroutine run against the new database.

        Returns:
            Verified TenantConnection (not yet cached).

        Raises:
            TenantConnectionError: If the client cannot be built, the ping
                fails or times out, or the initializer fails.
        """
        timeout = self._settings.connect_timeout_seconds

        try:
            client = self._client_factory(
                self._settings.tenant_uri(name),
                serverSelectionTimeoutMS=int(timeout * 1000),
                tz_aware=True,
            )
        except (PyMongoError, ValueError, TypeError) as e:
            logger.error("Connection error for %s: %s", name, str(e))
            raise TenantConnectionError(name, str(e)) from e

        database = client[name]

        try:
            await asyncio.wait_for(database.command("ping"), timeout=timeout)
            if initializer is not None:
                await asyncio.wait_for(initializer(database), timeout=timeout)
        except (PyMongoError, OSError) as e:
            # asyncio.TimeoutError is an OSError subclass
            await client.close()
            reason = str(e) or type(e).__name__
            logger.error("Connection error for %s: %s", name, reason)
            raise TenantConnectionError(name, reason) from e
        except BaseException:
            # Cancelled by a caller's timeout; the half-open client still has to go
            await client.close()
            logger.warning("Connection attempt for %s was cancelled", name)
            raise

        return TenantConnection(tenant_code=name, client=client, database=database)
