# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Collection names and indexes for tenant databases.

Every school database holds the same set of collections. Indexes are
created once, when the tenant's connection is first opened by the
TenantConnectionRegistry.
"""

import logging

from pymongo import ASCENDING, IndexModel
from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)

# Tenant collections
HEADS = "schoolheads"
MANAGEMENTS = "managements"
TEACHERS = "teachers"
STUDENTS = "students"
CLASSES = "classes"
ATTENDANCES = "attendances"

# Central collections
SCHOOL_CODES = "schoolcodes"

TENANT_INDEXES: dict[str, list[IndexModel]] = {
    HEADS: [IndexModel([("email", ASCENDING)], unique=True)],
    MANAGEMENTS: [IndexModel([("email", ASCENDING)], unique=True)],
    TEACHERS: [IndexModel([("email", ASCENDING)], unique=True)],
    STUDENTS: [
        IndexModel([("rollNumber", ASCENDING)], unique=True),
        IndexModel([("class", ASCENDING)]),
    ],
    CLASSES: [
        IndexModel([("className", ASCENDING), ("sectionName", ASCENDING)], unique=True),
    ],
    ATTENDANCES: [
        IndexModel([("classId", ASCENDING), ("date", ASCENDING)], unique=True),
    ],
}


async def ensure_tenant_indexes(database: AsyncDatabase) -> None:
    """Create the indexes every tenant database relies on.

    Index creation is idempotent, so this is safe to run against an
    existing tenant.

    Args:
        database: Tenant database handle.
    """
    for collection_name, indexes in TENANT_INDEXES.items():
        await database[collection_name].create_indexes(indexes)
    logger.debug("Indexes ensured for tenant database %s", database.name)
