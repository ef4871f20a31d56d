# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Helpers for converting MongoDB documents to and from API data."""

from datetime import datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from academia.core.exceptions import ValidationError


def parse_object_id(value: Any, label: str = "id") -> ObjectId:
    """Parse a client-supplied identifier into an ObjectId.

    Args:
        value: Identifier from a path, query or body.
        label: Name used in the error message.

    Returns:
        The parsed ObjectId.

    Raises:
        ValidationError: If the value is not a valid ObjectId.
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError) as e:
        raise ValidationError(f"Invalid {label}") from e


def serialize(value: Any) -> Any:
    """Convert a document into JSON-friendly data.

    ObjectIds become strings and datetimes become ISO 8601 strings;
    dicts and lists are converted recursively.

    Args:
        value: Document, list or scalar.

    Returns:
        JSON-serializable equivalent.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return value


def without(document: dict[str, Any], *fields: str) -> dict[str, Any]:
    """Return a shallow copy of a document without the given fields.

    Args:
        document: Source document.
        *fields: Top-level keys to drop.

    Returns:
        New dict without those keys.
    """
    return {key: value for key, value in document.items() if key not in fields}


async def fetch_many(
    collection: Any,
    ids: list[ObjectId],
    projection: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Fetch documents by id, keeping the order of the ids.

    Ids with no matching document are skipped.

    Args:
        collection: Collection to read from.
        ids: Document ids.
        projection: Optional projection passed to find.

    Returns:
        Matching documents, ordered like ids.
    """
    if not ids:
        return []
    cursor = collection.find({"_id": {"$in": list(ids)}}, projection)
    found = {document["_id"]: document for document in await cursor.to_list(None)}
    return [found[object_id] for object_id in ids if object_id in found]
