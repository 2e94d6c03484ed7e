"""
Identifier Utilities

Conversion between the 24-hex string ids used by the API and services
and the ObjectIds stored in MongoDB.

Everything above the repositories and the document store handles ids as
plain strings. Conversion happens only at the storage boundary:

    API / services / ReferenceManager     →  "65f0c1b2e4b0a1a2b3c4d5e6"
    repositories / MongoDocumentStore     →  ObjectId("65f0c1b2e4b0a1a2b3c4d5e6")

Usage:
======
    from quill.shared.utils.identifiers import require_identifier, to_object_id

    post_id = require_identifier(raw_id, "Post")   # raises MalformedIdentifierError
    oid = to_object_id(post_id)
"""

from typing import Any, Iterable, Optional

from bson import ObjectId

from quill.shared.core.exceptions import MalformedIdentifierError


def is_valid_identifier(value: Any) -> bool:
    """Return True if value is a 24-hex string (or ObjectId) usable as a document id."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


def require_identifier(value: Any, resource: str = "Resource") -> str:
    """
    Validate an identifier and return it in canonical string form.

    Args:
        value: Raw identifier from a path parameter or request body
        resource: Resource name used in the error message

    Returns:
        The identifier as a lowercase hex string

    Raises:
        MalformedIdentifierError: If the value is not a valid ObjectId
    """
    if not is_valid_identifier(value):
        raise MalformedIdentifierError(resource, value)
    return str(ObjectId(value))


def require_identifiers(values: Iterable[Any], resource: str = "Resource") -> list[str]:
    """Validate every identifier, preserving order."""
    return [require_identifier(value, resource) for value in values]


def to_object_id(value: Any, resource: str = "Resource") -> ObjectId:
    """Convert a string id to ObjectId, raising MalformedIdentifierError if malformed."""
    if isinstance(value, ObjectId):
        return value
    return ObjectId(require_identifier(value, resource))


def to_object_ids(values: Iterable[Any], resource: str = "Resource") -> list[ObjectId]:
    """Convert many string ids to ObjectIds."""
    return [to_object_id(value, resource) for value in values]


def unique_in_order(values: Iterable[str]) -> list[str]:
    """Drop duplicate ids while keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def decode_value(value: Any) -> Any:
    """Recursively turn ObjectIds into strings inside documents and lists."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    if isinstance(value, dict):
        return {key: decode_value(item) for key, item in value.items()}
    return value


def decode_document(document: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Convert a raw MongoDB document into plain Python values.

    `_id` is renamed to `id` and every ObjectId (including reference lists
    such as `posts` and `categories`) becomes a string.
    """
    if document is None:
        return None
    decoded = {key: decode_value(value) for key, value in document.items() if key != "_id"}
    decoded["id"] = str(document["_id"])
    return decoded
