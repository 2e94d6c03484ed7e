"""
Utilities Package

Common utility functions and helpers.

Contents:
=========
- security: Password hashing
- identifiers: ObjectId validation and conversion

Usage:
======
    from quill.shared.utils.security import SecurityUtils
    from quill.shared.utils.identifiers import require_identifier
"""

from quill.shared.utils.security import SecurityUtils
from quill.shared.utils.identifiers import (
    is_valid_identifier,
    require_identifier,
    require_identifiers,
    to_object_id,
    to_object_ids,
    unique_in_order,
    decode_document,
)

__all__ = [
    "SecurityUtils",
    "is_valid_identifier",
    "require_identifier",
    "require_identifiers",
    "to_object_id",
    "to_object_ids",
    "unique_in_order",
    "decode_document",
]
