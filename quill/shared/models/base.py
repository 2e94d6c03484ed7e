"""
Base Document Models

This module provides the foundational record type for every MongoDB
document in Quill. Documents are schemaless in the store, so the shape
is enforced here: required fields have no default, optional fields do.

Model Hierarchy:
================
    DocumentModel            ← id + created_at / updated_at
       ├── User
       ├── Post
       └── Category

Reference Fields:
=================
Each model lists the fields that hold other documents' ids in
`__references__`. Repositories encode those values as ObjectId on the
way in; `decode_document` turns them back into strings on the way out.

Usage:
======
    from quill.shared.models.base import DocumentModel

    class Category(DocumentModel):
        __collection__ = Collection.CATEGORIES
        __references__ = ("posts",)

        name: str
        posts: list[str] = Field(default_factory=list)

    category = Category.from_document(raw_mongo_doc)
"""

from datetime import datetime
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from quill.shared.models.enums import Collection
from quill.shared.utils.identifiers import decode_document


class DocumentModel(BaseModel):
    """
    Base class for all stored documents.

    Attributes:
        id: Document id as a 24-hex string
        created_at: Set once on insert
        updated_at: Refreshed on every update
    """

    model_config = ConfigDict(extra="ignore")

    __collection__: ClassVar[Collection]
    __references__: ClassVar[tuple[str, ...]] = ()

    id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def collection_name(cls) -> str:
        """Get the collection name."""
        return cls.__collection__.value

    @classmethod
    def from_document(cls, document: Optional[dict[str, Any]]):
        """
        Build a record from a raw MongoDB document.

        Returns None when document is None so callers can pass through
        the result of find_one() directly.
        """
        decoded = decode_document(document)
        if decoded is None:
            return None
        return cls.model_validate(decoded)
