"""
Base Repository

This module provides a generic base repository with common CRUD operations
over a MongoDB collection. All entity-specific repositories inherit from
this class.

What This Provides:
===================
- get(id)        → Fetch single document by id
- get_by_ids()   → Fetch multiple documents by id, in the order requested
- list()         → List documents with pagination, filtering and sorting
- count()        → Count documents with filtering
- exists()       → Check if a document exists
- create()       → Insert new document (timestamps set here)
- update()       → $set fields and refresh updated_at
- delete()       → Delete a document and return what was removed

Generic Type Pattern:
=====================
    class UserRepository(BaseRepository[User]):
        pass

    repo = UserRepository(db)
    user = await repo.get(user_id)  # Returns User, not dict!

Id Handling:
============
Ids come in as strings. Fields named in the model's __references__ are
encoded to ObjectId before they reach MongoDB, and every ObjectId is
decoded back to a string when a document is read:

    ┌──────────────────────┐  encode   ┌──────────────────────────────┐
    │ {"author_id": "65f.."}│ ───────▶ │ {"author_id": ObjectId(..)}  │
    │ Post(author_id="65f")│ ◀─────── │ MongoDB document             │
    └──────────────────────┘  decode   └──────────────────────────────┘

Back-reference arrays (User.posts, Category.posts) are never written
through this class; only the ReferenceManager mutates them.
"""

from datetime import datetime, timezone
from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from quill.shared.core.exceptions import DuplicateResourceError, StoreError
from quill.shared.models.base import DocumentModel
from quill.shared.utils.identifiers import to_object_id, to_object_ids


# TypeVar bound to DocumentModel ensures we only work with document records
ModelType = TypeVar("ModelType", bound=DocumentModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameter:
        ModelType: The document model class this repository manages

    Attributes:
        model: The document model class
        database: The motor database
        collection: The motor collection for model
    """

    def __init__(self, model: Type[ModelType], database: AsyncIOMotorDatabase) -> None:
        """
        Initialize the repository.

        Args:
            model: Document model class (e.g., User, Post, Category)
            database: Database handle from get_db()
        """
        self.model = model
        self.database = database
        self.collection = database[model.collection_name()]

    # ═══════════════════════════════════════════════════════════════════════════
    # ENCODING
    # ═══════════════════════════════════════════════════════════════════════════

    def _encode(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Convert reference fields from string ids to ObjectIds."""
        encoded = dict(fields)
        for name in self.model.__references__:
            if name not in encoded or encoded[name] is None:
                continue
            value = encoded[name]
            if isinstance(value, (list, tuple, set)):
                encoded[name] = to_object_ids(value)
            else:
                encoded[name] = to_object_id(value)
        return encoded

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[ModelType]:
        return self.model.from_document(document)

    # ═══════════════════════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, record_id: str) -> Optional[ModelType]:
        """
        Get a single document by its id.

        Args:
            record_id: The id of the document to fetch

        Returns:
            The model instance if found, None otherwise
        """
        try:
            document = await self.collection.find_one({"_id": to_object_id(record_id)})
        except PyMongoError as e:
            raise StoreError("get", details={"collection": self.collection.name}) from e
        return self._to_model(document)

    async def get_by_ids(self, ids: Sequence[str]) -> list[ModelType]:
        """
        Get multiple documents by id in a single query.

        Missing ids are skipped, so the result may be shorter than the
        input. Results follow the order of ids.

        Args:
            ids: Ids to fetch

        Returns:
            List of model instances that exist
        """
        if not ids:
            return []

        try:
            cursor = self.collection.find({"_id": {"$in": to_object_ids(ids)}})
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreError("get_by_ids", details={"collection": self.collection.name}) from e

        by_id = {record.id: record for record in map(self._to_model, documents)}
        return [by_id[record_id] for record_id in dict.fromkeys(ids) if record_id in by_id]

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 100,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = "created_at",
        order_desc: bool = True,
    ) -> list[ModelType]:
        """
        List documents with pagination and optional filtering.

        Args:
            offset: Number of documents to skip (for pagination)
            limit: Maximum documents to return (default 100)
            filters: MongoDB filter document; reference fields may be strings
            order_by: Field name to order results by
            order_desc: If True, order descending; if False, ascending

        Returns:
            List of model instances

        Example:
            posts = await repo.list(offset=20, limit=10, filters={"published": True})
        """
        cursor = self.collection.find(self._encode(filters or {}))

        if order_by:
            cursor = cursor.sort(order_by, DESCENDING if order_desc else ASCENDING)

        cursor = cursor.skip(offset).limit(limit)

        try:
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreError("list", details={"collection": self.collection.name}) from e
        return [self._to_model(document) for document in documents]

    async def count(self, filters: Optional[dict[str, Any]] = None) -> int:
        """
        Count documents with optional filtering.

        Args:
            filters: MongoDB filter document

        Returns:
            Number of matching documents
        """
        try:
            return await self.collection.count_documents(self._encode(filters or {}))
        except PyMongoError as e:
            raise StoreError("count", details={"collection": self.collection.name}) from e

    async def exists(self, record_id: str) -> bool:
        """
        Check if a document exists without loading it.

        Args:
            record_id: The id to check

        Returns:
            True if document exists, False otherwise
        """
        return await self.count({"_id": to_object_id(record_id)}) > 0

    async def find_one_by(self, field: str, value: Any) -> Optional[ModelType]:
        """Get the first document whose field equals value."""
        try:
            document = await self.collection.find_one(self._encode({field: value}))
        except PyMongoError as e:
            raise StoreError("find_one_by", details={"collection": self.collection.name}) from e
        return self._to_model(document)

    # ═══════════════════════════════════════════════════════════════════════════
    # CREATE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Insert a new document.

        Sets created_at and updated_at, inserts, and returns the stored
        record with its generated id.

        Args:
            **kwargs: Field values for the new document

        Returns:
            The created model instance

        Raises:
            DuplicateResourceError: If a unique index rejects the insert
        """
        now = datetime.now(timezone.utc)
        document = self._encode(kwargs)
        document["created_at"] = now
        document["updated_at"] = now

        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateResourceError(
                f"{self.model.__name__} already exists",
                details={"key_value": (e.details or {}).get("keyValue")},
            ) from e
        except PyMongoError as e:
            raise StoreError("create", details={"collection": self.collection.name}) from e

        document["_id"] = result.inserted_id
        return self._to_model(document)

    # ═══════════════════════════════════════════════════════════════════════════
    # UPDATE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def update(self, record_id: str, **kwargs: Any) -> Optional[ModelType]:
        """
        Update a document by id.

        Applies a $set of the given fields (None values are skipped to
        allow partial updates) and refreshes updated_at atomically.

        Args:
            record_id: Id of the document to update
            **kwargs: Fields to update

        Returns:
            Updated model instance, or None if not found

        Raises:
            DuplicateResourceError: If a unique index rejects the new values
        """
        changes = {field: value for field, value in kwargs.items() if value is not None}
        changes["updated_at"] = datetime.now(timezone.utc)

        try:
            document = await self.collection.find_one_and_update(
                {"_id": to_object_id(record_id)},
                {"$set": self._encode(changes)},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateResourceError(f"{self.model.__name__} already exists") from e
        except PyMongoError as e:
            raise StoreError("update", details={"collection": self.collection.name}) from e
        return self._to_model(document)

    # ═══════════════════════════════════════════════════════════════════════════
    # DELETE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def delete(self, record_id: str) -> Optional[ModelType]:
        """
        Delete a document by id.

        Args:
            record_id: Id of the document to delete

        Returns:
            The deleted model instance, or None if not found
        """
        try:
            document = await self.collection.find_one_and_delete({"_id": to_object_id(record_id)})
        except PyMongoError as e:
            raise StoreError("delete", details={"collection": self.collection.name}) from e
        return self._to_model(document)
