"""
Document Store Primitives

The eight per-document-atomic operations the ReferenceManager is built on.

The manager never talks to the driver directly. It depends on the
DocumentStore protocol, so it can run against MongoDB in production and
against an in-memory fake in unit tests.

Primitives:
===========
    find_by_id(collection, id)                        → document | None
    find_by_ids(collection, ids)                      → [document]
    update_one_add_to_set(collection, id, field, v)   → modified count (0 or 1)
    update_one_remove_from_array(collection, id, f, v)→ modified count (0 or 1)
    update_many_add_to_set(collection, ids, f, v)     → modified count
    update_many_pull_value(collection, ids, f, v)     → modified count
    delete_by_id(collection, id)                      → deleted count (0 or 1)
    delete_many(collection, ids)                      → deleted count

Idempotency:
============
Every array mutation is a set operation. Adding a value that is already
present, removing one that is absent, or deleting a missing document all
succeed and report 0. There is no positional array write anywhere.

Ids and values are 24-hex strings at this interface; MongoDocumentStore
converts them to ObjectId internally.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from quill.shared.core.exceptions import StoreError
from quill.shared.models.enums import Collection
from quill.shared.utils.identifiers import decode_document, to_object_id, to_object_ids


Document = dict[str, Any]


class DocumentStore(Protocol):
    """Storage operations required by the ReferenceManager."""

    async def find_by_id(self, collection: Collection, doc_id: str) -> Optional[Document]: ...

    async def find_by_ids(self, collection: Collection, doc_ids: Sequence[str]) -> list[Document]: ...

    async def update_one_add_to_set(
        self, collection: Collection, doc_id: str, field: str, value: str
    ) -> int: ...

    async def update_one_remove_from_array(
        self, collection: Collection, doc_id: str, field: str, value: str
    ) -> int: ...

    async def update_many_add_to_set(
        self, collection: Collection, doc_ids: Sequence[str], field: str, value: str
    ) -> int: ...

    async def update_many_pull_value(
        self, collection: Collection, doc_ids: Sequence[str], field: str, value: str
    ) -> int: ...

    async def delete_by_id(self, collection: Collection, doc_id: str) -> int: ...

    async def delete_many(self, collection: Collection, doc_ids: Sequence[str]) -> int: ...


@contextmanager
def _translate_errors(operation: str, collection: Collection) -> Iterator[None]:
    """Re-raise driver errors as StoreError."""
    try:
        yield
    except PyMongoError as e:
        raise StoreError(
            operation,
            details={"collection": collection.value, "error": str(e)},
        ) from e


class MongoDocumentStore:
    """
    DocumentStore backed by a motor database.

    Array updates use $addToSet and $pull, which MongoDB applies
    atomically per document, so concurrent requests touching the same
    back-reference can neither duplicate nor lose an entry.
    """

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self.database = database

    def _collection(self, collection: Collection):
        return self.database[collection.value]

    async def find_by_id(self, collection: Collection, doc_id: str) -> Optional[Document]:
        with _translate_errors("find_by_id", collection):
            raw = await self._collection(collection).find_one({"_id": to_object_id(doc_id)})
        return decode_document(raw)

    async def find_by_ids(self, collection: Collection, doc_ids: Sequence[str]) -> list[Document]:
        if not doc_ids:
            return []
        with _translate_errors("find_by_ids", collection):
            cursor = self._collection(collection).find({"_id": {"$in": to_object_ids(doc_ids)}})
            raw_docs = await cursor.to_list(length=None)
        return [decode_document(raw) for raw in raw_docs]

    async def update_one_add_to_set(
        self, collection: Collection, doc_id: str, field: str, value: str
    ) -> int:
        with _translate_errors("update_one_add_to_set", collection):
            result = await self._collection(collection).update_one(
                {"_id": to_object_id(doc_id)},
                {"$addToSet": {field: to_object_id(value)}},
            )
        return result.modified_count

    async def update_one_remove_from_array(
        self, collection: Collection, doc_id: str, field: str, value: str
    ) -> int:
        with _translate_errors("update_one_remove_from_array", collection):
            result = await self._collection(collection).update_one(
                {"_id": to_object_id(doc_id)},
                {"$pull": {field: to_object_id(value)}},
            )
        return result.modified_count

    async def update_many_add_to_set(
        self, collection: Collection, doc_ids: Sequence[str], field: str, value: str
    ) -> int:
        if not doc_ids:
            return 0
        with _translate_errors("update_many_add_to_set", collection):
            result = await self._collection(collection).update_many(
                {"_id": {"$in": to_object_ids(doc_ids)}},
                {"$addToSet": {field: to_object_id(value)}},
            )
        return result.modified_count

    async def update_many_pull_value(
        self, collection: Collection, doc_ids: Sequence[str], field: str, value: str
    ) -> int:
        if not doc_ids:
            return 0
        with _translate_errors("update_many_pull_value", collection):
            result = await self._collection(collection).update_many(
                {"_id": {"$in": to_object_ids(doc_ids)}},
                {"$pull": {field: to_object_id(value)}},
            )
        return result.modified_count

    async def delete_by_id(self, collection: Collection, doc_id: str) -> int:
        with _translate_errors("delete_by_id", collection):
            result = await self._collection(collection).delete_one({"_id": to_object_id(doc_id)})
        return result.deleted_count

    async def delete_many(self, collection: Collection, doc_ids: Sequence[str]) -> int:
        if not doc_ids:
            return 0
        with _translate_errors("delete_many", collection):
            result = await self._collection(collection).delete_many(
                {"_id": {"$in": to_object_ids(doc_ids)}}
            )
        return result.deleted_count
