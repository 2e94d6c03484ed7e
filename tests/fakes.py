"""
In-memory DocumentStore used by ReferenceManager tests.

Documents are plain dicts keyed by their string id, in the same decoded
shape MongoDocumentStore returns. Failures can be injected per primitive
and collection, and every write is recorded in `calls`.
"""

import asyncio
import copy
from typing import Any, Optional, Sequence

from bson import ObjectId

from quill.shared.core.exceptions import StoreError
from quill.shared.models.enums import Collection


def new_id() -> str:
    return str(ObjectId())


class InMemoryDocumentStore:
    """DocumentStore backed by dicts."""

    def __init__(self) -> None:
        self.data: dict[Collection, dict[str, dict[str, Any]]] = {
            collection: {} for collection in Collection
        }
        self.calls: list[tuple[str, Collection]] = []
        self._failures: dict[tuple[str, Optional[Collection]], Optional[int]] = {}

    # ─── test helpers ────────────────────────────────────────────────────────

    def insert(self, collection: Collection, **fields: Any) -> str:
        doc_id = fields.pop("id", None) or new_id()
        self.data[collection][doc_id] = {"id": doc_id, **fields}
        return doc_id

    def get(self, collection: Collection, doc_id: str) -> Optional[dict[str, Any]]:
        return self.data[collection].get(doc_id)

    def fail(
        self,
        operation: str,
        collection: Optional[Collection] = None,
        times: Optional[int] = None,
    ) -> None:
        """Make `operation` raise StoreError; `times=None` fails forever."""
        self._failures[(operation, collection)] = times

    def writes(self) -> list[tuple[str, Collection]]:
        return [call for call in self.calls if not call[0].startswith("find")]

    def _maybe_fail(self, operation: str, collection: Collection) -> None:
        self.calls.append((operation, collection))
        for key in ((operation, collection), (operation, None)):
            if key not in self._failures:
                continue
            remaining = self._failures[key]
            if remaining is not None:
                if remaining <= 0:
                    continue
                self._failures[key] = remaining - 1
            raise StoreError(operation, details={"collection": collection.value})

    # ─── DocumentStore ───────────────────────────────────────────────────────

    async def find_by_id(self, collection: Collection, doc_id: str) -> Optional[dict[str, Any]]:
        self._maybe_fail("find_by_id", collection)
        doc = self.data[collection].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_by_ids(self, collection: Collection, doc_ids: Sequence[str]) -> list[dict[str, Any]]:
        self._maybe_fail("find_by_ids", collection)
        return [
            copy.deepcopy(self.data[collection][doc_id])
            for doc_id in dict.fromkeys(doc_ids)
            if doc_id in self.data[collection]
        ]

    async def update_one_add_to_set(
        self, collection: Collection, doc_id: str, field: str, value: str
    ) -> int:
        self._maybe_fail("update_one_add_to_set", collection)
        await asyncio.sleep(0)
        return self._add(collection, doc_id, field, value)

    async def update_one_remove_from_array(
        self, collection: Collection, doc_id: str, field: str, value: str
    ) -> int:
        self._maybe_fail("update_one_remove_from_array", collection)
        await asyncio.sleep(0)
        return self._pull(collection, doc_id, field, value)

    async def update_many_add_to_set(
        self, collection: Collection, doc_ids: Sequence[str], field: str, value: str
    ) -> int:
        self._maybe_fail("update_many_add_to_set", collection)
        await asyncio.sleep(0)
        return sum(self._add(collection, doc_id, field, value) for doc_id in set(doc_ids))

    async def update_many_pull_value(
        self, collection: Collection, doc_ids: Sequence[str], field: str, value: str
    ) -> int:
        self._maybe_fail("update_many_pull_value", collection)
        await asyncio.sleep(0)
        return sum(self._pull(collection, doc_id, field, value) for doc_id in set(doc_ids))

    async def delete_by_id(self, collection: Collection, doc_id: str) -> int:
        self._maybe_fail("delete_by_id", collection)
        return 1 if self.data[collection].pop(doc_id, None) is not None else 0

    async def delete_many(self, collection: Collection, doc_ids: Sequence[str]) -> int:
        self._maybe_fail("delete_many", collection)
        return sum(
            1 for doc_id in set(doc_ids) if self.data[collection].pop(doc_id, None) is not None
        )

    def _add(self, collection: Collection, doc_id: str, field: str, value: str) -> int:
        doc = self.data[collection].get(doc_id)
        if doc is None:
            return 0
        values = doc.setdefault(field, [])
        if value in values:
            return 0
        values.append(value)
        return 1

    def _pull(self, collection: Collection, doc_id: str, field: str, value: str) -> int:
        doc = self.data[collection].get(doc_id)
        if doc is None or value not in doc.get(field, []):
            return 0
        doc[field] = [item for item in doc[field] if item != value]
        return 1
