"""
MongoDocumentStore tests against mongomock-motor.
"""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from quill.shared.core.exceptions import StoreError
from quill.shared.db.store import MongoDocumentStore
from quill.shared.models.enums import Collection


@pytest.fixture
def mongo_store(db):
    return MongoDocumentStore(db)


async def insert_category(db, name):
    result = await db.categories.insert_one({"name": name, "posts": []})
    return str(result.inserted_id)


class TestMongoDocumentStore:
    async def test_find_decodes_ids(self, db, mongo_store):
        post_id = ObjectId()
        result = await db.categories.insert_one({"name": "x", "posts": [post_id]})

        document = await mongo_store.find_by_id(Collection.CATEGORIES, str(result.inserted_id))

        assert document["id"] == str(result.inserted_id)
        assert document["posts"] == [str(post_id)]
        assert "_id" not in document

    async def test_find_by_ids_skips_missing(self, db, mongo_store):
        x = await insert_category(db, "x")

        found = await mongo_store.find_by_ids(Collection.CATEGORIES, [x, str(ObjectId())])

        assert [document["id"] for document in found] == [x]

    async def test_add_to_set_is_idempotent(self, db, mongo_store):
        x = await insert_category(db, "x")
        post_id = str(ObjectId())

        first = await mongo_store.update_one_add_to_set(Collection.CATEGORIES, x, "posts", post_id)
        await mongo_store.update_one_add_to_set(Collection.CATEGORIES, x, "posts", post_id)

        stored = await db.categories.find_one({"_id": ObjectId(x)})
        assert first == 1
        assert stored["posts"] == [ObjectId(post_id)]

    async def test_update_many_and_pull(self, db, mongo_store):
        x = await insert_category(db, "x")
        y = await insert_category(db, "y")
        post_id = str(ObjectId())

        added = await mongo_store.update_many_add_to_set(Collection.CATEGORIES, [x, y], "posts", post_id)
        pulled = await mongo_store.update_many_pull_value(Collection.CATEGORIES, [x], "posts", post_id)

        assert added == 2
        assert pulled == 1
        assert (await db.categories.find_one({"_id": ObjectId(x)}))["posts"] == []
        assert (await db.categories.find_one({"_id": ObjectId(y)}))["posts"] == [ObjectId(post_id)]

    async def test_remove_from_array(self, db, mongo_store):
        post_id = ObjectId()
        result = await db.users.insert_one({"email": "a@example.com", "posts": [post_id]})

        removed = await mongo_store.update_one_remove_from_array(
            Collection.USERS, str(result.inserted_id), "posts", str(post_id)
        )

        assert removed == 1
        assert (await db.users.find_one({"_id": result.inserted_id}))["posts"] == []

    async def test_deletes(self, db, mongo_store):
        x = await insert_category(db, "x")
        y = await insert_category(db, "y")
        z = await insert_category(db, "z")

        assert await mongo_store.delete_by_id(Collection.CATEGORIES, x) == 1
        assert await mongo_store.delete_by_id(Collection.CATEGORIES, x) == 0
        assert await mongo_store.delete_many(Collection.CATEGORIES, [y, z, x]) == 2
        assert await db.categories.count_documents({}) == 0

    async def test_empty_id_lists_issue_no_queries(self):
        database = MagicMock()
        mongo_store = MongoDocumentStore(database)

        assert await mongo_store.find_by_ids(Collection.POSTS, []) == []
        assert await mongo_store.update_many_pull_value(Collection.POSTS, [], "categories", str(ObjectId())) == 0
        assert await mongo_store.delete_many(Collection.POSTS, []) == 0
        database.__getitem__.assert_not_called()

    async def test_driver_errors_become_store_errors(self):
        collection = MagicMock()
        collection.delete_one.side_effect = AutoReconnect("connection reset")
        database = MagicMock()
        database.__getitem__.return_value = collection

        with pytest.raises(StoreError) as exc_info:
            await MongoDocumentStore(database).delete_by_id(Collection.POSTS, str(ObjectId()))

        assert exc_info.value.status_code == 503
        assert exc_info.value.details["operation"] == "delete_by_id"
