"""
Post Repository

Database operations specific to the Post model.

Common Operations:
==================
- increment_view_count() → Atomic $inc on view_count, returns updated post
- search()               → Case-insensitive keyword match on title/content
- list_ids_by_author()   → Post ids whose author_id points at a user
- list_ids_by_category() → Post ids whose categories contain a category

The two list_ids_* queries read the AUTHORITATIVE side of a relationship.
Cascading deletes combine them with the derived back-reference lists so a
drifted back-reference cannot hide a post from the cascade.
"""

import re
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from quill.shared.core.exceptions import StoreError
from quill.shared.repositories.base import BaseRepository
from quill.shared.models.post import Post
from quill.shared.utils.identifiers import to_object_id


class PostRepository(BaseRepository[Post]):
    """Repository for Post database operations."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        super().__init__(Post, database)

    async def increment_view_count(self, post_id: str) -> Optional[Post]:
        """
        Atomically add one to view_count.

        Returns:
            The post after the increment, or None if it does not exist
        """
        try:
            document = await self.collection.find_one_and_update(
                {"_id": to_object_id(post_id)},
                {"$inc": {"view_count": 1}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreError("increment_view_count", details={"collection": self.collection.name}) from e
        return self._to_model(document)

    async def search(self, query: str, *, limit: int = 100) -> list[Post]:
        """
        Find posts whose title or content contains query (case-insensitive).

        Args:
            query: Keyword to look for; matched literally, not as a regex
            limit: Maximum posts to return

        Returns:
            Matching posts, newest first
        """
        pattern = {"$regex": re.escape(query.strip()), "$options": "i"}
        return await self.list(
            limit=limit,
            filters={"$or": [{"title": pattern}, {"content": pattern}]},
        )

    async def _list_ids(self, filters: dict) -> list[str]:
        try:
            cursor = self.collection.find(filters, {"_id": 1})
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreError("list_ids", details={"collection": self.collection.name}) from e
        return [str(document["_id"]) for document in documents]

    async def list_ids_by_author(self, author_id: str) -> list[str]:
        """Ids of every post authored by author_id."""
        return await self._list_ids({"author_id": to_object_id(author_id)})

    async def list_ids_by_category(self, category_id: str) -> list[str]:
        """Ids of every post filed under category_id."""
        return await self._list_ids({"categories": to_object_id(category_id)})
