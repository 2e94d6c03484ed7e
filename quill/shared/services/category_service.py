"""
Category Service

Business logic for categories.

Deleting a category never deletes posts. The category id is first
removed from every post that lists it, then the category document goes.
Affected posts are the union of the category's back-reference and a
query on posts.categories.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.shared.core.exceptions import (
    CategoryNotFoundError,
    DuplicateResourceError,
    NoChangesDetectedError,
)
from quill.shared.core.logging import logger
from quill.shared.db.store import MongoDocumentStore
from quill.shared.models.category import Category
from quill.shared.models.enums import Collection, ReferenceField
from quill.shared.models.post import Post
from quill.shared.repositories.category_repository import CategoryRepository
from quill.shared.repositories.post_repository import PostRepository
from quill.shared.services.reference_manager import ReferenceManager
from quill.shared.utils.identifiers import require_identifier, unique_in_order


@dataclass
class CategoryView:
    """A category with its posts resolved."""

    category: Category
    posts: list[Post] = field(default_factory=list)


class CategoryService:
    """Service for category-related business logic."""

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        references: Optional[ReferenceManager] = None,
    ) -> None:
        self.database = database
        self.category_repo = CategoryRepository(database)
        self.post_repo = PostRepository(database)
        self.references = references or ReferenceManager(MongoDocumentStore(database))

    async def populate(self, categories: Sequence[Category]) -> list[CategoryView]:
        """Resolve posts for each category, pruning ids of deleted posts."""
        post_ids = unique_in_order(p for category in categories for p in category.posts)
        posts = {post.id: post for post in await self.post_repo.get_by_ids(post_ids)}

        views = []
        for category in categories:
            dangling = [p for p in category.posts if p not in posts]
            if dangling:
                await self.references.prune_dangling_references(
                    Collection.CATEGORIES, category.id, ReferenceField.POSTS, dangling
                )
            views.append(
                CategoryView(
                    category=category,
                    posts=[posts[p] for p in category.posts if p in posts],
                )
            )
        return views

    async def _get_category(self, category_id: str) -> Category:
        category_id = require_identifier(category_id, "Category")
        category = await self.category_repo.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    async def create_category(self, name: str, description: str = "") -> CategoryView:
        """
        Create a category.

        Raises:
            DuplicateResourceError: If the name is already taken
        """
        name = name.strip()
        if await self.category_repo.name_exists(name):
            raise DuplicateResourceError(
                "Category with that name already exists",
                details={"name": name},
            )

        category = await self.category_repo.create(name=name, description=description, posts=[])
        logger.info("Category created", category_id=category.id, name=name)
        return CategoryView(category=category)

    async def list_categories(self) -> list[CategoryView]:
        """All categories sorted by name, with posts."""
        categories = await self.category_repo.list_by_name(limit=0)
        return await self.populate(categories)

    async def get_category(self, category_id: str) -> CategoryView:
        """
        Get a category with its posts.

        Raises:
            MalformedIdentifierError: If category_id is malformed
            CategoryNotFoundError: If the category does not exist
        """
        category = await self._get_category(category_id)
        return (await self.populate([category]))[0]

    async def update_category(self, category_id: str, changes: dict[str, Any]) -> CategoryView:
        """
        Apply a partial update to name and/or description.

        Raises:
            CategoryNotFoundError: If the category does not exist
            DuplicateResourceError: If the new name belongs to another category
            NoChangesDetectedError: If nothing would change
        """
        category = await self._get_category(category_id)
        changes = {key: value for key, value in changes.items() if value is not None}
        if "name" in changes:
            changes["name"] = changes["name"].strip()

        update = {
            field: value
            for field, value in changes.items()
            if getattr(category, field) != value
        }
        if not update:
            raise NoChangesDetectedError()

        if "name" in update and await self.category_repo.name_exists(update["name"]):
            raise DuplicateResourceError(
                "Category with that name already exists",
                details={"name": update["name"]},
            )

        updated = await self.category_repo.update(category.id, **update)
        if updated is None:
            raise CategoryNotFoundError(category.id)
        return (await self.populate([updated]))[0]

    async def delete_category(self, category_id: str) -> CategoryView:
        """
        Delete a category, detaching it from every post first.

        Returns:
            The deleted category (posts not populated)
        """
        category = await self._get_category(category_id)
        affected = unique_in_order(
            category.posts + await self.post_repo.list_ids_by_category(category.id)
        )

        await self.references.cascade_delete_category(category.id, affected)

        logger.info("Category deleted", category_id=category.id, affected_posts=len(affected))
        return CategoryView(category=category)
