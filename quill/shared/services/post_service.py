"""
Post Service

Business logic for posts. Every write that touches a relationship goes
through the ReferenceManager:

    create  → validate targets → insert post → attach_post
    update  → validate targets → update post → reassign_author / reconcile_categories
    delete  → delete post → cascade_delete_post

Reads populate the author and categories of each post. A category id
that points at a deleted category is treated as absent and pruned from
the post.

Usage:
======
    from quill.shared.services.post_service import PostService

    service = PostService(db)
    view = await service.create_post(title, content, author_id, category_ids)
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.config.settings import settings
from quill.shared.core.exceptions import (
    NoChangesDetectedError,
    PostNotFoundError,
    ValidationError,
)
from quill.shared.core.logging import logger
from quill.shared.db.store import MongoDocumentStore
from quill.shared.models.category import Category
from quill.shared.models.enums import Collection, ReferenceField
from quill.shared.models.post import Post
from quill.shared.models.user import User
from quill.shared.repositories.category_repository import CategoryRepository
from quill.shared.repositories.post_repository import PostRepository
from quill.shared.repositories.user_repository import UserRepository
from quill.shared.services.reference_manager import ReferenceManager
from quill.shared.utils.identifiers import require_identifier, unique_in_order


@dataclass
class PostView:
    """A post with its author and categories resolved."""

    post: Post
    author: Optional[User]
    categories: list[Category]


class PostService:
    """
    Service for post-related business logic.

    Handles:
    - Creating posts and registering them on author and categories
    - Listing, searching and reading posts (reads bump view_count)
    - Partial updates including author and category reassignment
    - Deleting posts and cleaning their back-references
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        references: Optional[ReferenceManager] = None,
    ) -> None:
        """
        Initialize PostService.

        Args:
            database: Database handle
            references: ReferenceManager to use; built over the database if omitted
        """
        self.database = database
        self.post_repo = PostRepository(database)
        self.user_repo = UserRepository(database)
        self.category_repo = CategoryRepository(database)
        self.references = references or ReferenceManager(MongoDocumentStore(database))

    # ═══════════════════════════════════════════════════════════════════════════
    # POPULATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def populate(self, posts: Sequence[Post]) -> list[PostView]:
        """
        Resolve author and categories for each post in two batched queries.

        Category ids whose category no longer exists are dropped from the
        view and pruned from the stored post.
        """
        author_ids = unique_in_order(post.author_id for post in posts)
        category_ids = unique_in_order(c for post in posts for c in post.categories)

        authors = {user.id: user for user in await self.user_repo.get_by_ids(author_ids)}
        categories = {
            category.id: category
            for category in await self.category_repo.get_by_ids(category_ids)
        }

        views = []
        for post in posts:
            dangling = [c for c in post.categories if c not in categories]
            if dangling:
                await self.references.prune_dangling_references(
                    Collection.POSTS, post.id, ReferenceField.CATEGORIES, dangling
                )
            author = authors.get(post.author_id)
            if author is None:
                logger.warning(
                    "Post author missing",
                    post_id=post.id,
                    author_id=post.author_id,
                )
            views.append(
                PostView(
                    post=post,
                    author=author,
                    categories=[categories[c] for c in post.categories if c in categories],
                )
            )
        return views

    # ═══════════════════════════════════════════════════════════════════════════
    # CRUD
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_post(
        self,
        title: str,
        content: str,
        author_id: str,
        category_ids: Sequence[str],
        published: bool = False,
    ) -> PostView:
        """
        Create a post.

        Flow:
        1. Validate author and categories (nothing written on failure)
        2. Insert the post (source of truth)
        3. Add the post id to the author's and categories' back-references

        Raises:
            MalformedIdentifierError: If an id is malformed
            ValidationError: If no category is given
            ReferenceNotFoundError: If the author or a category does not exist
        """
        author_id, category_ids = await self.references.validate_relationship_targets(
            author_id=author_id,
            category_ids=category_ids,
        )

        post = await self.post_repo.create(
            title=title,
            content=content,
            published=published,
            view_count=0,
            author_id=author_id,
            categories=category_ids,
        )
        await self.references.attach_post(post.id, author_id, category_ids)

        logger.info("Post created", post_id=post.id, author_id=author_id)
        return (await self.populate([post]))[0]

    async def list_posts(
        self,
        published: Optional[bool] = None,
        skip: int = 0,
        take: Optional[int] = None,
    ) -> list[PostView]:
        """
        List posts newest first.

        Args:
            published: Only posts with this published flag, if given
            skip: Posts to skip
            take: Page size, capped at MAX_PAGE_SIZE
        """
        limit = min(take or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        filters = {"published": published} if published is not None else {}
        posts = await self.post_repo.list(offset=skip, limit=limit, filters=filters)
        return await self.populate(posts)

    async def search_posts(self, query: str) -> list[PostView]:
        """
        Keyword search over title and content.

        Raises:
            ValidationError: If query is empty or whitespace
        """
        if not query or not query.strip():
            raise ValidationError("Search query cannot be empty", details={"field": "q"})
        posts = await self.post_repo.search(query, limit=settings.MAX_PAGE_SIZE)
        return await self.populate(posts)

    async def get_post(self, post_id: str) -> PostView:
        """
        Read a single post, incrementing its view counter atomically.

        Raises:
            MalformedIdentifierError: If post_id is malformed
            PostNotFoundError: If the post does not exist
        """
        post_id = require_identifier(post_id, "Post")
        post = await self.post_repo.increment_view_count(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return (await self.populate([post]))[0]

    async def update_post(self, post_id: str, changes: dict[str, Any]) -> PostView:
        """
        Apply a partial update.

        Only keys present in changes are considered. author_id and
        category_ids are validated before anything is written; the post is
        updated first and back-references are adjusted afterwards.

        Args:
            post_id: Post to update
            changes: Subset of title, content, published, author_id, category_ids

        Raises:
            MalformedIdentifierError: If any id is malformed
            ReferenceNotFoundError: If the new author or a category does not exist
            PostNotFoundError: If the post does not exist
            NoChangesDetectedError: If nothing would change and no author_id was given
        """
        post_id = require_identifier(post_id, "Post")
        changes = {key: value for key, value in changes.items() if value is not None}

        author_id, category_ids = await self.references.validate_relationship_targets(
            author_id=changes.pop("author_id", None),
            category_ids=changes.pop("category_ids", None),
        )

        existing = await self.post_repo.get(post_id)
        if existing is None:
            raise PostNotFoundError(post_id)

        update = {
            field: value
            for field, value in changes.items()
            if getattr(existing, field) != value
        }
        author_changed = author_id is not None and author_id != existing.author_id
        categories_changed = category_ids is not None and set(category_ids) != set(existing.categories)

        if author_changed:
            update["author_id"] = author_id
        if categories_changed:
            update["categories"] = category_ids
        if not update:
            # Re-sending the current author is an accepted no-op.
            if author_id is None:
                raise NoChangesDetectedError()
            return (await self.populate([existing]))[0]

        updated = await self.post_repo.update(post_id, **update)
        if updated is None:
            raise PostNotFoundError(post_id)

        if author_changed:
            await self.references.reassign_author(post_id, existing.author_id, author_id)
        if categories_changed:
            await self.references.reconcile_categories(post_id, existing.categories, category_ids)

        logger.info("Post updated", post_id=post_id, fields=sorted(update))
        return (await self.populate([updated]))[0]

    async def delete_post(self, post_id: str) -> PostView:
        """
        Delete a post, then remove it from its author and categories.

        Returns:
            The deleted post, populated

        Raises:
            MalformedIdentifierError: If post_id is malformed
            PostNotFoundError: If the post does not exist
        """
        post_id = require_identifier(post_id, "Post")
        deleted = await self.post_repo.delete(post_id)
        if deleted is None:
            raise PostNotFoundError(post_id)

        await self.references.cascade_delete_post(deleted.id, deleted.author_id, deleted.categories)

        logger.info("Post deleted", post_id=post_id)
        return (await self.populate([deleted]))[0]
