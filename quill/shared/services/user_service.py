"""
User Service

Business logic for user accounts.

Deleting a user cascades to every post they authored. The owned posts
are the union of the user's back-reference list and a query on
posts.author_id, so a drifted back-reference cannot leave a post behind
pointing at a deleted author. A listed post whose author_id names
another user is not deleted.

Usage:
======
    from quill.shared.services.user_service import UserService

    service = UserService(db)
    view = await service.create_user(email, name, password)
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.config.settings import settings
from quill.shared.core.exceptions import (
    DuplicateResourceError,
    NoChangesDetectedError,
    UserNotFoundError,
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
from quill.shared.utils.security import SecurityUtils


@dataclass
class UserView:
    """A user with their posts and those posts' categories resolved."""

    user: User
    posts: list[Post] = field(default_factory=list)
    categories: dict[str, Category] = field(default_factory=dict)


@dataclass
class UserStats:
    """Aggregate numbers over a user's posts."""

    user_id: str
    total_posts: int
    published_posts: int
    total_views: int


class UserService:
    """
    Service for user-related business logic.

    Handles:
    - Registration with unique email and hashed password
    - Listing and reading users with their posts
    - Partial profile updates
    - Cascading deletion of a user's posts
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        references: Optional[ReferenceManager] = None,
    ) -> None:
        self.database = database
        self.user_repo = UserRepository(database)
        self.post_repo = PostRepository(database)
        self.category_repo = CategoryRepository(database)
        self.references = references or ReferenceManager(MongoDocumentStore(database))

    async def populate(self, users: Sequence[User]) -> list[UserView]:
        """
        Resolve every user's posts (and the posts' categories) in batched queries.

        Post ids that no longer resolve are dropped from the view and
        pruned from the stored user.
        """
        post_ids = unique_in_order(post_id for user in users for post_id in user.posts)
        posts = {post.id: post for post in await self.post_repo.get_by_ids(post_ids)}

        category_ids = unique_in_order(c for post in posts.values() for c in post.categories)
        categories = {
            category.id: category
            for category in await self.category_repo.get_by_ids(category_ids)
        }

        views = []
        for user in users:
            dangling = [post_id for post_id in user.posts if post_id not in posts]
            if dangling:
                await self.references.prune_dangling_references(
                    Collection.USERS, user.id, ReferenceField.POSTS, dangling
                )
            views.append(
                UserView(
                    user=user,
                    posts=[posts[post_id] for post_id in user.posts if post_id in posts],
                    categories=categories,
                )
            )
        return views

    async def _get_user(self, user_id: str) -> User:
        user_id = require_identifier(user_id, "User")
        user = await self.user_repo.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def create_user(
        self,
        email: str,
        name: str,
        password: str,
        bio: str = "",
    ) -> UserView:
        """
        Register a new user.

        Raises:
            DuplicateResourceError: If the email is already registered
        """
        email = email.strip().lower()
        if await self.user_repo.email_exists(email):
            raise DuplicateResourceError(
                "User with this email already exists",
                details={"email": email},
            )

        user = await self.user_repo.create(
            email=email,
            name=name,
            password=SecurityUtils.hash_password(password),
            bio=bio,
            posts=[],
        )
        logger.info("User created", user_id=user.id)
        return UserView(user=user)

    async def list_users(self, skip: int = 0, take: Optional[int] = None) -> list[UserView]:
        """List users newest first, with their posts."""
        limit = min(take or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        users = await self.user_repo.list(offset=skip, limit=limit)
        return await self.populate(users)

    async def get_user(self, user_id: str) -> UserView:
        """
        Get a user with their posts.

        Raises:
            MalformedIdentifierError: If user_id is malformed
            UserNotFoundError: If the user does not exist
        """
        user = await self._get_user(user_id)
        return (await self.populate([user]))[0]

    async def get_user_stats(self, user_id: str) -> UserStats:
        """Count posts, published posts and total views for a user."""
        view = await self.get_user(user_id)
        return UserStats(
            user_id=view.user.id,
            total_posts=len(view.posts),
            published_posts=sum(1 for post in view.posts if post.published),
            total_views=sum(post.view_count for post in view.posts),
        )

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> UserView:
        """
        Apply a partial profile update.

        A new password always counts as a change and is re-hashed.

        Raises:
            UserNotFoundError: If the user does not exist
            DuplicateResourceError: If the new email belongs to another user
            NoChangesDetectedError: If nothing would change
        """
        user = await self._get_user(user_id)
        changes = {key: value for key, value in changes.items() if value is not None}

        password = changes.pop("password", None)
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()

        update = {
            field: value
            for field, value in changes.items()
            if getattr(user, field) != value
        }
        if password is not None:
            update["password"] = SecurityUtils.hash_password(password)
        if not update:
            raise NoChangesDetectedError("No changes detected to update")

        if "email" in update and await self.user_repo.email_exists(update["email"]):
            raise DuplicateResourceError(
                "User with this email already exists",
                details={"email": update["email"]},
            )

        updated = await self.user_repo.update(user.id, **update)
        if updated is None:
            raise UserNotFoundError(user.id)

        logger.info("User updated", user_id=user.id, fields=sorted(update))
        return (await self.populate([updated]))[0]

    async def delete_user(self, user_id: str) -> UserView:
        """
        Delete a user and every post they authored.

        Returns:
            The deleted user (posts not populated)
        """
        user = await self._get_user(user_id)
        owned = unique_in_order(user.posts + await self.post_repo.list_ids_by_author(user.id))

        await self.references.cascade_delete_user(user.id, owned)

        logger.info("User deleted", user_id=user.id, candidate_posts=len(owned))
        return UserView(user=user)
