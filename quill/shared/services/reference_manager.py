"""
Reference Manager

Keeps the references between users, posts and categories consistent on a
document store that has no foreign keys, no cascading deletes and no
multi-document transactions.

Direction of Truth:
===================
    AUTHORITATIVE (written by the client-facing request)
        Post.author_id    → User
        Post.categories   → Category[]

    DERIVED (maintained here, for reverse lookups only)
        User.posts        ← every Post whose author_id is the user
        Category.posts    ← every Post whose categories contain the category

Write Ordering:
===============
    validate targets ──▶ authoritative write ──▶ back-reference writes
         (no writes)         (must succeed)         (best effort, retried)

    - Nothing is written until every referenced user/category is known to exist.
    - Back-reference failures are retried, then logged. They never undo the
      authoritative write and never fail the request.
    - Deletes remove the child before cleaning references and remove the
      parent last, so an interrupted cascade can simply be retried.

Idempotency:
============
Back-references are only ever changed with add-if-absent ($addToSet) and
remove-if-present ($pull). Applying any step twice leaves the same state,
and concurrent requests cannot duplicate or resurrect an entry.

Drift:
======
When a back-reference step touches fewer documents than expected (an id
was already present, already absent, or the owner is gone) the manager
logs "Back-reference drift detected". Read paths repair drift lazily with
prune_dangling_references().

Usage:
======
    manager = ReferenceManager(MongoDocumentStore(db))

    author_id, category_ids = await manager.validate_relationship_targets(
        author_id=data.author_id, category_ids=data.category_ids,
    )
    post = await post_repo.create(...)
    await manager.attach_post(post.id, author_id, category_ids)
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from quill.config.settings import settings
from quill.shared.core.exceptions import (
    ReferenceNotFoundError,
    StoreError,
    ValidationError,
)
from quill.shared.core.logging import get_logger
from quill.shared.db.store import DocumentStore
from quill.shared.models.enums import Collection, ReferenceField
from quill.shared.utils.identifiers import (
    require_identifier,
    require_identifiers,
    unique_in_order,
)


logger = get_logger("quill.references")

StoreCall = Callable[[], Awaitable[int]]


@dataclass
class ReferenceUpdateResult:
    """
    Outcome of one manager operation.

    Attributes:
        operation: Operation name, e.g. "attach_post"
        failed_steps: Back-reference steps that still failed after retries
        drifted_steps: Steps that touched fewer documents than expected
        skipped: True when there was nothing to do and no write was issued
    """

    operation: str
    failed_steps: list[str] = field(default_factory=list)
    drifted_steps: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed_steps


class ReferenceManager:
    """
    Validates relationship targets and maintains back-references.

    Attributes:
        store: DocumentStore the manager writes through
        retry_attempts: Attempts per step before giving up
        retry_delay: Seconds to wait between attempts
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        retry_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ) -> None:
        self.store = store
        attempts = settings.BACKREF_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts
        self.retry_attempts = max(1, attempts)
        self.retry_delay = settings.BACKREF_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay

    # ═══════════════════════════════════════════════════════════════════════════
    # STEP EXECUTION
    # ═══════════════════════════════════════════════════════════════════════════

    async def _with_retry(self, step: str, call: StoreCall, **context) -> int:
        """Run call, retrying on StoreError. The last failure is re-raised."""
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return await call()
            except StoreError as e:
                if attempt == self.retry_attempts:
                    raise
                logger.warning(
                    "Reference write failed, retrying",
                    step=step,
                    attempt=attempt,
                    error=e.message,
                    **context,
                )
                await asyncio.sleep(self.retry_delay)
        raise AssertionError("unreachable")

    async def _back_reference_step(
        self,
        result: ReferenceUpdateResult,
        step: str,
        call: StoreCall,
        expected: int,
        **context,
    ) -> None:
        """
        Apply a derived-reference write.

        Failures are recorded on result and logged, never raised.
        """
        try:
            affected = await self._with_retry(step, call, **context)
        except StoreError as e:
            result.failed_steps.append(step)
            logger.error(
                "Back-reference update failed",
                step=step,
                error=e.message,
                attempts=self.retry_attempts,
                **context,
            )
            return

        logger.debug("Back-reference updated", step=step, affected=affected, **context)
        if affected < expected:
            result.drifted_steps.append(step)
            logger.warning(
                "Back-reference drift detected",
                step=step,
                expected=expected,
                affected=affected,
                **context,
            )

    async def _authoritative_step(self, step: str, call: StoreCall, **context) -> int:
        """Apply a write the cascade cannot continue without. Failures propagate."""
        try:
            return await self._with_retry(step, call, **context)
        except StoreError:
            logger.error("Cascade aborted", step=step, **context)
            raise

    # ═══════════════════════════════════════════════════════════════════════════
    # VALIDATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def validate_relationship_targets(
        self,
        author_id: Optional[str] = None,
        category_ids: Optional[Sequence[str]] = None,
    ) -> tuple[Optional[str], Optional[list[str]]]:
        """
        Check that every referenced user and category exists.

        Identifier syntax is checked for all inputs before the store is
        touched. Categories are checked as a set: the number of matched
        documents must equal the number of distinct requested ids.
        Arguments left as None are not checked.

        Args:
            author_id: User the post will belong to
            category_ids: Categories the post will be filed under

        Returns:
            (author_id, category_ids) in canonical form, duplicates removed

        Raises:
            MalformedIdentifierError: If any id is not a valid ObjectId
            ValidationError: If category_ids is given but empty
            ReferenceNotFoundError: If the user or any category does not exist
        """
        author = require_identifier(author_id, "Author") if author_id is not None else None

        categories: Optional[list[str]] = None
        if category_ids is not None:
            categories = unique_in_order(require_identifiers(category_ids, "Category"))
            if not categories:
                raise ValidationError(
                    "At least one category is required",
                    details={"field": "category_ids"},
                )

        if author is not None:
            if await self.store.find_by_id(Collection.USERS, author) is None:
                raise ReferenceNotFoundError(
                    "Author does not exist",
                    details={"author_id": author},
                )

        if categories is not None:
            found = await self.store.find_by_ids(Collection.CATEGORIES, categories)
            if len(found) != len(categories):
                found_ids = {document["id"] for document in found}
                raise ReferenceNotFoundError(
                    "One or more categories do not exist",
                    details={"missing_category_ids": [c for c in categories if c not in found_ids]},
                )

        return author, categories

    # ═══════════════════════════════════════════════════════════════════════════
    # POST LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════════

    async def attach_post(
        self,
        post_id: str,
        author_id: str,
        category_ids: Sequence[str],
    ) -> ReferenceUpdateResult:
        """
        Register a newly inserted post on its author and categories.

        Must be called after the post document is stored. The author and
        category updates are independent; one failing does not stop the other.
        """
        result = ReferenceUpdateResult("attach_post")
        categories = unique_in_order(category_ids)

        await self._back_reference_step(
            result,
            "attach_post.author",
            lambda: self.store.update_one_add_to_set(
                Collection.USERS, author_id, ReferenceField.POSTS.value, post_id
            ),
            expected=1,
            post_id=post_id,
            author_id=author_id,
        )
        if categories:
            await self._back_reference_step(
                result,
                "attach_post.categories",
                lambda: self.store.update_many_add_to_set(
                    Collection.CATEGORIES, categories, ReferenceField.POSTS.value, post_id
                ),
                expected=len(categories),
                post_id=post_id,
                category_ids=categories,
            )
        return result

    async def reassign_author(
        self,
        post_id: str,
        old_author_id: str,
        new_author_id: str,
    ) -> ReferenceUpdateResult:
        """
        Move a post from one author's back-reference to another's.

        Both the pull and the push are attempted even if one fails.
        Repeating the call is a no-op.
        """
        result = ReferenceUpdateResult("reassign_author")
        if old_author_id == new_author_id:
            result.skipped = True
            return result

        await self._back_reference_step(
            result,
            "reassign_author.old",
            lambda: self.store.update_one_remove_from_array(
                Collection.USERS, old_author_id, ReferenceField.POSTS.value, post_id
            ),
            expected=1,
            post_id=post_id,
            author_id=old_author_id,
        )
        await self._back_reference_step(
            result,
            "reassign_author.new",
            lambda: self.store.update_one_add_to_set(
                Collection.USERS, new_author_id, ReferenceField.POSTS.value, post_id
            ),
            expected=1,
            post_id=post_id,
            author_id=new_author_id,
        )
        return result

    async def reconcile_categories(
        self,
        post_id: str,
        old_category_ids: Iterable[str],
        new_category_ids: Iterable[str],
    ) -> ReferenceUpdateResult:
        """
        Bring category back-references in line with a post's new category set.

        Categories only in the old set lose the post, categories only in
        the new set gain it, categories in both are not touched. Equal
        sets issue no write at all.
        """
        result = ReferenceUpdateResult("reconcile_categories")
        old = unique_in_order(old_category_ids)
        new = unique_in_order(new_category_ids)
        old_set, new_set = set(old), set(new)

        to_remove = [category_id for category_id in old if category_id not in new_set]
        to_add = [category_id for category_id in new if category_id not in old_set]

        if not to_remove and not to_add:
            result.skipped = True
            return result

        if to_remove:
            await self._back_reference_step(
                result,
                "reconcile_categories.remove",
                lambda: self.store.update_many_pull_value(
                    Collection.CATEGORIES, to_remove, ReferenceField.POSTS.value, post_id
                ),
                expected=len(to_remove),
                post_id=post_id,
                category_ids=to_remove,
            )
        if to_add:
            await self._back_reference_step(
                result,
                "reconcile_categories.add",
                lambda: self.store.update_many_add_to_set(
                    Collection.CATEGORIES, to_add, ReferenceField.POSTS.value, post_id
                ),
                expected=len(to_add),
                post_id=post_id,
                category_ids=to_add,
            )
        return result

    async def cascade_delete_post(
        self,
        post_id: str,
        author_id: str,
        category_ids: Sequence[str],
    ) -> ReferenceUpdateResult:
        """
        Remove a deleted post from its author's and categories' back-references.

        Must be called after the post document has been removed.
        """
        result = ReferenceUpdateResult("cascade_delete_post")
        categories = unique_in_order(category_ids)

        await self._back_reference_step(
            result,
            "cascade_delete_post.author",
            lambda: self.store.update_one_remove_from_array(
                Collection.USERS, author_id, ReferenceField.POSTS.value, post_id
            ),
            expected=1,
            post_id=post_id,
            author_id=author_id,
        )
        if categories:
            await self._back_reference_step(
                result,
                "cascade_delete_post.categories",
                lambda: self.store.update_many_pull_value(
                    Collection.CATEGORIES, categories, ReferenceField.POSTS.value, post_id
                ),
                expected=len(categories),
                post_id=post_id,
                category_ids=categories,
            )
        return result

    # ═══════════════════════════════════════════════════════════════════════════
    # CASCADES
    # ═══════════════════════════════════════════════════════════════════════════

    async def cascade_delete_user(
        self,
        user_id: str,
        owned_post_ids: Sequence[str],
    ) -> ReferenceUpdateResult:
        """
        Delete a user together with every post they authored.

        Order:
            1. For each owned post: delete it, then pull it from its categories
            2. Delete the user

        owned_post_ids may come from the user's back-reference, which can
        drift. Ownership is decided by each post's stored author_id: a
        listed post that belongs to someone else is left in place and
        recorded as drift, and a listed post that is already gone is
        skipped.

        If a post delete fails the cascade stops with StoreError and the
        user is left in place, so the same request can be retried.
        """
        result = ReferenceUpdateResult("cascade_delete_user")
        listed = unique_in_order(owned_post_ids)

        posts = {
            document["id"]: document
            for document in await self.store.find_by_ids(Collection.POSTS, listed)
        }
        owned = []
        for post_id in listed:
            document = posts.get(post_id)
            if document is None:
                continue
            if document.get(ReferenceField.AUTHOR.value) != user_id:
                result.drifted_steps.append("cascade_delete_user.foreign_post")
                logger.warning(
                    "Back-reference drift detected",
                    step="cascade_delete_user.foreign_post",
                    user_id=user_id,
                    post_id=post_id,
                    author_id=document.get(ReferenceField.AUTHOR.value),
                )
                continue
            owned.append(post_id)

        for post_id in owned:
            await self._authoritative_step(
                "cascade_delete_user.delete_post",
                lambda: self.store.delete_by_id(Collection.POSTS, post_id),
                user_id=user_id,
                post_id=post_id,
            )
            categories = list(posts[post_id].get(ReferenceField.CATEGORIES.value) or [])
            if categories:
                await self._back_reference_step(
                    result,
                    "cascade_delete_user.categories",
                    lambda: self.store.update_many_pull_value(
                        Collection.CATEGORIES, categories, ReferenceField.POSTS.value, post_id
                    ),
                    expected=len(categories),
                    user_id=user_id,
                    post_id=post_id,
                    category_ids=categories,
                )

        await self._authoritative_step(
            "cascade_delete_user.delete_user",
            lambda: self.store.delete_by_id(Collection.USERS, user_id),
            user_id=user_id,
        )
        logger.info("User cascade complete", user_id=user_id, deleted_posts=len(owned))
        return result

    async def cascade_delete_category(
        self,
        category_id: str,
        affected_post_ids: Sequence[str],
    ) -> ReferenceUpdateResult:
        """
        Delete a category after removing it from every post that uses it.

        Posts themselves are kept. Because Post.categories is authoritative,
        a failed pull stops the cascade before the category is deleted;
        otherwise posts would be left pointing at a missing category.
        """
        result = ReferenceUpdateResult("cascade_delete_category")
        affected = unique_in_order(affected_post_ids)

        if affected:
            modified = await self._authoritative_step(
                "cascade_delete_category.posts",
                lambda: self.store.update_many_pull_value(
                    Collection.POSTS, affected, ReferenceField.CATEGORIES.value, category_id
                ),
                category_id=category_id,
                post_ids=affected,
            )
            if modified < len(affected):
                result.drifted_steps.append("cascade_delete_category.posts")
                logger.warning(
                    "Back-reference drift detected",
                    step="cascade_delete_category.posts",
                    expected=len(affected),
                    affected=modified,
                    category_id=category_id,
                )

        await self._authoritative_step(
            "cascade_delete_category.delete_category",
            lambda: self.store.delete_by_id(Collection.CATEGORIES, category_id),
            category_id=category_id,
        )
        logger.info("Category cascade complete", category_id=category_id, affected_posts=len(affected))
        return result

    # ═══════════════════════════════════════════════════════════════════════════
    # LAZY RECONCILIATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def prune_dangling_references(
        self,
        collection: Collection,
        owner_id: str,
        reference_field: ReferenceField,
        dangling_ids: Iterable[str],
    ) -> ReferenceUpdateResult:
        """
        Remove ids of documents that no longer exist from a reference list.

        Called by read paths after they notice a reference whose target is
        gone. Uses remove-if-present only, so it is safe to race with any
        other operation.
        """
        result = ReferenceUpdateResult("prune_dangling_references")
        dangling = unique_in_order(dangling_ids)
        if not dangling:
            result.skipped = True
            return result

        for dangling_id in dangling:
            await self._back_reference_step(
                result,
                "prune_dangling_references",
                lambda: self.store.update_one_remove_from_array(
                    collection, owner_id, reference_field.value, dangling_id
                ),
                expected=0,
                collection=collection.value,
                owner_id=owner_id,
                dangling_id=dangling_id,
            )

        logger.info(
            "Pruned dangling references",
            collection=collection.value,
            owner_id=owner_id,
            field=reference_field.value,
            count=len(dangling),
        )
        return result
