"""
ReferenceManager tests against the in-memory document store.

These check that back-references converge to the authoritative post
fields and that partial failures are logged, not raised.
"""

import asyncio

import pytest
from structlog.testing import capture_logs

from quill.shared.core.exceptions import (
    MalformedIdentifierError,
    ReferenceNotFoundError,
    StoreError,
    ValidationError,
)
from quill.shared.models.enums import Collection, ReferenceField

from tests.fakes import new_id


def seed_user(store, posts=None):
    return store.insert(Collection.USERS, email=f"{new_id()}@example.com", name="U", posts=list(posts or []))


def seed_category(store, name, posts=None):
    return store.insert(Collection.CATEGORIES, name=name, posts=list(posts or []))


def seed_post(store, author_id, category_ids):
    post_id = store.insert(
        Collection.POSTS, title="T", content="content body", author_id=author_id,
        categories=list(category_ids),
    )
    store.get(Collection.USERS, author_id)["posts"].append(post_id)
    for category_id in category_ids:
        store.get(Collection.CATEGORIES, category_id)["posts"].append(post_id)
    return post_id


class TestValidateRelationshipTargets:
    """Targets are checked before anything is written."""

    async def test_returns_canonical_ids(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")

        author_id, categories = await manager.validate_relationship_targets(
            author_id=author, category_ids=[x, y, x]
        )

        assert author_id == author
        assert categories == [x, y]

    async def test_zero_categories_rejected_without_writes(self, store, manager):
        author = seed_user(store)

        with pytest.raises(ValidationError):
            await manager.validate_relationship_targets(author_id=author, category_ids=[])

        assert store.writes() == []

    async def test_unknown_author_rejected_and_store_unchanged(self, store, manager):
        x = seed_category(store, "x")
        before = {c: dict(docs) for c, docs in store.data.items()}

        with pytest.raises(ReferenceNotFoundError):
            await manager.validate_relationship_targets(author_id=new_id(), category_ids=[x])

        assert store.data == before
        assert store.writes() == []

    async def test_missing_category_reported(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        missing = new_id()

        with pytest.raises(ReferenceNotFoundError) as exc_info:
            await manager.validate_relationship_targets(author_id=author, category_ids=[x, missing])

        assert exc_info.value.details["missing_category_ids"] == [missing]
        assert exc_info.value.error_code == "REFERENCE_NOT_FOUND"

    async def test_malformed_id_checked_before_store(self, store, manager):
        with pytest.raises(MalformedIdentifierError):
            await manager.validate_relationship_targets(author_id="nope", category_ids=[new_id()])

        assert store.calls == []


class TestAttachPost:
    async def test_post_appears_exactly_once(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")
        post_id = store.insert(Collection.POSTS, author_id=author, categories=[x, y])

        result = await manager.attach_post(post_id, author, [x, y])
        again = await manager.attach_post(post_id, author, [x, y])

        assert result.ok and not result.drifted_steps
        assert store.get(Collection.USERS, author)["posts"] == [post_id]
        assert store.get(Collection.CATEGORIES, x)["posts"] == [post_id]
        assert store.get(Collection.CATEGORIES, y)["posts"] == [post_id]
        # Second application changes nothing and is reported as drift.
        assert again.ok
        assert set(again.drifted_steps) == {"attach_post.author", "attach_post.categories"}

    async def test_concurrent_attaches_both_land_once(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        first = store.insert(Collection.POSTS, author_id=author, categories=[x])
        second = store.insert(Collection.POSTS, author_id=author, categories=[x])

        await asyncio.gather(
            manager.attach_post(first, author, [x]),
            manager.attach_post(second, author, [x]),
            manager.attach_post(first, author, [x]),
        )

        assert sorted(store.get(Collection.USERS, author)["posts"]) == sorted([first, second])
        assert sorted(store.get(Collection.CATEGORIES, x)["posts"]) == sorted([first, second])

    async def test_back_reference_failure_is_logged_not_raised(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        post_id = store.insert(Collection.POSTS, author_id=author, categories=[x])
        store.fail("update_many_add_to_set", Collection.CATEGORIES)

        with capture_logs() as logs:
            result = await manager.attach_post(post_id, author, [x])

        assert not result.ok
        assert result.failed_steps == ["attach_post.categories"]
        # The author side is independent and still applied.
        assert store.get(Collection.USERS, author)["posts"] == [post_id]
        assert any(entry["event"] == "Back-reference update failed" for entry in logs)

    async def test_transient_failure_is_retried(self, store, manager):
        author = seed_user(store)
        post_id = store.insert(Collection.POSTS, author_id=author, categories=[])
        store.fail("update_one_add_to_set", Collection.USERS, times=1)

        result = await manager.attach_post(post_id, author, [])

        assert result.ok
        assert store.get(Collection.USERS, author)["posts"] == [post_id]


class TestReassignAuthor:
    async def test_moves_post_between_users(self, store, manager):
        alice = seed_user(store)
        bob = seed_user(store)
        x = seed_category(store, "x")
        post_id = seed_post(store, alice, [x])

        result = await manager.reassign_author(post_id, alice, bob)

        assert result.ok and not result.drifted_steps
        assert store.get(Collection.USERS, alice)["posts"] == []
        assert store.get(Collection.USERS, bob)["posts"] == [post_id]

    async def test_repeating_reassignment_is_a_no_op(self, store, manager):
        alice = seed_user(store)
        bob = seed_user(store)
        post_id = seed_post(store, alice, [seed_category(store, "x")])

        await manager.reassign_author(post_id, alice, bob)
        snapshot = {c: {k: dict(v) for k, v in docs.items()} for c, docs in store.data.items()}
        await manager.reassign_author(post_id, alice, bob)

        assert store.data == snapshot

    async def test_same_author_skips_writes(self, store, manager):
        alice = seed_user(store)
        post_id = seed_post(store, alice, [seed_category(store, "x")])
        store.calls.clear()

        result = await manager.reassign_author(post_id, alice, alice)

        assert result.skipped
        assert store.writes() == []


class TestReconcileCategories:
    async def test_x_y_to_y_z(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")
        z = seed_category(store, "z")
        post_id = seed_post(store, author, [x, y])

        result = await manager.reconcile_categories(post_id, [x, y], [y, z])

        assert result.ok and not result.drifted_steps
        assert store.get(Collection.CATEGORIES, x)["posts"] == []
        assert store.get(Collection.CATEGORIES, y)["posts"] == [post_id]
        assert store.get(Collection.CATEGORIES, z)["posts"] == [post_id]

    async def test_equal_sets_issue_no_writes(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")
        post_id = seed_post(store, author, [x, y])
        store.calls.clear()

        result = await manager.reconcile_categories(post_id, [x, y], [y, x])

        assert result.skipped
        assert store.writes() == []


class TestCascadeDeletePost:
    async def test_removes_post_from_author_and_categories(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")
        post_id = seed_post(store, author, [x, y])
        del store.data[Collection.POSTS][post_id]

        result = await manager.cascade_delete_post(post_id, author, [x, y])

        assert result.ok
        assert store.get(Collection.USERS, author)["posts"] == []
        assert store.get(Collection.CATEGORIES, x)["posts"] == []
        assert store.get(Collection.CATEGORIES, y)["posts"] == []

    async def test_missing_author_logs_drift(self, store, manager):
        x = seed_category(store, "x")
        ghost = new_id()
        post_id = new_id()
        store.get(Collection.CATEGORIES, x)["posts"].append(post_id)

        with capture_logs() as logs:
            result = await manager.cascade_delete_post(post_id, ghost, [x])

        assert result.drifted_steps == ["cascade_delete_post.author"]
        assert store.get(Collection.CATEGORIES, x)["posts"] == []
        assert any(entry["event"] == "Back-reference drift detected" for entry in logs)


class TestCascadeDeleteUser:
    async def test_deletes_user_posts_and_category_entries(self, store, manager):
        alice = seed_user(store)
        bob = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")
        p1 = seed_post(store, alice, [x])
        p2 = seed_post(store, alice, [x, y])
        keep = seed_post(store, bob, [y])

        result = await manager.cascade_delete_user(alice, [p1, p2])

        assert result.ok
        assert store.get(Collection.USERS, alice) is None
        assert store.get(Collection.POSTS, p1) is None
        assert store.get(Collection.POSTS, p2) is None
        assert store.get(Collection.POSTS, keep) is not None
        assert store.get(Collection.CATEGORIES, x)["posts"] == []
        assert store.get(Collection.CATEGORIES, y)["posts"] == [keep]

    async def test_failed_post_delete_keeps_user(self, store, manager):
        alice = seed_user(store)
        p1 = seed_post(store, alice, [seed_category(store, "x")])
        store.fail("delete_by_id", Collection.POSTS)

        with pytest.raises(StoreError):
            await manager.cascade_delete_user(alice, [p1])

        assert store.get(Collection.USERS, alice) is not None
        assert store.get(Collection.POSTS, p1) is not None

    async def test_listed_post_of_another_author_is_kept(self, store, manager):
        alice = seed_user(store)
        bob = seed_user(store)
        x = seed_category(store, "x")
        bobs_post = seed_post(store, bob, [x])
        store.get(Collection.USERS, alice)["posts"].append(bobs_post)

        with capture_logs() as logs:
            result = await manager.cascade_delete_user(alice, [bobs_post])

        assert store.get(Collection.USERS, alice) is None
        assert store.get(Collection.POSTS, bobs_post) is not None
        assert store.get(Collection.USERS, bob)["posts"] == [bobs_post]
        assert store.get(Collection.CATEGORIES, x)["posts"] == [bobs_post]
        assert result.drifted_steps == ["cascade_delete_user.foreign_post"]
        assert any(entry["event"] == "Back-reference drift detected" for entry in logs)

    async def test_already_deleted_posts_are_skipped(self, store, manager):
        alice = seed_user(store)
        gone = new_id()
        store.get(Collection.USERS, alice)["posts"].append(gone)

        result = await manager.cascade_delete_user(alice, [gone])

        assert result.ok
        assert store.get(Collection.USERS, alice) is None


class TestCascadeDeleteCategory:
    async def test_post_survives_without_category(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        y = seed_category(store, "y")
        post_id = seed_post(store, author, [x, y])

        result = await manager.cascade_delete_category(x, [post_id])

        assert result.ok
        assert store.get(Collection.CATEGORIES, x) is None
        post = store.get(Collection.POSTS, post_id)
        assert post is not None
        assert post["categories"] == [y]
        assert store.get(Collection.USERS, author)["posts"] == [post_id]

    async def test_failed_post_pull_keeps_category(self, store, manager):
        author = seed_user(store)
        x = seed_category(store, "x")
        post_id = seed_post(store, author, [x])
        store.fail("update_many_pull_value", Collection.POSTS)

        with pytest.raises(StoreError):
            await manager.cascade_delete_category(x, [post_id])

        assert store.get(Collection.CATEGORIES, x) is not None


class TestPruneDanglingReferences:
    async def test_removes_only_dangling_ids(self, store, manager):
        author = seed_user(store)
        live = seed_post(store, author, [seed_category(store, "x")])
        gone = new_id()
        store.get(Collection.USERS, author)["posts"].append(gone)

        await manager.prune_dangling_references(Collection.USERS, author, ReferenceField.POSTS, [gone])

        assert store.get(Collection.USERS, author)["posts"] == [live]

    async def test_nothing_to_prune_is_skipped(self, store, manager):
        result = await manager.prune_dangling_references(
            Collection.USERS, new_id(), ReferenceField.POSTS, []
        )

        assert result.skipped
        assert store.calls == []
