"""
Quill Document Models

Pydantic record types for every MongoDB collection.

Model Hierarchy:
================
    User
       └── posts (Post ids[])          ← derived
    Category
       └── posts (Post ids[])          ← derived
    Post
       ├── author_id (User id)         ← authoritative
       └── categories (Category ids[]) ← authoritative

Usage:
======
    from quill.shared.models import User, Post, Category

    post = await post_repo.get(post_id)
    post.categories  # list of category id strings
"""

from quill.shared.models.base import DocumentModel
from quill.shared.models.enums import Collection, ReferenceField
from quill.shared.models.user import User
from quill.shared.models.post import Post
from quill.shared.models.category import Category

__all__ = [
    "DocumentModel",
    "Collection",
    "ReferenceField",
    "User",
    "Post",
    "Category",
]
