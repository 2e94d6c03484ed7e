"""
Enums used across the application.
"""

from enum import Enum


class Collection(str, Enum):
    """MongoDB collection holding each entity."""

    USERS = "users"
    POSTS = "posts"
    CATEGORIES = "categories"


class ReferenceField(str, Enum):
    """
    Fields that hold ids of other documents.

    AUTHOR and CATEGORIES live on posts and are AUTHORITATIVE.
    POSTS lives on users and categories and is a DERIVED back-reference.
    """

    AUTHOR = "author_id"
    CATEGORIES = "categories"
    POSTS = "posts"
