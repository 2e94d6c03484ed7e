"""
User Document Model

Represents a blog author.

Relationships:
==============
    User
       └── posts (Post ids[]) - DERIVED back-reference, mirrors Post.author_id

SAMPLE USER DOCUMENT:
┌──────────────────────────────────────────────────────────────────────────────┐
│ _id              │ ObjectId("65f0c1b2e4b0a1a2b3c4d5e6")                      │
│ email            │ "ada@example.com"                                         │
│ name             │ "Ada Lovelace"                                            │
│ password         │ "$2b$12$..."                                              │
│ bio              │ ""                                                        │
│ posts            │ [ObjectId("65f0c1..."), ObjectId("65f0c2...")]            │
│ created_at       │ 2024-01-01T00:00:00Z                                      │
│ updated_at       │ 2024-01-15T10:30:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from pydantic import Field

from quill.shared.models.base import DocumentModel
from quill.shared.models.enums import Collection


class User(DocumentModel):
    """
    User document.

    Attributes:
        email: Unique email address (unique index)
        name: Display name
        password: Bcrypt hash, never returned by the API
        bio: Free-form profile text
        posts: Ids of posts this user authored, in creation order
    """

    __collection__ = Collection.USERS
    __references__ = ("posts",)

    email: str
    name: str
    password: str
    bio: str = ""
    posts: list[str] = Field(default_factory=list)
