"""
Category Document Model

Represents a topic posts can be filed under.

Relationships:
==============
    Category
       └── posts (Post ids[]) - DERIVED back-reference, mirrors Post.categories
"""

from pydantic import Field

from quill.shared.models.base import DocumentModel
from quill.shared.models.enums import Collection


class Category(DocumentModel):
    """
    Category document.

    Attributes:
        name: Unique category name (unique index)
        description: Optional description
        posts: Ids of posts filed under this category
    """

    __collection__ = Collection.CATEGORIES
    __references__ = ("posts",)

    name: str
    description: str = ""
    posts: list[str] = Field(default_factory=list)
