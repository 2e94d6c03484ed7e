"""
Post Document Model

Represents a blog post. A post owns the AUTHORITATIVE side of both of
its relationships:

    Post.author_id   → User        (many-to-one)
    Post.categories  → Category[]  (many-to-many)

User.posts and Category.posts are derived from these fields and kept in
sync by the ReferenceManager.
"""

from pydantic import Field

from quill.shared.models.base import DocumentModel
from quill.shared.models.enums import Collection


class Post(DocumentModel):
    """
    Post document.

    Attributes:
        title: Post title (max 200 characters)
        content: Body text (10 to 20000 characters)
        published: Whether the post is publicly visible
        view_count: Incremented atomically on every single-post read
        author_id: Id of the authoring user
        categories: Ids of the categories the post is filed under
    """

    __collection__ = Collection.POSTS
    __references__ = ("author_id", "categories")

    title: str
    content: str
    published: bool = False
    view_count: int = 0
    author_id: str
    categories: list[str] = Field(default_factory=list)
