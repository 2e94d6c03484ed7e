"""
Post Schemas

Request/response models for post endpoints.

category_ids must name at least one category, each at most once. Ids
are only checked for shape here; existence is checked by the service
before anything is written.
"""

from typing import Optional

from pydantic import Field, field_validator

from quill.shared.schemas.common import BaseSchema, RequestSchema, TimestampMixin


def _reject_duplicates(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is not None and len(set(value)) != len(value):
        raise ValueError("category_ids must not contain duplicates")
    return value


class PostCreate(RequestSchema):
    """Schema for creating a post."""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=10, max_length=20000)
    published: bool = False
    author_id: str
    category_ids: list[str] = Field(min_length=1)

    @field_validator("category_ids")
    @classmethod
    def unique_categories(cls, value):
        return _reject_duplicates(value)


class PostUpdate(RequestSchema):
    """
    Partial update.

    Only fields present in the body are applied; author_id and
    category_ids trigger back-reference maintenance when they change.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=10, max_length=20000)
    published: Optional[bool] = None
    author_id: Optional[str] = None
    category_ids: Optional[list[str]] = Field(default=None, min_length=1)

    @field_validator("category_ids")
    @classmethod
    def unique_categories(cls, value):
        return _reject_duplicates(value)


class AuthorRef(BaseSchema):
    """Embedded author of a post."""

    id: str
    name: str
    email: str


class CategoryRef(BaseSchema):
    """Embedded category of a post."""

    id: str
    name: str


class PostResponse(BaseSchema, TimestampMixin):
    """Schema for post response with author and categories populated."""

    id: str
    title: str
    content: str
    published: bool
    view_count: int
    author_id: str
    author: Optional[AuthorRef] = None
    categories: list[CategoryRef] = Field(default_factory=list)
