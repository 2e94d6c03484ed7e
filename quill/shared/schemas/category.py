"""
Category Schemas
"""

from typing import Optional

from pydantic import Field

from quill.shared.schemas.common import BaseSchema, RequestSchema, TimestampMixin


class CategoryCreate(RequestSchema):
    """Schema for creating a category."""

    name: str = Field(min_length=1, max_length=50)
    description: str = Field(default="", max_length=500)


class CategoryUpdate(RequestSchema):
    """Partial update. Omitted fields are left untouched."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)


class CategoryPostSummary(BaseSchema):
    """A post as listed under a category."""

    id: str
    title: str
    published: bool
    author_id: str


class CategoryResponse(BaseSchema, TimestampMixin):
    """Schema for category response."""

    id: str
    name: str
    description: str
    posts: list[CategoryPostSummary] = Field(default_factory=list)
