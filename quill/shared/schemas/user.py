"""
User Schemas

Request/response models for user endpoints. The password hash never
appears in a response.
"""

from typing import Optional

from pydantic import EmailStr, Field

from quill.shared.schemas.common import BaseSchema, RequestSchema, TimestampMixin


class UserCreate(RequestSchema):
    """Schema for user registration."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=100)
    password: str = Field(
        min_length=8,
        description="Password (minimum 8 characters)",
    )
    bio: str = Field(default="", max_length=1000)


class UserUpdate(RequestSchema):
    """Partial update. Omitted fields are left untouched."""

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    password: Optional[str] = Field(default=None, min_length=8)
    bio: Optional[str] = Field(default=None, max_length=1000)


class UserPostSummary(BaseSchema):
    """A post as listed under its author."""

    id: str
    title: str
    published: bool
    view_count: int
    categories: list[str] = Field(description="Category names")


class UserResponse(BaseSchema, TimestampMixin):
    """Schema for user response."""

    id: str
    email: str
    name: str
    bio: str
    posts: list[UserPostSummary] = Field(default_factory=list)


class UserStatsResponse(BaseSchema):
    """Aggregates over a user's posts."""

    user_id: str
    total_posts: int
    published_posts: int
    total_views: int
