"""
Pydantic Schemas

Request and response models for the API.

Schema Categories:
==================
- common: Base schemas, error responses, health
- user: User create/update/response, stats
- post: Post create/update/response
- category: Category create/update/response

Usage:
======
    from quill.shared.schemas.post import PostCreate, PostResponse
    from quill.shared.schemas.common import ErrorResponse
"""

from quill.shared.schemas.common import (
    BaseSchema,
    RequestSchema,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    TimestampMixin,
)
from quill.shared.schemas.user import (
    UserCreate,
    UserUpdate,
    UserPostSummary,
    UserResponse,
    UserStatsResponse,
)
from quill.shared.schemas.post import (
    PostCreate,
    PostUpdate,
    AuthorRef,
    CategoryRef,
    PostResponse,
)
from quill.shared.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryPostSummary,
    CategoryResponse,
)

__all__ = [
    # Common
    "BaseSchema",
    "RequestSchema",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "TimestampMixin",
    # User
    "UserCreate",
    "UserUpdate",
    "UserPostSummary",
    "UserResponse",
    "UserStatsResponse",
    # Post
    "PostCreate",
    "PostUpdate",
    "AuthorRef",
    "CategoryRef",
    "PostResponse",
    # Category
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryPostSummary",
    "CategoryResponse",
]
