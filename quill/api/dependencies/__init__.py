"""
API Dependencies

FastAPI dependencies for injection into route handlers.

Dependencies:
=============
- Database: get_db(), DbSession
- Pagination: get_pagination(), Page
- Services: get_*_service() functions

Usage:
======
    from quill.api.dependencies import DbSession

    @router.get("/items")
    async def list_items(db: DbSession):
        ...
"""

from quill.api.dependencies.database import (
    get_db,
    DbSession,
)
from quill.api.dependencies.pagination import (
    get_pagination,
    Page,
)
from quill.api.dependencies.services import (
    get_user_service,
    get_post_service,
    get_category_service,
)

__all__ = [
    # Database
    "get_db",
    "DbSession",
    # Pagination
    "get_pagination",
    "Page",
    # Services
    "get_user_service",
    "get_post_service",
    "get_category_service",
]
