"""
Service Dependencies

FastAPI dependencies for service injection.

Services are created per-request, which is fine because:
- Services are stateless (only hold the database handle)
- The motor client and its pool are shared process-wide

Usage:
======
    from quill.api.dependencies.services import get_post_service

    @router.post("")
    async def create_post(
        data: PostCreate,
        post_service: PostService = Depends(get_post_service),
    ):
        return await post_service.create_post(...)
"""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.api.dependencies.database import get_db
from quill.shared.services.category_service import CategoryService
from quill.shared.services.post_service import PostService
from quill.shared.services.user_service import UserService


async def get_user_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> UserService:
    """
    Dependency to get UserService instance.

    Creates a new service instance per request over the shared database.
    """
    return UserService(db)


async def get_post_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> PostService:
    """Dependency to get PostService instance."""
    return PostService(db)


async def get_category_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> CategoryService:
    """Dependency to get CategoryService instance."""
    return CategoryService(db)
