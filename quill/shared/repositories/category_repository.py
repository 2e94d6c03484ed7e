"""
Category Repository

Database operations specific to the Category model.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.shared.repositories.base import BaseRepository
from quill.shared.models.category import Category


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category database operations."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        super().__init__(Category, database)

    async def get_by_name(self, name: str) -> Optional[Category]:
        """Get category by exact (trimmed) name."""
        return await self.find_one_by("name", name.strip())

    async def name_exists(self, name: str) -> bool:
        """Check if a category name is already taken."""
        return await self.get_by_name(name) is not None

    async def list_by_name(self, *, offset: int = 0, limit: int = 100) -> list[Category]:
        """List categories alphabetically."""
        return await self.list(offset=offset, limit=limit, order_by="name", order_desc=False)
