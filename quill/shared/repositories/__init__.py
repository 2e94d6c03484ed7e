"""
Repository Pattern Implementations

Repositories encapsulate MongoDB queries and provide a clean, typed API
for data access.

Repository Hierarchy:
=====================
    BaseRepository[ModelType]   ← Generic CRUD operations
         │
         ├── UserRepository      ← Email lookups
         ├── PostRepository      ← View counter, search, reference queries
         └── CategoryRepository  ← Name lookups, alphabetical listing

Usage Example:
==============
    from quill.shared.repositories import UserRepository

    async def find_author(db: AsyncIOMotorDatabase, email: str):
        repo = UserRepository(db)
        return await repo.get_by_email(email)
"""

from quill.shared.repositories.base import BaseRepository
from quill.shared.repositories.user_repository import UserRepository
from quill.shared.repositories.post_repository import PostRepository
from quill.shared.repositories.category_repository import CategoryRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PostRepository",
    "CategoryRepository",
]
