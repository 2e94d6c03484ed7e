"""
Database Dependency

FastAPI dependency for the database handle.

There is no per-request session: every route gets the shared motor
database and each write is issued immediately.

Usage:
======
    from quill.api.dependencies.database import DbSession

    @router.get("/users")
    async def list_users(db: DbSession):
        repo = UserRepository(db)
        return await repo.list()
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.shared.db import get_db as _get_db


async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    FastAPI dependency for the database handle.

    Tests override this dependency to point the app at an in-memory
    database.
    """
    async for database in _get_db():
        yield database


# Type alias for cleaner route signatures
DbSession = Annotated[AsyncIOMotorDatabase, Depends(get_db)]
