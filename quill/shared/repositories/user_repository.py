"""
User Repository

Database operations specific to the User model.
Extends BaseRepository with user-specific query methods.

Common Operations:
==================
- get_by_email()   → Find user by email address
- email_exists()   → Check if email is already registered
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from quill.shared.repositories.base import BaseRepository
from quill.shared.models.user import User


class UserRepository(BaseRepository[User]):
    """
    Repository for User database operations.

    Provides methods for common user queries beyond basic CRUD:
    - Looking up users by email
    - Checking email availability
    """

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        super().__init__(User, database)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Emails are stored lowercased, so the lookup lowercases too.

        Args:
            email: Email address to search for

        Returns:
            User if found, None otherwise
        """
        return await self.find_one_by("email", email.strip().lower())

    async def email_exists(self, email: str) -> bool:
        """
        Check if email already exists.

        Example:
            if await repo.email_exists("new@example.com"):
                raise DuplicateResourceError("User with this email already exists")
        """
        user = await self.get_by_email(email)
        return user is not None
