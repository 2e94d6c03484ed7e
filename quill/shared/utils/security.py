"""
Security Utilities

Password hashing for user accounts.

Password Hashing:
=================
Uses bcrypt for secure password hashing with automatic salt generation.
The cost factor comes from settings.PASSWORD_HASH_ROUNDS.

Usage:
======
    from quill.shared.utils.security import SecurityUtils

    # Hash password
    hashed = SecurityUtils.hash_password("password123")

    # Verify password
    if SecurityUtils.verify_password("password123", hashed):
        print("Password matches!")
"""

from passlib.context import CryptContext

from quill.config.settings import settings


# Password hashing configuration
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


class SecurityUtils:
    """
    Security utilities for user accounts.

    Provides password hashing and verification with bcrypt.
    """

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash string (includes salt)
        """
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify password against bcrypt hash.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Bcrypt hash to verify against

        Returns:
            True if password matches, False otherwise
        """
        return pwd_context.verify(plain_password, hashed_password)
