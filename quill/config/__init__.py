"""
Configuration Module

Application configuration loaded from environment variables.

Usage:
======
    from quill.config.settings import settings

    mongo_url = settings.DATABASE_URL
    page_size = settings.DEFAULT_PAGE_SIZE
"""

from quill.config.settings import settings, get_settings, Settings

__all__ = [
    "settings",
    "get_settings",
    "Settings",
]
