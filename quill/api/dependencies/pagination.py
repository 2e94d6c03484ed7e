"""
Pagination dependency.
"""
from dataclasses import dataclass

from fastapi import Query

from quill.config.settings import settings


@dataclass
class Page:
    """skip/take window for list endpoints."""

    skip: int
    take: int


async def get_pagination(
    skip: int = Query(0, ge=0, description="Number of items to skip"),
    take: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Number of items to return",
    ),
) -> Page:
    """Pagination parameters dependency."""
    return Page(skip=skip, take=take)
