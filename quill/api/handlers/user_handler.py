"""
User Handler

Handles user account endpoints.

ARCHITECTURE:
=============
    Handler → Service → Repository → Model

Handlers should ONLY:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

Business logic belongs in the SERVICE layer.
"""

from fastapi import APIRouter, Depends, status

from quill.api.dependencies.pagination import Page, get_pagination
from quill.api.dependencies.services import get_user_service
from quill.shared.schemas.user import (
    UserCreate,
    UserPostSummary,
    UserResponse,
    UserStatsResponse,
    UserUpdate,
)
from quill.shared.services.user_service import UserService, UserView


router = APIRouter()


def _build_user_response(view: UserView) -> UserResponse:
    """Helper to build UserResponse from a populated view."""
    user = view.user
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        bio=user.bio,
        created_at=user.created_at,
        updated_at=user.updated_at,
        posts=[
            UserPostSummary(
                id=post.id,
                title=post.title,
                published=post.published,
                view_count=post.view_count,
                categories=[
                    view.categories[c].name for c in post.categories if c in view.categories
                ],
            )
            for post in view.posts
        ],
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    request: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    """
    Register a new user.

    Emails are stored lowercased and must be unique.
    """
    view = await user_service.create_user(
        email=request.email,
        name=request.name,
        password=request.password,
        bio=request.bio,
    )
    return _build_user_response(view)


@router.get("", response_model=list[UserResponse])
async def list_users(
    page: Page = Depends(get_pagination),
    user_service: UserService = Depends(get_user_service),
):
    """List users, newest first, with their posts."""
    views = await user_service.list_users(skip=page.skip, take=page.take)
    return [_build_user_response(view) for view in views]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Get a user with their posts."""
    return _build_user_response(await user_service.get_user(user_id))


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Post counts and total views for a user."""
    stats = await user_service.get_user_stats(user_id)
    return UserStatsResponse(
        user_id=stats.user_id,
        total_posts=stats.total_posts,
        published_posts=stats.published_posts,
        total_views=stats.total_views,
    )


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    request: UserUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """Partially update a user. Only fields present in the body are applied."""
    view = await user_service.update_user(user_id, request.model_dump(exclude_unset=True))
    return _build_user_response(view)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Delete a user together with every post they authored."""
    return _build_user_response(await user_service.delete_user(user_id))
