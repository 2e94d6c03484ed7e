"""
Post Handler

Handles post endpoints.

ARCHITECTURE:
=============
    Handler → Service → ReferenceManager / Repository → Model

Route order matters: /search is declared before /{post_id} so it is not
captured as an id.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from quill.api.dependencies.pagination import Page, get_pagination
from quill.api.dependencies.services import get_post_service
from quill.shared.schemas.post import (
    AuthorRef,
    CategoryRef,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from quill.shared.services.post_service import PostService, PostView


router = APIRouter()


def _build_post_response(view: PostView) -> PostResponse:
    """Helper to build PostResponse from a populated view."""
    post = view.post
    author = None
    if view.author is not None:
        author = AuthorRef(id=view.author.id, name=view.author.name, email=view.author.email)
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        published=post.published,
        view_count=post.view_count,
        author_id=post.author_id,
        author=author,
        categories=[CategoryRef(id=c.id, name=c.name) for c in view.categories],
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    request: PostCreate,
    post_service: PostService = Depends(get_post_service),
):
    """
    Create a post.

    The author and every category must exist; nothing is written
    otherwise. The post is then registered on its author and categories.
    """
    view = await post_service.create_post(
        title=request.title,
        content=request.content,
        author_id=request.author_id,
        category_ids=request.category_ids,
        published=request.published,
    )
    return _build_post_response(view)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    published: Optional[bool] = Query(None, description="Filter by published flag"),
    page: Page = Depends(get_pagination),
    post_service: PostService = Depends(get_post_service),
):
    """List posts newest first."""
    views = await post_service.list_posts(published=published, skip=page.skip, take=page.take)
    return [_build_post_response(view) for view in views]


@router.get("/search", response_model=list[PostResponse])
async def search_posts(
    q: str = Query("", description="Keywords to match in title or content"),
    post_service: PostService = Depends(get_post_service),
):
    """Case-insensitive keyword search over title and content."""
    views = await post_service.search_posts(q)
    return [_build_post_response(view) for view in views]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    post_service: PostService = Depends(get_post_service),
):
    """Read a post. Each read increments view_count."""
    return _build_post_response(await post_service.get_post(post_id))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    request: PostUpdate,
    post_service: PostService = Depends(get_post_service),
):
    """
    Partially update a post.

    Changing author_id moves the post between users; changing
    category_ids adds and removes it from categories as needed.
    """
    view = await post_service.update_post(post_id, request.model_dump(exclude_unset=True))
    return _build_post_response(view)


@router.delete("/{post_id}", response_model=PostResponse)
async def delete_post(
    post_id: str,
    post_service: PostService = Depends(get_post_service),
):
    """Delete a post and remove it from its author and categories."""
    return _build_post_response(await post_service.delete_post(post_id))
