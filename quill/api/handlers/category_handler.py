"""
Category Handler

Handles category endpoints. Deleting a category detaches it from its
posts; the posts themselves are kept.
"""

from fastapi import APIRouter, Depends, status

from quill.api.dependencies.services import get_category_service
from quill.shared.schemas.category import (
    CategoryCreate,
    CategoryPostSummary,
    CategoryResponse,
    CategoryUpdate,
)
from quill.shared.services.category_service import CategoryService, CategoryView


router = APIRouter()


def _build_category_response(view: CategoryView) -> CategoryResponse:
    category = view.category
    return CategoryResponse(
        id=category.id,
        name=category.name,
        description=category.description,
        created_at=category.created_at,
        updated_at=category.updated_at,
        posts=[
            CategoryPostSummary(
                id=post.id,
                title=post.title,
                published=post.published,
                author_id=post.author_id,
            )
            for post in view.posts
        ],
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: CategoryCreate,
    category_service: CategoryService = Depends(get_category_service),
):
    """Create a category. Names are unique."""
    view = await category_service.create_category(request.name, request.description)
    return _build_category_response(view)


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    category_service: CategoryService = Depends(get_category_service),
):
    """All categories, sorted by name."""
    views = await category_service.list_categories()
    return [_build_category_response(view) for view in views]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    category_service: CategoryService = Depends(get_category_service),
):
    return _build_category_response(await category_service.get_category(category_id))


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    request: CategoryUpdate,
    category_service: CategoryService = Depends(get_category_service),
):
    view = await category_service.update_category(
        category_id, request.model_dump(exclude_unset=True)
    )
    return _build_category_response(view)


@router.delete("/{category_id}", response_model=CategoryResponse)
async def delete_category(
    category_id: str,
    category_service: CategoryService = Depends(get_category_service),
):
    """Delete a category and remove it from every post that lists it."""
    return _build_category_response(await category_service.delete_category(category_id))
