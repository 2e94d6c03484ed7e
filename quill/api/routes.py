"""
Route Registration

Centralizes all route registration for the FastAPI application.

Route Hierarchy:
================
    /health, /ready, /live  → Health check endpoints
    /users                  → Users (CRUD, stats)
    /posts                  → Posts (CRUD, search)
    /categories             → Categories (CRUD)

Usage:
======
    from quill.api.routes import register_routes

    app = FastAPI()
    register_routes(app)
"""

from fastapi import FastAPI

from quill.api.handlers import (
    category_handler,
    health_handler,
    post_handler,
    user_handler,
)


def register_routes(app: FastAPI) -> None:
    """
    Register all API routes.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, root level)
    app.include_router(
        health_handler.router,
        tags=["Health"],
    )

    app.include_router(
        user_handler.router,
        prefix="/users",
        tags=["Users"],
    )

    app.include_router(
        post_handler.router,
        prefix="/posts",
        tags=["Posts"],
    )

    app.include_router(
        category_handler.router,
        prefix="/categories",
        tags=["Categories"],
    )
