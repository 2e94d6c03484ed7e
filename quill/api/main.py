"""
Quill API Application Entry Point

FastAPI application setup with all routers, middleware, and lifecycle management.

Request Flow:
=============
    HTTP request
        │
        ▼
    CORS middleware
        │
        ▼
    Request context (request_id bound to logs, X-Request-ID echoed)
        │
        ▼
    Router (/users, /posts, /categories, /health)
        │   request schema validated → 400 VALIDATION_ERROR on failure
        ▼
    Service (UserService, PostService, CategoryService)
        │   relationship writes → ReferenceManager → MongoDocumentStore
        ▼
    Repository → motor → MongoDB

    Any QuillException raised on the way is rendered by the global
    exception handlers as {"error": {"code", "message", "details"}}.

Lifecycle:
==========
1. Application starts → lifespan startup
2. MongoDB pinged, indexes ensured
3. Application serves requests
4. Application stops → lifespan shutdown
5. MongoDB client closed

Usage:
======
    # Run with uvicorn
    uvicorn quill.api.main:app --host 0.0.0.0 --port 8000 --reload

    # Or programmatically
    from quill.api.main import create_application
    app = create_application()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quill.config.settings import settings
from quill.shared.db import init_db, close_db
from quill.shared.core.logging import logger
from quill.api.middleware import RequestContextMiddleware, setup_exception_handlers
from quill.api.routes import register_routes


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
    - Connect to MongoDB and ensure indexes

    Shutdown:
    - Close the MongoDB client
    """
    # ═══════════════════════════════════════════════════════════════════════════
    # STARTUP
    # ═══════════════════════════════════════════════════════════════════════════
    logger.info(
        "Starting Quill API",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
    )

    await init_db()
    logger.info("Quill API started successfully")

    yield

    # ═══════════════════════════════════════════════════════════════════════════
    # SHUTDOWN
    # ═══════════════════════════════════════════════════════════════════════════
    logger.info("Shutting down Quill API")
    await close_db()
    logger.info("Quill API shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance

    This factory function:
    1. Creates the FastAPI app with settings
    2. Adds middleware (request context, CORS)
    3. Sets up exception handlers
    4. Registers all routes
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Blogging API with users, posts and categories",
        version=settings.APP_VERSION,
        # Only show docs in development
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # MIDDLEWARE
    # ═══════════════════════════════════════════════════════════════════════════

    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # EXCEPTION HANDLERS
    # ═══════════════════════════════════════════════════════════════════════════

    setup_exception_handlers(app)

    # ═══════════════════════════════════════════════════════════════════════════
    # ROUTES
    # ═══════════════════════════════════════════════════════════════════════════

    register_routes(app)

    return app


# Create the application instance
app = create_application()
