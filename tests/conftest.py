"""
Shared fixtures.

API tests run against an in-memory MongoDB (mongomock-motor) wired in
through the get_db dependency; no server is needed.
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("BACKREF_RETRY_DELAY_SECONDS", "0")

import pytest
import structlog
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from quill.api.dependencies.database import get_db
from quill.api.main import create_application
from quill.shared.db.client import ensure_indexes
from quill.shared.services.reference_manager import ReferenceManager

from tests.fakes import InMemoryDocumentStore

# capture_logs() only sees loggers that were not cached on first use.
structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["quill_test"]
    await ensure_indexes(database)
    yield database


@pytest.fixture
def app(db):
    application = create_application()

    async def override_get_db():
        yield db

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
async def client(app):
    # The lifespan is not run, so no real MongoDB connection is attempted.
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def manager(store) -> ReferenceManager:
    return ReferenceManager(store, retry_attempts=2, retry_delay=0)


@pytest.fixture
def make_user(client):
    async def _make_user(email: str = "ada@example.com", name: str = "Ada", **extra):
        res = await client.post(
            "/users",
            json={"email": email, "name": name, "password": "correct-horse", **extra},
        )
        assert res.status_code == 201, res.text
        return res.json()

    return _make_user


@pytest.fixture
def make_category(client):
    async def _make_category(name: str, description: str = ""):
        res = await client.post("/categories", json={"name": name, "description": description})
        assert res.status_code == 201, res.text
        return res.json()

    return _make_category


@pytest.fixture
def make_post(client):
    async def _make_post(author_id: str, category_ids: list[str], **extra):
        body = {
            "title": "Hello world",
            "content": "A first post with enough content.",
            "author_id": author_id,
            "category_ids": category_ids,
            **extra,
        }
        res = await client.post("/posts", json=body)
        assert res.status_code == 201, res.text
        return res.json()

    return _make_post
