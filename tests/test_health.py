"""
Health endpoint and error envelope tests.
"""

import pytest
import structlog
from structlog.testing import LogCapture


@pytest.fixture
def captured_logs():
    """Capture log entries with bound context variables merged in."""
    capture = LogCapture()
    previous = structlog.get_config()
    structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
    yield capture.entries
    structlog.configure(**previous)


class TestHealth:
    async def test_health(self, client):
        res = await client.get("/health")

        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "healthy"
        assert body["service"] == "quill"

    async def test_live(self, client):
        res = await client.get("/live")

        assert res.json() == {"status": "alive"}

    async def test_error_envelope_shape(self, client):
        res = await client.get("/posts/123")

        error = res.json()["error"]
        assert set(error) == {"code", "message", "details"}

    async def test_request_id_is_generated(self, client):
        res = await client.get("/live")

        assert res.headers["X-Request-ID"]

    async def test_request_id_is_echoed_and_logged(self, client, captured_logs):
        res = await client.get("/posts/123", headers={"X-Request-ID": "req-42"})

        assert res.headers["X-Request-ID"] == "req-42"
        errors = [entry for entry in captured_logs if entry["event"] == "Application error"]
        assert errors and errors[0]["request_id"] == "req-42"
