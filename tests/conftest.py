"""Shared test fixtures and configuration."""

import io
import time
from unittest.mock import MagicMock

import pytest

from longboard import (
    BaseBackend,
    CookieJarEntry,
    Headers,
    LongboardConfig,
    Request,
    Response,
)


# ============== Configuration Fixtures ==============

@pytest.fixture
def default_config() -> LongboardConfig:
    """GET request configuration with defaults."""
    return LongboardConfig(method="get", url="https://example.com/api/items")


# ============== Request/Response Fixtures ==============

@pytest.fixture
def sample_request() -> Request:
    """Sample GET request."""
    return Request(
        method="GET",
        url="https://example.com/api/items",
        headers={"Accept": "application/json"},
    )


@pytest.fixture
def sample_response(sample_request: Request) -> Response:
    """Sample successful JSON response."""
    return Response(
        status_code=200,
        reason="OK",
        headers={"Content-Type": "application/json"},
        content=b'{"success": true}',
        url="https://example.com/api/items",
        elapsed=0.5,
        request=sample_request,
    )


@pytest.fixture
def cookie_response(sample_request: Request) -> Response:
    """Response setting one persistent and one session cookie."""
    return Response(
        status_code=200,
        reason="OK",
        headers={"Content-Type": "text/plain"},
        set_cookies=[
            "token=abc123; Max-Age=100; Path=/",
            "session=xyz; Path=/",
        ],
        content=b"ok",
        url="https://example.com/api/items",
        request=sample_request,
    )


# ============== Cookie Fixtures ==============

@pytest.fixture
def persistent_cookie() -> CookieJarEntry:
    """Cookie valid for another hour."""
    return CookieJarEntry(
        name="token",
        value="abc123",
        domain="example.com",
        path="/",
        expires=time.time() + 3600,
        max_age=3600,
    )


@pytest.fixture
def jar_path(tmp_path):
    """Path of a cookie jar that does not exist yet."""
    return tmp_path / "state" / "cookies.jsonl"


# ============== Mock Fixtures ==============

@pytest.fixture
def mock_backend(sample_response: Response) -> MagicMock:
    """Mock backend for testing without network."""
    backend = MagicMock(spec=BaseBackend)
    backend.name = "h1"
    backend.send.return_value = sample_response
    return backend


@pytest.fixture
def empty_stdin() -> io.BytesIO:
    """Piped stdin with no data."""
    return io.BytesIO(b"")
