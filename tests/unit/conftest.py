"""Shared fixtures for unit tests."""

import os
from collections.abc import Callable, Generator

import pytest
from starlette.requests import Request

from src.api.utils.envelope import EnvelopeBuilder
from src.core.config import get_settings
from src.core.context import RequestContext


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch, None, None]:
    """Remove app-specific environment variables for the test's duration.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Yields:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "RESPONSE_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch


@pytest.fixture
def request_context() -> RequestContext:
    """Provide a context with all correlation headers present."""
    return RequestContext(
        trans_id="trans-123",
        trans_parent_id="parent-456",
        language="fr",
        started_at=0,
    )


@pytest.fixture
def bare_context() -> RequestContext:
    """Provide a context for a request that sent no correlation headers."""
    return RequestContext(started_at=0)


@pytest.fixture
def envelope_builder() -> EnvelopeBuilder:
    """Provide an envelope builder with the default language."""
    return EnvelopeBuilder()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory building real Starlette requests from raw parts.

    Returns:
        Callable[..., Request]: Builds a request from method, path, headers,
            body, query string and path parameters.
    """

    def make(
        method: str = "GET",
        path: str = "/test",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        query_string: bytes = b"",
        path_params: dict[str, str] | None = None,
    ) -> Request:
        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "headers": [
                (key.lower().encode("latin-1"), value.encode("latin-1"))
                for key, value in (headers or {}).items()
            ],
            "query_string": query_string,
            "path_params": path_params or {},
        }

        async def receive() -> dict[str, object]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return make
