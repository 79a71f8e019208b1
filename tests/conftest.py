"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

from typing import Any, Generator

import httpx
import pytest

from modelmap_proxy.core.registry import set_state
from modelmap_proxy.core.upstream_transport import (
    clear_upstream_transports,
    register_upstream_transport,
)

MODEL_MAPPING = {
    "gpt-4o": "GPT-4o",
    "claude-3-haiku": "Claude-3-Haiku",
    "dall-e-3": "DALL-E-3",
}

UPSTREAM_URL = "http://upstream.local/v1/chat/completions"
AUTH_HEADERS = {"Authorization": "Bearer sk-test"}


@pytest.fixture
def clear_transport_registry() -> Generator[None, None, None]:
    """Clear upstream transport registry after test.

    Use this fixture in tests that register fake transports.
    """
    yield
    clear_upstream_transports()


@pytest.fixture(autouse=True)
def reset_proxy_state() -> Generator[None, None, None]:
    """Make sure no proxy state leaks from one test into the next."""
    yield
    set_state(None)


@pytest.fixture
def harness(clear_transport_registry: None) -> Generator[Any, None, None]:
    """Create a proxy harness wired to a fake upstream.

    Usage:
        def test_chat(harness):
            harness.upstream.enqueue_chat_response("Hello")
            ...
    """
    from modelmap_proxy.testing import ProxyHarness

    proxy = ProxyHarness(MODEL_MAPPING, upstream_url=UPSTREAM_URL)
    try:
        yield proxy
    finally:
        proxy.close()


def register_failing_upstream(
    url: str = UPSTREAM_URL,
    exc_type: type[httpx.TransportError] = httpx.ConnectError,
) -> list[httpx.Request]:
    """Register a transport for ``url`` that fails every request.

    Returns the list the attempted requests are appended to.
    """
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise exc_type("simulated network failure", request=request)

    register_upstream_transport(url, httpx.MockTransport(handler))
    return attempts
