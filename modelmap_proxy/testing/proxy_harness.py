"""Proxy harness for in-process simulation tests."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx
from fastapi import FastAPI

from ..core import ModelMap, UpstreamClient
from ..core.registry import ProxyState, get_state, set_state
from ..core.upstream_transport import register_upstream_transport
from ..main import create_app
from .fake_upstream import FakeUpstream

DEFAULT_UPSTREAM_URL = "http://upstream.local/v1/chat/completions"


class ProxyHarness:
    """Build the proxy app wired to a fake upstream and a given model map.

    Usage:
        with ProxyHarness({"gpt-4o": "GPT-4o"}) as proxy:
            proxy.upstream.enqueue_chat_response("Hello")
            async with proxy.make_async_client() as client:
                response = await client.post("/v1/chat/completions", json={...})
    """

    def __init__(
        self,
        mapping: Optional[Mapping[str, str]] = None,
        *,
        upstream: Optional[FakeUpstream] = None,
        upstream_url: str = DEFAULT_UPSTREAM_URL,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.upstream = upstream or FakeUpstream()
        self.upstream_url = upstream_url
        self.model_map = ModelMap(mapping or {})

        self._previous_state: Optional[ProxyState] = None
        try:
            self._previous_state = get_state()
        except RuntimeError:
            self._previous_state = None

        register_upstream_transport(
            upstream_url, httpx.ASGITransport(app=self.upstream.app)
        )
        self.app: FastAPI = create_app(
            dict(config or {}),
            model_map=self.model_map,
            upstream=UpstreamClient(upstream_url),
        )

    def close(self) -> None:
        """Restore the proxy state that was active before the harness."""
        set_state(self._previous_state)

    def __enter__(self) -> "ProxyHarness":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "ProxyHarness":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def make_async_client(
        self, base_url: str = "http://proxy.local"
    ) -> httpx.AsyncClient:
        """Create an async HTTP client talking to this proxy in-process."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app),
            base_url=base_url,
        )
