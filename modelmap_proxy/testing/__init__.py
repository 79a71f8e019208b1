"""Testing utilities for in-process proxy simulations."""

from .fake_upstream import (
    FakeUpstream,
    QueuedResponse,
    build_chat_completion,
    build_stream_chunks,
)
from .proxy_harness import ProxyHarness

__all__ = [
    "FakeUpstream",
    "ProxyHarness",
    "QueuedResponse",
    "build_chat_completion",
    "build_stream_chunks",
]
