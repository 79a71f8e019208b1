"""Process-wide proxy state shared by the route handlers.

The state is built once at startup and only read afterwards, so handlers
access it without locking. It lives here rather than in ``main`` to keep
the routes free of circular imports.
"""

from dataclasses import dataclass
from typing import Optional

from .model_map import ModelMap
from .upstream import UpstreamClient


@dataclass(frozen=True)
class ProxyState:
    """Read-only collaborators for request handling."""

    model_map: ModelMap
    upstream: UpstreamClient


# Global state instance - set by main.create_app during initialization
_state: Optional[ProxyState] = None


def set_state(state: Optional[ProxyState]) -> None:
    """Set (or clear) the global proxy state."""
    global _state
    _state = state


def get_state() -> ProxyState:
    """Get the global proxy state."""
    if _state is None:
        raise RuntimeError("Proxy state not initialized. Did you call set_state?")
    return _state
