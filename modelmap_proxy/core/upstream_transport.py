"""Registry of HTTPX transports keyed by upstream host.

Production traffic never registers anything here. Tests and local
simulations register an ``httpx.ASGITransport`` for the upstream host so the
proxy talks to an in-process fake instead of the network.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("modelmap-proxy")

_TRANSPORTS: dict[str, httpx.AsyncBaseTransport] = {}


def _host_key(url_or_host: str) -> str:
    netloc = urlparse(url_or_host).netloc if "://" in url_or_host else url_or_host
    return netloc.strip().lower()


def register_upstream_transport(url_or_host: str, transport: httpx.AsyncBaseTransport) -> None:
    """Route requests for a host (or the host of a URL) through ``transport``."""
    key = _host_key(url_or_host or "")
    if not key:
        raise ValueError("host is required")
    _TRANSPORTS[key] = transport
    logger.debug("Registered upstream transport for host '%s'", key)


def clear_upstream_transports() -> None:
    """Drop every registered transport (used by test teardown)."""
    _TRANSPORTS.clear()


def get_upstream_transport(url: str) -> Optional[httpx.AsyncBaseTransport]:
    """Return the transport registered for the URL's host, if any."""
    if not url:
        return None
    key = _host_key(url)
    if not key:
        return None
    return _TRANSPORTS.get(key)
