"""modelmap-proxy - OpenAI-compatible model-mapping proxy

Exposes ``/v1/chat/completions``, ``/v1/images/generations`` and
``/v1/models`` and forwards everything to a single upstream
chat-completions endpoint.

This module provides:
- ModelMap: caller-facing to upstream model name resolution
- Request filtering onto the fields the upstream accepts
- Streaming and buffered response relay
- Image generation emulated over a chat completion

Example:
    >>> from modelmap_proxy import create_app
    >>> import uvicorn
    >>> uvicorn.run(create_app(), host="0.0.0.0", port=8000)
"""

from .config_loader import load_config
from .core import ModelMap, ProxyError, UpstreamClient
from .logging import logger, setup_logging
from .main import create_app

__all__ = [
    "create_app",
    "load_config",
    "logger",
    "ModelMap",
    "ProxyError",
    "setup_logging",
    "UpstreamClient",
]
