"""Main FastAPI application for the model-mapping proxy."""

import logging
import socket
from contextlib import asynccontextmanager
from typing import Any, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.routes import chat_completions, image_generations, list_models, service_info
from .config_loader import (
    get_log_level,
    get_model_map_path,
    get_server_settings,
    get_upstream_settings,
    load_config,
)
from .core import ModelMap, ProxyError, ProxyState, UpstreamClient, set_state
from .logging import setup_logging
from .middleware import AllowAllCORSMiddleware

logger = logging.getLogger("modelmap-proxy")

FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
    """Render any proxy error as an OpenAI-style error body."""
    logger.info(
        f"{request.method} {request.url.path} failed with {exc.status_code}: {exc.message}"
    )
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    *,
    model_map: Optional[ModelMap] = None,
    upstream: Optional[UpstreamClient] = None,
) -> FastAPI:
    """Factory function to create the FastAPI application.

    The configuration and model map are loaded once here and installed as
    read-only process state before any request is served.

    Args:
        config: Parsed configuration. Loaded from disk when omitted.
        model_map: Model map override. Loaded from the configured path when omitted.
        upstream: Upstream client override. Built from the configuration when omitted.

    Returns:
        The configured FastAPI application instance.
    """
    if config is None:
        config = load_config()
    setup_logging(get_log_level(config))

    if model_map is None:
        model_map = ModelMap.load(get_model_map_path(config))
    if upstream is None:
        url, timeout = get_upstream_settings(config)
        upstream = UpstreamClient(url, timeout)

    state = ProxyState(model_map=model_map, upstream=upstream)
    set_state(state)
    host, port = get_server_settings(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("modelmap-proxy starting up...")
        logger.info("Configured bind address %s:%s", host, port)
        if host == "0.0.0.0":
            hostname = socket.gethostname()
            logger.info("Reachable on local network at http://%s:%s", hostname, port)
        logger.info(f"Forwarding to upstream {upstream.url}")
        logger.info(f"{len(model_map)} model mappings loaded: {model_map.names()}")
        yield
        logger.info("modelmap-proxy shut down")

    app = FastAPI(title="modelmap-proxy", lifespan=lifespan)
    app.state.proxy = state
    app.add_middleware(AllowAllCORSMiddleware)
    app.add_exception_handler(ProxyError, handle_proxy_error)

    # Register routes; the catch-all must stay last
    app.post("/v1/chat/completions", response_model=None)(chat_completions)
    app.post("/v1/images/generations", response_model=None)(image_generations)
    app.get("/v1/models", response_model=None)(list_models)
    app.api_route("/{path:path}", methods=FALLBACK_METHODS, response_model=None)(service_info)

    logger.info("FastAPI application created")
    return app


__all__ = ["create_app", "handle_proxy_error"]
