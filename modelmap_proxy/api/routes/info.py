"""Informational fallback for every unrouted method and path."""

import logging

from fastapi import Request

from ...core.registry import get_state

logger = logging.getLogger("modelmap-proxy")

ENDPOINTS = [
    "POST /v1/chat/completions",
    "POST /v1/images/generations",
    "GET /v1/models",
]


async def service_info(request: Request) -> dict:
    """Describe the available endpoints."""
    logger.debug(f"Serving info response for {request.method} {request.url.path}")
    return {
        "message": "OK, POST /v1/chat/completions",
        "models_loaded": len(get_state().model_map),
        "endpoints": ENDPOINTS,
    }
