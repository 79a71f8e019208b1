"""OpenAI-compatible image generation endpoint, emulated over chat."""

import logging

from fastapi import Request

from ...auth import extract_bearer_token
from ...core.images import generate_image
from ...core.registry import get_state
from ...core.request_filter import parse_json_object
from ...types import ImageResponse

logger = logging.getLogger("modelmap-proxy")


async def image_generations(request: Request) -> ImageResponse:
    """Image generations endpoint.

    POST /v1/images/generations
    """
    logger.info("Received image generation request")
    token = extract_bearer_token(request.headers)
    payload = parse_json_object(await request.body())

    state = get_state()
    return await generate_image(state.upstream, payload, token, state.model_map)
