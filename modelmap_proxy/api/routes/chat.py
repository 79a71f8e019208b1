"""OpenAI-compatible chat completions endpoint."""

import logging

from fastapi import Request, Response

from ...auth import extract_bearer_token
from ...core.registry import get_state
from ...core.relay import relay_buffered, relay_stream
from ...core.request_filter import (
    filter_chat_request,
    is_stream_request,
    parse_json_object,
)

logger = logging.getLogger("modelmap-proxy")


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions

    The bearer token is checked before the body is read, so an
    unauthenticated call never reaches the upstream. The filtered body is
    relayed as an event stream when the caller asked for ``stream: true``
    and buffered otherwise.
    """
    logger.info("Received chat completions request")
    token = extract_bearer_token(request.headers)
    payload = parse_json_object(await request.body())

    state = get_state()
    body = filter_chat_request(payload, state.model_map)
    is_stream = is_stream_request(body)
    logger.info(f"Processing request for model {body.get('model')}, stream={is_stream}")

    if is_stream:
        return await relay_stream(
            state.upstream,
            body,
            token,
            disconnect_checker=request.is_disconnected,
        )
    return await relay_buffered(state.upstream, body, token)
