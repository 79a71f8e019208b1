"""Relay upstream chat completion responses back to the caller."""

import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Mapping, Optional

from fastapi import Response
from fastapi.responses import StreamingResponse

from .upstream import UpstreamClient, UpstreamStream

logger = logging.getLogger("modelmap-proxy")

CORS_HEADERS = {"access-control-allow-origin": "*"}

STREAM_MEDIA_TYPE = "text/event-stream; charset=utf-8"
STREAM_HEADERS = {
    "cache-control": "no-cache",
    "connection": "keep-alive",
    **CORS_HEADERS,
}

JSON_MEDIA_TYPE = "application/json"

DisconnectChecker = Callable[[], Awaitable[bool]]


def json_passthrough_response(content: bytes, status_code: int) -> Response:
    """Return an upstream body unmodified as JSON with the mirrored status."""
    return Response(
        content=content,
        status_code=status_code,
        headers=dict(CORS_HEADERS),
        media_type=JSON_MEDIA_TYPE,
    )


async def relay_buffered(
    client: UpstreamClient, body: Mapping[str, Any], token: str
) -> Response:
    """Forward ``body`` and return the complete upstream body as-is."""
    upstream = await client.send(body, token)
    if not upstream.is_success:
        logger.warning(f"Upstream returned error status {upstream.status_code}")
    return json_passthrough_response(upstream.content, upstream.status_code)


async def copy_stream(
    upstream: UpstreamStream,
    disconnect_checker: Optional[DisconnectChecker] = None,
) -> AsyncIterator[bytes]:
    """Yield upstream chunks as they arrive, closing the upstream when done.

    The loop ends when the upstream signals end-of-stream or when the caller
    disconnects; either way the upstream response is closed.
    """
    chunk_count = 0
    try:
        async for chunk in upstream.aiter_bytes():
            if disconnect_checker and await disconnect_checker():
                logger.info("Client disconnected, closing upstream stream")
                break
            if not chunk:
                continue
            chunk_count += 1
            yield chunk
    except asyncio.CancelledError:
        logger.info("Stream relay cancelled by client")
        raise
    except Exception as exc:
        logger.error(f"Error during stream relay after {chunk_count} chunks: {exc}")
        raise
    finally:
        logger.debug(f"Stream relay finished, total chunks: {chunk_count}")
        await upstream.aclose()


async def relay_stream(
    client: UpstreamClient,
    body: Mapping[str, Any],
    token: str,
    disconnect_checker: Optional[DisconnectChecker] = None,
) -> Response:
    """Forward ``body`` and stream the upstream event stream back untouched.

    The outbound status mirrors the upstream status. When the upstream
    rejects the request outright (non-2xx), the error body is read and
    returned as buffered JSON instead of being framed as an event stream.
    """
    upstream = await client.open_stream(body, token)

    if not upstream.is_success:
        logger.warning(
            f"Streaming request returned error status {upstream.status_code}"
        )
        try:
            data = await upstream.aread()
        finally:
            await upstream.aclose()
        return json_passthrough_response(data, upstream.status_code)

    logger.info(f"Streaming upstream response, status {upstream.status_code}")
    return StreamingResponse(
        copy_stream(upstream, disconnect_checker),
        status_code=upstream.status_code,
        headers=dict(STREAM_HEADERS),
        media_type=STREAM_MEDIA_TYPE,
    )
