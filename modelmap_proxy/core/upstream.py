"""Outbound calls to the single upstream chat-completions endpoint."""

import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from .exceptions import NetworkError
from .upstream_transport import get_upstream_transport

logger = logging.getLogger("modelmap-proxy")

DEFAULT_UPSTREAM_URL = "https://api.poe.com/v1/chat/completions"
DEFAULT_TIMEOUT = 300.0
CONNECT_TIMEOUT = 10.0


def format_httpx_error(exc: Exception, url: Optional[str] = None) -> str:
    """Produce a detailed description of an httpx error for the logs."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    try:
        request = getattr(exc, "request", None)
    except RuntimeError:
        # httpx raises when .request was never attached
        request = None
    if request is not None:
        parts.append(f"request={request.method} {request.url}")
    elif url:
        parts.append(f"url={url}")
    return "; ".join(parts)


def extract_error_message(content: bytes) -> Optional[str]:
    """Pull a human readable message out of an upstream error body."""
    try:
        payload = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
        return None
    if not isinstance(payload, dict):
        return None

    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    elif isinstance(error, str) and error:
        return error

    message = payload.get("message")
    if isinstance(message, str) and message:
        return message
    return None


@dataclass
class UpstreamResponse:
    """A fully buffered upstream response."""

    status_code: int
    headers: httpx.Headers
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.content)


class UpstreamStream:
    """An upstream response whose body is read incrementally.

    Owns the HTTP client that produced it; ``aclose`` releases both and is
    safe to call more than once.
    """

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient) -> None:
        self._response = response
        self._client = client
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def is_success(self) -> bool:
        return self._response.is_success

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        # Decoded bytes, so a compressed upstream body never leaks to callers
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except (httpx.HTTPError, httpx.StreamError) as exc:
            logger.error(
                "Upstream stream read failed: %s",
                format_httpx_error(exc, str(self._response.url)),
            )
            raise NetworkError() from exc

    async def aread(self) -> bytes:
        try:
            return await self._response.aread()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            logger.error(
                "Upstream body read failed: %s",
                format_httpx_error(exc, str(self._response.url)),
            )
            raise NetworkError() from exc

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


class UpstreamClient:
    """Issues the single POST per request to the fixed upstream URL.

    Headers are built from scratch: only the caller's bearer token and the
    JSON content type are sent. There are no retries; connection and
    timeout failures surface as ``NetworkError``.
    """

    def __init__(
        self,
        url: str = DEFAULT_UPSTREAM_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout

    @staticmethod
    def build_headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def encode_body(body: Mapping[str, Any]) -> bytes:
        return json.dumps(body, ensure_ascii=False).encode("utf-8")

    async def send(self, body: Mapping[str, Any], token: str) -> UpstreamResponse:
        """POST ``body`` and buffer the whole response."""
        content = self.encode_body(body)
        timeout = httpx.Timeout(self.timeout, connect=CONNECT_TIMEOUT)
        transport = get_upstream_transport(self.url)
        logger.debug(f"Sending buffered request to {self.url} ({len(content)} bytes)")

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                resp = await client.post(
                    self.url, headers=self.build_headers(token), content=content
                )
        except httpx.HTTPError as exc:
            logger.error("Upstream request failed: %s", format_httpx_error(exc, self.url))
            raise NetworkError() from exc

        logger.debug(f"Received response from {self.url}: status {resp.status_code}")
        return UpstreamResponse(
            status_code=resp.status_code,
            headers=resp.headers,
            content=resp.content,
        )

    async def open_stream(self, body: Mapping[str, Any], token: str) -> UpstreamStream:
        """POST ``body`` and return as soon as the response headers arrive."""
        content = self.encode_body(body)
        # No read timeout: event streams may idle between chunks
        stream_timeout = httpx.Timeout(
            connect=CONNECT_TIMEOUT, read=None, write=self.timeout, pool=self.timeout
        )
        transport = get_upstream_transport(self.url)
        client = httpx.AsyncClient(timeout=stream_timeout, transport=transport)
        try:
            request = client.build_request(
                "POST", self.url, headers=self.build_headers(token), content=content
            )
            logger.debug(f"Sending streaming request to {self.url} ({len(content)} bytes)")
            resp = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.error(
                "Upstream streaming request failed: %s", format_httpx_error(exc, self.url)
            )
            await client.aclose()
            raise NetworkError() from exc
        except Exception:
            await client.aclose()
            raise

        logger.debug(f"Received stream headers from {self.url}: status {resp.status_code}")
        return UpstreamStream(resp, client)
