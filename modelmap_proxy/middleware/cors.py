"""Allow-all CORS handling.

Every response gets ``access-control-allow-origin: *``. Any ``OPTIONS``
request is answered here as a preflight, whatever the path, without
reaching the routes.
"""

from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

ALLOW_ORIGIN = "*"
PREFLIGHT_HEADERS = {
    "access-control-allow-origin": ALLOW_ORIGIN,
    "access-control-allow-methods": "GET, POST, OPTIONS",
    "access-control-allow-headers": "authorization, content-type",
}


class AllowAllCORSMiddleware:
    """Pure ASGI middleware, so streamed bodies pass through unbuffered."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=204, headers=PREFLIGHT_HEADERS)
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if "access-control-allow-origin" not in headers:
                    headers["access-control-allow-origin"] = ALLOW_ORIGIN
            await send(message)

        await self.app(scope, receive, send_with_cors)
