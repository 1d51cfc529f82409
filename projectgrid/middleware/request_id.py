"""Request ID propagation.

Every HTTP request gets an ID: the caller's X-Request-ID when it is safe to
log, otherwise a fresh UUID4. The ID is placed in the request context for
log records and echoed on the response.
"""

import re
import uuid
from typing import Any, Awaitable, Callable, MutableMapping

from projectgrid.shared.context import clear_request_context, set_request_id

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
ASGIApp = Callable[[Scope, Callable, Callable], Awaitable[None]]

_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


def sanitize_request_id(raw: str | None) -> str:
    """Keep a client ID made of [A-Za-z0-9_-] up to 64 chars, else mint one."""
    candidate = (raw or "").strip()
    if _SAFE_REQUEST_ID.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


class RequestIDMiddleware:
    """Raw ASGI middleware; non-HTTP scopes pass through untouched."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name
        self._header_key = header_name.lower().encode("latin-1")

    def _incoming(self, scope: Scope) -> str | None:
        for key, value in scope.get("headers", ()):
            if key.lower() == self._header_key:
                return value.decode("latin-1")
        return None

    async def __call__(self, scope: Scope, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = sanitize_request_id(self._incoming(scope))
        scope.setdefault("state", {})["request_id"] = request_id
        set_request_id(request_id)

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", ()),
                    (self._header_key, request_id.encode("latin-1")),
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        finally:
            clear_request_context()
