"""Request body size limit middleware.

Rejects bodies larger than the upload limit plus multipart framing before
they reach the route. Enforced for Content-Length and for chunked bodies.
Raw ASGI.

An optional authorize hook runs first for oversized requests, so a caller
who may not upload at all is told so (401/403) instead of FILE_TOO_LARGE.
"""

import json
from typing import Any, Callable

from construction_docs.core.exception_handlers import status_for
from construction_docs.domain.exceptions import DocumentServiceException
from construction_docs.middleware.request_id import get_header

Authorize = Callable[[dict], DocumentServiceException | None]


async def _send_json(
    send: Callable,
    status: int,
    content: dict[str, Any],
    extra_headers: list[tuple[bytes, bytes]] | None = None,
) -> None:
    await send({
        "type": "http.response.start",
        "status": status,
        "headers": [(b"content-type", b"application/json"), *(extra_headers or [])],
    })
    await send({
        "type": "http.response.body",
        "body": json.dumps(content).encode(),
        "more_body": False,
    })


async def _reject(
    scope: dict,
    send: Callable,
    max_bytes: int,
    actual: int | None,
    authorize: Authorize | None,
) -> None:
    """Answer an oversized request: authorization failure first, else 413."""
    denial = authorize(scope) if authorize is not None else None
    if denial is not None:
        status = status_for(denial)
        headers = [(b"www-authenticate", b"Bearer")] if status == 401 else None
        await _send_json(send, status, denial.to_dict(), headers)
        return
    details: dict[str, Any] = {"max_size": max_bytes}
    if actual is not None:
        details["size"] = actual
    await _send_json(
        send,
        413,
        {
            "error": "FILE_TOO_LARGE",
            "message": f"Request body must be at most {max_bytes} bytes",
            "details": details,
        },
    )


def RequestSizeLimitMiddleware(
    app: Callable, max_bytes: int, authorize: Authorize | None = None
) -> Callable:
    """Reject requests whose body exceeds max_bytes (Content-Length or chunked)."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        content_length_str = get_header(scope, "content-length")
        if content_length_str:
            try:
                length = int(content_length_str)
            except ValueError:
                length = None
            if length is not None and length > max_bytes:
                await _reject(scope, send, max_bytes, length, authorize)
                return
            await app(scope, receive, send)
            return

        if (get_header(scope, "transfer-encoding") or "").lower() != "chunked":
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            if message["type"] != "http.request":
                continue
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _reject(scope, send, max_bytes, total, authorize)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        class ReplayReceive:
            """Replay collected body chunks to the app one message at a time."""

            def __init__(self) -> None:
                self._index = 0

            async def __call__(self) -> dict:
                if self._index < len(chunks):
                    i = self._index
                    self._index += 1
                    return {
                        "type": "http.request",
                        "body": chunks[i],
                        "more_body": self._index < len(chunks),
                    }
                return await receive()

        await app(scope, ReplayReceive(), send)

    return asgi_app
