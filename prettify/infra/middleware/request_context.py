"""
Request context middleware for structured logging.
"""

from __future__ import annotations

from uuid import uuid4

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from prettify.infra.config.logging_config import bind_context, clear_context, get_logger


class RequestContextMiddleware:
    """Adds a request_id and basic request info to structlog context.

    Also logs request start/end and propagates the X-Request-ID header.
    Written as plain ASGI middleware so streamed bodies pass through
    chunk by chunk and client disconnects reach the endpoint.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        request_id = headers.get(b"x-request-id", b"").decode("latin-1") or str(uuid4())
        client = scope.get("client")

        bind_context(request_id=request_id, path=scope["path"], method=scope["method"])
        logger = get_logger("http")
        logger.info("request.start", client_ip=client[0] if client else None)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (b"x-request-id", request_id.encode("latin-1")),
                ]
                logger.info("request.end", status_code=message["status"])
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as exc:  # pragma: no cover
            logger.exception("request.error", error=str(exc))
            raise
        finally:
            clear_context()
