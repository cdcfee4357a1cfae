"""ASGI generic adapter for the metrics endpoint.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency. Every scrape of /metrics runs one collection cycle.
"""

import json
from collections.abc import Callable, Coroutine
from typing import Any

from logpull_exporter.core.encoding.prometheus import encode_metrics
from logpull_exporter.core.logs import get_logger, log_exception
from logpull_exporter.core.ports import MetricsSourcePort

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]
ShutdownHook = Callable[[], Coroutine[Any, Any, None]]

PROMETHEUS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

logger = get_logger(__name__)


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def render_metrics(source: MetricsSourcePort) -> str:
    """Run one cycle on ``source`` and encode it in Prometheus text format."""
    samples = await source.collect()
    return encode_metrics(source.describe(), samples)


async def _handle_metrics(send: Send, source: MetricsSourcePort) -> None:
    """Serve /metrics, turning unexpected errors into a 500 response."""
    try:
        body = await render_metrics(source)
    except Exception:
        log_exception("Error collecting metrics", logger)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)
        return
    await _send_response(send, 200, PROMETHEUS_CONTENT_TYPE, body)


async def _handle_lifespan(
    receive: Receive, send: Send, on_shutdown: ShutdownHook | None
) -> None:
    """Answer lifespan events, running ``on_shutdown`` before the server exits."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            if on_shutdown is not None:
                try:
                    await on_shutdown()
                except Exception:
                    log_exception("Error during shutdown", logger)
            await send({"type": "lifespan.shutdown.complete"})
            return


def create_asgi_app(
    source: MetricsSourcePort,
    on_shutdown: ShutdownHook | None = None,
) -> ASGIApp:
    """Create an ASGI app exposing ``source`` on /metrics.

    Args:
        source: Collector implementing MetricsSourcePort.
        on_shutdown: Coroutine function awaited on lifespan shutdown,
            typically closing the HTTP client used by the collector.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _handle_lifespan(receive, send, on_shutdown)
            return
        if scope["type"] != "http":
            return

        path = scope["path"]

        if path == "/metrics":
            method = scope.get("method", "GET")
            if method not in ("GET", "HEAD"):
                await _send_response(send, 405, "text/plain", "Method Not Allowed")
                return
            if method == "HEAD":
                # Headers only; no collection cycle.
                await _send_response(send, 200, PROMETHEUS_CONTENT_TYPE, "")
                return
            await _handle_metrics(send, source)
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app
