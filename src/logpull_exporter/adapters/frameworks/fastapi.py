"""FastAPI adapter for the metrics endpoint."""

from fastapi import APIRouter, Response

from logpull_exporter.adapters.frameworks.asgi import (
    PROMETHEUS_CONTENT_TYPE,
    render_metrics,
)
from logpull_exporter.core.ports import MetricsSourcePort


def create_metrics_router(source: MetricsSourcePort) -> APIRouter:
    """Create a FastAPI router with a /metrics endpoint.

    Args:
        source: Collector implementing MetricsSourcePort.

    Returns:
        APIRouter with /metrics configured.
    """
    router = APIRouter()

    @router.get("/metrics")
    async def get_metrics() -> Response:
        """Run one collection cycle and return it in Prometheus text format."""
        body = await render_metrics(source)
        return Response(content=body, media_type=PROMETHEUS_CONTENT_TYPE)

    return router
