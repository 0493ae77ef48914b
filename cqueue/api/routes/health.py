"""
Health check routes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import Response

from cqueue import __version__
from cqueue.api.dependencies import JobStore, Uptime
from cqueue.observability.metrics import get_metrics
from cqueue.types.api import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report service status, version and uptime.",
)
async def health_check(uptime: Uptime) -> HealthResponse:
    """
    Perform a health check.

    The queue has no external dependencies, so a responding process is
    healthy.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(uptime, 3),
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the service is ready to receive traffic.",
)
async def readiness_check(store: JobStore) -> dict:
    """
    Kubernetes readiness probe endpoint.

    Takes a stats snapshot, so a wedged store lock shows up as a hung probe.
    """
    store.stats()
    return {"ready": True}


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> dict:
    """Kubernetes liveness probe endpoint."""
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics.",
)
async def metrics(store: JobStore) -> Response:
    """
    Expose Prometheus metrics.

    Queue depth gauges are refreshed from the store before rendering.
    """
    metrics_collector = get_metrics()
    metrics_collector.update_queue_depth(store.stats())
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
