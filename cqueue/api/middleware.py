"""
Request middleware: request ids and API metrics.
"""

import time
import uuid
from collections.abc import Callable

from fastapi import Request
from starlette.routing import Match

from cqueue.constants import REQUEST_ID_HEADER
from cqueue.observability.logging import bind_context, clear_context
from cqueue.observability.metrics import get_metrics

# Paths excluded from request metrics
UNTRACKED_PATHS = {"/metrics", "/docs", "/redoc", "/openapi.json"}


def _endpoint_label(request: Request) -> str:
    """Use the route template so job ids don't explode label cardinality."""
    route = request.scope.get("route")
    path = getattr(route, "path_format", None) or getattr(route, "path", None)
    if path:
        return path

    for candidate in request.app.routes:
        candidate_path = getattr(candidate, "path", None)
        if candidate_path is None:
            continue
        match, _ = candidate.matches(request.scope)
        if match == Match.FULL:
            return candidate_path
    return "unmatched"


def create_request_middleware() -> Callable:
    """
    Create the request middleware for FastAPI.

    Returns:
        The middleware function.
    """

    async def request_middleware(request: Request, call_next: Callable):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        clear_context()
        bind_context(request_id=request_id)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path not in UNTRACKED_PATHS:
            get_metrics().record_api_request(
                method=request.method,
                endpoint=_endpoint_label(request),
                status=response.status_code,
                duration_seconds=time.perf_counter() - start,
            )
        return response

    return request_middleware
