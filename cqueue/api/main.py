"""
FastAPI application entry point.
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from cqueue import __version__
from cqueue.api.errors import register_exception_handlers
from cqueue.api.middleware import create_request_middleware
from cqueue.api.routes import health_router, jobs_router
from cqueue.config import get_settings
from cqueue.observability.logging import setup_logging
from cqueue.observability.metrics import setup_metrics
from cqueue.observability.tracing import instrument_fastapi, setup_tracing
from cqueue.store import InMemoryJobStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events. The job store lives only in
    memory, so every job is discarded on shutdown.
    """
    setup_logging()
    setup_metrics()
    setup_tracing()

    logger.info("Application started", extra={"version": __version__})

    yield

    stats = app.state.job_store.stats()
    logger.info("Application shutdown", extra={"jobs_discarded": stats.total})


def create_app(job_store: InMemoryJobStore | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        job_store: Optional store to serve. A fresh empty store is created
            when omitted.

    Returns:
        FastAPI: The configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="cqueue",
        description="In-memory job queue with FIFO delivery",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.job_store = job_store if job_store is not None else InMemoryJobStore()
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        BaseHTTPMiddleware,
        dispatch=create_request_middleware(),
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(jobs_router)

    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    app = create_app()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    run()
