"""
FastAPI dependencies shared by the route modules.
"""

import time
from typing import Annotated

from fastapi import Depends, Request

from cqueue.store import InMemoryJobStore


def get_job_store(request: Request) -> InMemoryJobStore:
    """Return the process-wide job store attached to the application."""
    return request.app.state.job_store


def get_uptime_seconds(request: Request) -> float:
    """Seconds elapsed since the application was created."""
    return time.monotonic() - request.app.state.started_at


# Type alias for dependency injection
JobStore = Annotated[InMemoryJobStore, Depends(get_job_store)]
Uptime = Annotated[float, Depends(get_uptime_seconds)]
