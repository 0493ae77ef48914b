"""
API routes module.
"""

from cqueue.api.routes.health import router as health_router
from cqueue.api.routes.jobs import router as jobs_router

__all__ = ["jobs_router", "health_router"]
