"""
Translation of job store failures into HTTP responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cqueue.store import InvalidTransitionError, JobNotFoundError
from cqueue.store.state import allowed_actions
from cqueue.types.api import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    detail: str,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        detail=detail,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def job_not_found_handler(request: Request, exc: JobNotFoundError) -> JSONResponse:
    """Map a missing job to 404."""
    return _error_response(request, status.HTTP_404_NOT_FOUND, "not_found", str(exc))


async def invalid_transition_handler(
    request: Request,
    exc: InvalidTransitionError,
) -> JSONResponse:
    """Map a forbidden state transition to 409, naming what the job still allows."""
    logger.warning(
        "Rejected job transition",
        extra={"job_id": exc.job_id, "status": exc.status.value, "action": exc.action.value},
    )
    actions = allowed_actions(exc.status)
    if actions:
        detail = f"{exc} (allowed: {', '.join(actions)})"
    else:
        detail = f"{exc} (job is terminal)"
    return _error_response(request, status.HTTP_409_CONFLICT, "invalid_transition", detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the job store exception handlers on an application."""
    app.add_exception_handler(JobNotFoundError, job_not_found_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
