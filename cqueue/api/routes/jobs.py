"""
Job queue routes.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from cqueue.api.dependencies import JobStore, Uptime
from cqueue.constants import (
    API_V1_PREFIX,
    SPAN_CANCEL_JOB,
    SPAN_COMPLETE_JOB,
    SPAN_PULL_JOB,
    SPAN_SUBMIT_JOB,
    JobAction,
    JobStatus,
)
from cqueue.observability.metrics import get_metrics
from cqueue.observability.tracing import get_tracer
from cqueue.store import InvalidTransitionError, Job, JobNotFoundError
from cqueue.types.api import (
    EnqueueJobRequest,
    EnqueueJobResponse,
    ErrorResponse,
    JobListResponse,
    JobResponse,
    StatsResponse,
)

router = APIRouter(prefix=f"{API_V1_PREFIX}/jobs", tags=["Jobs"])

JobId = Annotated[int, Path(ge=0, description="Job identifier")]

ERROR_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Job not found"},
    status.HTTP_409_CONFLICT: {
        "model": ErrorResponse,
        "description": "Job status forbids the operation",
    },
}


def _apply(action: JobAction, span_name: str, operation: Callable[[int], Job], job_id: int) -> Job:
    """
    Run a store transition inside a span, recording the outcome.

    Store errors are re-raised for the application's exception handlers.
    """
    metrics = get_metrics()
    with get_tracer().start_as_current_span(span_name) as span:
        span.set_attribute("job.id", job_id)
        try:
            job = operation(job_id)
        except JobNotFoundError:
            metrics.record_transition_rejected(action.value, reason="not_found")
            raise
        except InvalidTransitionError:
            metrics.record_transition_rejected(action.value, reason="invalid_transition")
            raise
        span.set_attribute("job.status", job.status.value)

    metrics.record_transition(action.value)
    return job


@router.api_route(
    "/enqueue",
    methods=["PUT", "POST"],
    response_model=EnqueueJobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a job",
    description="Add a job to the end of the queue and return its identifier.",
)
async def enqueue_job(request: EnqueueJobRequest, store: JobStore) -> EnqueueJobResponse:
    """
    Submit a new job.

    Args:
        request: Job submission request.
        store: The job store.

    Returns:
        EnqueueJobResponse with the allocated identifier.
    """
    with get_tracer().start_as_current_span(SPAN_SUBMIT_JOB) as span:
        job = store.submit(request.kind)
        span.set_attribute("job.id", job.id)
        span.set_attribute("job.kind", job.kind)

    get_metrics().record_job_submitted(kind=job.kind)

    return EnqueueJobResponse(id=job.id)


@router.post(
    "/dequeue",
    response_model=JobResponse,
    summary="Pull the next job",
    description=(
        "Deliver the oldest queued job to the caller. "
        "Returns 204 when no job is queued; callers should poll again later."
    ),
    responses={status.HTTP_204_NO_CONTENT: {"description": "No job available"}},
)
async def dequeue_job(store: JobStore) -> JobResponse | Response:
    """
    Pull the next job from the queue.

    Args:
        store: The job store.

    Returns:
        JobResponse for the dequeued job, or an empty 204 response.
    """
    metrics = get_metrics()

    with get_tracer().start_as_current_span(SPAN_PULL_JOB) as span:
        job = store.pull()
        span.set_attribute("job.found", job is not None)
        if job is not None:
            span.set_attribute("job.id", job.id)

    if job is None:
        metrics.record_empty_pull()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    metrics.record_transition(JobAction.PULL.value)

    return JobResponse.from_job(job)


@router.post(
    "/{job_id}/conclude",
    response_model=JobResponse,
    summary="Conclude a job",
    description="Mark a dequeued job as finished.",
    responses=ERROR_RESPONSES,
)
async def conclude_job(store: JobStore, job_id: JobId) -> JobResponse:
    """
    Conclude a job held by a consumer.

    Raises:
        JobNotFoundError: Mapped to 404.
        InvalidTransitionError: Mapped to 409 if the job is not dequeued.
    """
    job = _apply(JobAction.COMPLETE, SPAN_COMPLETE_JOB, store.complete, job_id)
    return JobResponse.from_job(job)


@router.post(
    "/conclude/{job_id}",
    response_model=JobResponse,
    summary="Conclude a job (legacy path)",
    description="Same as `POST /v1/jobs/{job_id}/conclude`, kept for existing consumers.",
    responses=ERROR_RESPONSES,
    deprecated=True,
)
async def conclude_job_legacy(store: JobStore, job_id: JobId) -> JobResponse:
    job = _apply(JobAction.COMPLETE, SPAN_COMPLETE_JOB, store.complete, job_id)
    return JobResponse.from_job(job)


@router.post(
    "/{job_id}/cancel",
    response_model=JobResponse,
    summary="Cancel a job",
    description="Withdraw a queued or dequeued job.",
    responses=ERROR_RESPONSES,
)
async def cancel_job(store: JobStore, job_id: JobId) -> JobResponse:
    """
    Cancel a job that has not reached a terminal state.

    Raises:
        JobNotFoundError: Mapped to 404.
        InvalidTransitionError: Mapped to 409 if the job is already terminal.
    """
    job = _apply(JobAction.CANCEL, SPAN_CANCEL_JOB, store.cancel, job_id)
    return JobResponse.from_job(job)


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Get queue statistics",
    description="Count jobs per status from a single consistent snapshot.",
)
async def get_job_stats(store: JobStore, uptime: Uptime) -> StatsResponse:
    stats = store.stats()
    get_metrics().update_queue_depth(stats)
    return StatsResponse.from_stats(stats, uptime_millis=int(uptime * 1000))


@router.get(
    "",
    response_model=JobListResponse,
    summary="List jobs",
    description="List jobs in submission order with optional status filtering.",
)
async def list_jobs(
    store: JobStore,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    status: JobStatus | None = Query(default=None),
) -> JobListResponse:
    """
    List jobs tracked by the queue.

    Args:
        store: The job store.
        page: Page number (1-indexed).
        page_size: Number of items per page.
        status: Optional status filter.

    Returns:
        JobListResponse with paginated jobs.
    """
    offset = (page - 1) * page_size
    jobs, total = store.list_jobs(status=status, limit=page_size, offset=offset)

    return JobListResponse(
        jobs=[JobResponse.from_job(job) for job in jobs],
        total=total,
        page=page,
        page_size=page_size,
        has_next=(page * page_size) < total,
    )


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    summary="Get job details",
    description="Get the current snapshot of a job.",
    responses={status.HTTP_404_NOT_FOUND: ERROR_RESPONSES[status.HTTP_404_NOT_FOUND]},
)
async def get_job(store: JobStore, job_id: JobId) -> JobResponse:
    """
    Get job details by ID.

    Raises:
        JobNotFoundError: Mapped to 404.
    """
    return JobResponse.from_job(store.get(job_id))
