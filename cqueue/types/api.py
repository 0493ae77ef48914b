"""
API request and response type definitions.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cqueue.constants import JobStatus
from cqueue.store.models import Job, QueueStats


class EnqueueJobRequest(BaseModel):
    """Request body for submitting a new job."""

    model_config = ConfigDict(extra="forbid")

    kind: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Opaque job classification, echoed back unchanged",
    )


class EnqueueJobResponse(BaseModel):
    """Response body after submitting a job."""

    id: int


class JobResponse(BaseModel):
    """Full job details response."""

    id: int
    kind: str
    status: JobStatus
    submitted_at: datetime
    dequeued_at: datetime | None
    concluded_at: datetime | None
    cancelled_at: datetime | None

    @classmethod
    def from_job(cls, job: Job) -> "JobResponse":
        """Build a response from a store snapshot."""
        return cls(
            id=job.id,
            kind=job.kind,
            status=job.status,
            submitted_at=job.submitted_at,
            dequeued_at=job.dequeued_at,
            concluded_at=job.concluded_at,
            cancelled_at=job.cancelled_at,
        )


class JobListResponse(BaseModel):
    """Paginated list of jobs."""

    jobs: list[JobResponse]
    total: int
    page: int
    page_size: int
    has_next: bool


class StatsResponse(BaseModel):
    """Job counts per status plus process uptime."""

    queued: int
    dequeued: int
    concluded: int
    cancelled: int
    total: int
    uptime_millis: int

    @classmethod
    def from_stats(cls, stats: QueueStats, uptime_millis: int) -> "StatsResponse":
        return cls(**stats.as_dict(), uptime_millis=uptime_millis)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None
    request_id: str | None = None
