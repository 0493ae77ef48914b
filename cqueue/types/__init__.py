"""
Type definitions for the job queue API.
Contains request and response models exchanged over HTTP.
"""

from cqueue.types.api import (
    EnqueueJobRequest,
    EnqueueJobResponse,
    ErrorResponse,
    HealthResponse,
    JobListResponse,
    JobResponse,
    StatsResponse,
)

__all__ = [
    "EnqueueJobRequest",
    "EnqueueJobResponse",
    "JobResponse",
    "JobListResponse",
    "StatsResponse",
    "HealthResponse",
    "ErrorResponse",
]
