"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class JobStatus(StrEnum):
    """
    Job lifecycle states.

    State transitions:
    - QUEUED -> DEQUEUED (pulled by a consumer)
    - DEQUEUED -> CONCLUDED (completed by the consumer)
    - QUEUED -> CANCELLED
    - DEQUEUED -> CANCELLED
    CONCLUDED and CANCELLED are terminal.
    """

    QUEUED = "queued"
    DEQUEUED = "dequeued"
    CONCLUDED = "concluded"
    CANCELLED = "cancelled"


class JobAction(StrEnum):
    """Operations that move an existing job between states."""

    PULL = "pull"
    COMPLETE = "complete"
    CANCEL = "cancel"


# API constants
API_V1_PREFIX = "/v1"
REQUEST_ID_HEADER = "X-Request-ID"

# Metrics names
METRIC_QUEUE_DEPTH = "job_queue_depth"
METRIC_JOBS_SUBMITTED = "jobs_submitted_total"
METRIC_JOB_TRANSITIONS = "job_transitions_total"
METRIC_JOB_TRANSITIONS_REJECTED = "job_transitions_rejected_total"
METRIC_EMPTY_PULLS = "job_empty_pulls_total"
METRIC_API_REQUESTS = "api_requests_total"
METRIC_API_LATENCY = "api_request_latency_seconds"

# Trace span names
SPAN_SUBMIT_JOB = "submit_job"
SPAN_PULL_JOB = "pull_job"
SPAN_COMPLETE_JOB = "complete_job"
SPAN_CANCEL_JOB = "cancel_job"
