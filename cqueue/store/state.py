"""
Job state machine.

Every (status, action) pair has a defined outcome: either the next status
from the transition table, or ``InvalidTransitionError``.
"""

from cqueue.constants import JobAction, JobStatus
from cqueue.store.exceptions import InvalidTransitionError

TRANSITIONS: dict[tuple[JobStatus, JobAction], JobStatus] = {
    (JobStatus.QUEUED, JobAction.PULL): JobStatus.DEQUEUED,
    (JobStatus.DEQUEUED, JobAction.COMPLETE): JobStatus.CONCLUDED,
    (JobStatus.QUEUED, JobAction.CANCEL): JobStatus.CANCELLED,
    (JobStatus.DEQUEUED, JobAction.CANCEL): JobStatus.CANCELLED,
}

# Timestamp field recorded when a job enters each status
TIMESTAMP_FIELDS: dict[JobStatus, str] = {
    JobStatus.QUEUED: "submitted_at",
    JobStatus.DEQUEUED: "dequeued_at",
    JobStatus.CONCLUDED: "concluded_at",
    JobStatus.CANCELLED: "cancelled_at",
}


def apply_transition(
    status: JobStatus,
    action: JobAction,
    job_id: int | None = None,
) -> JobStatus:
    """
    Resolve the status a job moves to when ``action`` is applied.

    Args:
        status: The job's current status.
        action: The requested action.
        job_id: Optional job identifier, used only for the error message.

    Returns:
        The next status.

    Raises:
        InvalidTransitionError: If the action is not allowed from ``status``.
    """
    try:
        return TRANSITIONS[(status, action)]
    except KeyError:
        raise InvalidTransitionError(status, action, job_id=job_id) from None


def allowed_actions(status: JobStatus) -> list[JobAction]:
    """List the actions that are valid from the given status."""
    return [action for (source, action) in TRANSITIONS if source == status]
