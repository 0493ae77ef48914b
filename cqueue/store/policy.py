"""
Selection policies deciding which queued job a consumer receives on pull.
"""

from collections.abc import Callable, Iterable

from cqueue.constants import JobStatus
from cqueue.store.models import Job

# A policy receives every job in the store and returns the one to deliver,
# or None when no job is eligible.
SelectionPolicy = Callable[[Iterable[Job]], Job | None]


def select_fifo(jobs: Iterable[Job]) -> Job | None:
    """
    Pick the queued job with the lowest identifier.

    Identifiers are allocated in submission order, so this is also the
    earliest ``submitted_at`` among queued jobs.
    """
    return min(
        (job for job in jobs if job.status == JobStatus.QUEUED),
        key=lambda job: job.id,
        default=None,
    )
