"""
Job record and aggregate types held by the store.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from cqueue.constants import JobStatus


@dataclass(frozen=True)
class Job:
    """
    Point-in-time snapshot of a job.

    Records are immutable: a transition stores a new record in place of the
    old one, so a snapshot handed to a caller never changes underneath it.
    """

    id: int
    kind: str
    status: JobStatus
    submitted_at: datetime
    dequeued_at: datetime | None = None
    concluded_at: datetime | None = None
    cancelled_at: datetime | None = None

    def evolve(self, **changes) -> "Job":
        """Return a copy of this record with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class QueueStats:
    """Per-status job counts taken from a single consistent snapshot."""

    queued: int = 0
    dequeued: int = 0
    concluded: int = 0
    cancelled: int = 0

    @property
    def total(self) -> int:
        """Number of jobs ever submitted."""
        return self.queued + self.dequeued + self.concluded + self.cancelled

    def count(self, status: JobStatus) -> int:
        """Get the count for a single status."""
        return getattr(self, status.value)

    def as_dict(self) -> dict[str, int]:
        return {
            "queued": self.queued,
            "dequeued": self.dequeued,
            "concluded": self.concluded,
            "cancelled": self.cancelled,
            "total": self.total,
        }
