"""
In-memory job store.
Holds every job record and applies state transitions atomically.
"""

import logging
import threading
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timezone

from cqueue.constants import JobAction, JobStatus
from cqueue.store.exceptions import JobNotFoundError
from cqueue.store.models import Job, QueueStats
from cqueue.store.policy import SelectionPolicy, select_fifo
from cqueue.store.state import TIMESTAMP_FIELDS, apply_transition

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryJobStore:
    """
    Thread-safe in-memory job store.

    Every operation runs under a single lock, so operations behave as if
    totally ordered:
    - Submission allocates the next identifier and inserts in one step
    - Pull selects and transitions a job in one step (exactly-once delivery)
    - Complete and cancel check and apply the transition in one step
    - Reads return immutable snapshots

    Jobs are never deleted; they live for the lifetime of the process.
    """

    def __init__(
        self,
        policy: SelectionPolicy = select_fifo,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize an empty store.

        Args:
            policy: Selection policy used by ``pull``.
            clock: Source of transition timestamps.
        """
        self._lock = threading.Lock()
        self._jobs: dict[int, Job] = {}
        self._policy = policy
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def submit(self, kind: str) -> Job:
        """
        Add a job to the queue.

        The identifier is the number of jobs already stored, read in the
        same critical section as the insert.

        Args:
            kind: Opaque classification tag supplied by the producer.

        Returns:
            The queued job.
        """
        with self._lock:
            job_id = len(self._jobs)
            job = Job(
                id=job_id,
                kind=kind,
                status=JobStatus.QUEUED,
                submitted_at=self._clock(),
            )
            self._jobs[job_id] = job

        logger.info("Job submitted", extra={"job_id": job_id, "kind": kind})
        return job

    def pull(self) -> Job | None:
        """
        Deliver the next eligible job to a consumer.

        Returns:
            The job, now dequeued, or None if no job is queued.
        """
        with self._lock:
            candidate = self._policy(self._jobs.values())
            if candidate is None:
                return None
            job = self._transition(candidate, JobAction.PULL)

        logger.info("Job dequeued", extra={"job_id": job.id, "kind": job.kind})
        return job

    def complete(self, job_id: int) -> Job:
        """
        Mark a dequeued job as concluded.

        Args:
            job_id: The job identifier.

        Returns:
            The concluded job.

        Raises:
            JobNotFoundError: If the job does not exist.
            InvalidTransitionError: If the job is not currently dequeued.
        """
        with self._lock:
            job = self._transition(self._get(job_id), JobAction.COMPLETE)

        logger.info("Job concluded", extra={"job_id": job_id})
        return job

    def cancel(self, job_id: int) -> Job:
        """
        Cancel a queued or dequeued job.

        Args:
            job_id: The job identifier.

        Returns:
            The cancelled job.

        Raises:
            JobNotFoundError: If the job does not exist.
            InvalidTransitionError: If the job is already concluded or cancelled.
        """
        with self._lock:
            job = self._transition(self._get(job_id), JobAction.CANCEL)

        logger.info("Job cancelled", extra={"job_id": job_id})
        return job

    def get(self, job_id: int) -> Job:
        """
        Get a job by ID.

        Raises:
            JobNotFoundError: If the job does not exist.
        """
        with self._lock:
            return self._get(job_id)

    def list_jobs(
        self,
        status: JobStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Job], int]:
        """
        List jobs in identifier order with optional filtering.

        Args:
            status: Optional status filter.
            limit: Maximum number of jobs to return.
            offset: Offset for pagination.

        Returns:
            Tuple of (jobs, total_count) where total_count is the number of
            jobs matching the filter.
        """
        with self._lock:
            matching = [
                job
                for job in self._jobs.values()
                if status is None or job.status == status
            ]
        return matching[offset : offset + limit], len(matching)

    def stats(self) -> QueueStats:
        """
        Count jobs per status.

        Returns:
            QueueStats taken under the store lock.
        """
        with self._lock:
            counts = Counter(job.status for job in self._jobs.values())

        return QueueStats(
            queued=counts[JobStatus.QUEUED],
            dequeued=counts[JobStatus.DEQUEUED],
            concluded=counts[JobStatus.CONCLUDED],
            cancelled=counts[JobStatus.CANCELLED],
        )

    def _get(self, job_id: int) -> Job:
        """Look up a job. Caller must hold the lock."""
        try:
            return self._jobs[job_id]
        except KeyError:
            raise JobNotFoundError(job_id) from None

    def _transition(self, job: Job, action: JobAction) -> Job:
        """Apply an action to a stored job. Caller must hold the lock."""
        status = apply_transition(job.status, action, job_id=job.id)
        updated = job.evolve(status=status, **{TIMESTAMP_FIELDS[status]: self._clock()})
        self._jobs[job.id] = updated
        return updated
