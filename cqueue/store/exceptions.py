"""
Typed failures raised by the job store.

An empty pull is not represented here: it is a normal outcome and is
returned as ``None``.
"""

from cqueue.constants import JobAction, JobStatus


class JobStoreError(Exception):
    """Base class for job store failures."""


class JobNotFoundError(JobStoreError):
    """The referenced job identifier is absent from the store."""

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Unable to find a job with ID: `{job_id}`")


class InvalidTransitionError(JobStoreError):
    """The job exists but its current status forbids the requested action."""

    def __init__(self, status: JobStatus, action: JobAction, job_id: int | None = None):
        self.job_id = job_id
        self.status = status
        self.action = action
        target = "job" if job_id is None else f"job {job_id}"
        super().__init__(f"Cannot {action} {target} in status {status}")
