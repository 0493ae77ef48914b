"""
Job store module.
Contains the job record, state machine, selection policy and the store itself.
"""

from cqueue.store.exceptions import (
    InvalidTransitionError,
    JobNotFoundError,
    JobStoreError,
)
from cqueue.store.models import Job, QueueStats
from cqueue.store.policy import SelectionPolicy, select_fifo
from cqueue.store.repository import InMemoryJobStore
from cqueue.store.state import apply_transition

__all__ = [
    "InMemoryJobStore",
    "Job",
    "QueueStats",
    "SelectionPolicy",
    "select_fifo",
    "apply_transition",
    "JobStoreError",
    "JobNotFoundError",
    "InvalidTransitionError",
]
