"""Job coordinator - waiting for asynchronous device operations."""
from .coordinator import (
    JobCoordinator,
    JobHandle,
    JobStatus,
    STATE_COMPLETED,
    STATE_EXCEPTION,
    STATE_KILLED,
    delete_dell_job,
    task_uri,
    wait_for_dell_job,
    wait_for_job,
    wait_for_task,
)

__all__ = [
    "JobCoordinator",
    "JobHandle",
    "JobStatus",
    "STATE_COMPLETED",
    "STATE_EXCEPTION",
    "STATE_KILLED",
    "delete_dell_job",
    "task_uri",
    "wait_for_dell_job",
    "wait_for_job",
    "wait_for_task",
]
