"""Waiting for device-side jobs and tasks to finish.

A configuration change that the controller cannot apply synchronously
answers with the location of a Task (or Job). JobCoordinator polls that
resource every ``poll_interval`` seconds until it reaches a terminal state,
or gives up once ``timeout`` seconds have passed since it was created.

Usage:
    await wait_for_task(client, location, poll_interval=10, timeout=300)
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    DELL_JOBS_URI,
    STATUS_OK,
)
from ..exceptions import JobDeletionFailed, JobFailed, JobTimedOut
from ..extractor import extract_and_decode
from ..oem import DellOemJob
from ..transport.base import Transport
from ..transport.redfish import get_json
from ..utils.logging_config import timed

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    """Coordinator state."""
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


# Redfish TaskState / JobState values
STATE_COMPLETED = "Completed"
STATE_KILLED = "Killed"
STATE_EXCEPTION = "Exception"

TASK_STATE_FIELD = "TaskState"
JOB_STATE_FIELD = "JobState"

TASK_FAILURE_STATES = frozenset({STATE_KILLED, STATE_EXCEPTION})
JOB_FAILURE_STATES = frozenset({STATE_EXCEPTION})

# Dell OEM job state reported inside a Completed task
DELL_JOB_FAILED = "Failed"


@dataclass(frozen=True)
class JobHandle:
    """A device-side asynchronous operation and how to wait for it."""
    uri: str
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = DEFAULT_TIMEOUT


def task_uri(location: str) -> str:
    """Map a TaskMonitor location to its Task resource.

    Newer controllers answer with ``/TaskService/TaskMonitors/<id>``, which
    returns no body; the matching ``/TaskService/Tasks/<id>`` does.
    """
    return location.replace("TaskMonitors", "Tasks", 1)


def _as_state(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"state is {type(value).__name__}, not a string")
    return value


class JobCoordinator:
    """Poll one job resource until it completes, fails or times out.

    The deadline counts from construction. Attempts are spaced
    ``poll_interval`` apart starting one interval after construction. A
    transport error during an attempt ends the wait immediately.
    """

    def __init__(
        self,
        transport: Transport,
        handle: JobHandle,
        state_field: str = TASK_STATE_FIELD,
        failure_states: frozenset = TASK_FAILURE_STATES,
    ):
        self.transport = transport
        self.handle = handle
        self.state_field = state_field
        self.failure_states = failure_states
        self.status = JobStatus.RUNNING
        self.attempts = 0
        self.last_state: Optional[str] = None
        self._started = time.monotonic()

    @property
    def device_id(self) -> str:
        return getattr(self.transport, "device_id", "N/A")

    async def wait(self) -> bytes:
        """Block until the job is terminal and return its final body.

        Raises:
            JobFailed: The job reported a failure state
            JobTimedOut: The deadline passed first
            TransportError: Fetching the job failed
        """
        remaining = self.handle.timeout - (time.monotonic() - self._started)
        try:
            return await asyncio.wait_for(self._poll(), timeout=max(remaining, 0))
        except asyncio.TimeoutError:
            self.status = JobStatus.TIMED_OUT
            logger.debug(f"Timeout reached waiting for {self.handle.uri}")
            raise JobTimedOut(self.handle.uri, self.handle.timeout) from None

    async def _poll(self) -> bytes:
        while True:
            next_attempt = self._started + (self.attempts + 1) * self.handle.poll_interval
            await asyncio.sleep(max(next_attempt - time.monotonic(), 0))
            self.attempts += 1

            body = await get_json(self.transport, self.handle.uri)
            state = extract_and_decode(body, self.state_field, _as_state) or ""
            self.last_state = state
            logger.debug(
                f"Attempt {self.attempts} on {self.handle.uri}: {self.state_field} is {state!r}"
            )

            if state == STATE_COMPLETED:
                self.status = JobStatus.COMPLETED
                return body
            if state in self.failure_states:
                self.status = JobStatus.FAILED
                raise JobFailed(self.handle.uri, state)


@timed("wait_for_task")
async def wait_for_task(
    transport: Transport,
    location: str,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Wait for a Redfish Task (TaskState) to finish."""
    handle = JobHandle(task_uri(location), poll_interval, timeout)
    return await JobCoordinator(transport, handle).wait()


@timed("wait_for_job")
async def wait_for_job(
    transport: Transport,
    location: str,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Wait for a Redfish Job (JobState) to finish."""
    handle = JobHandle(location, poll_interval, timeout)
    coordinator = JobCoordinator(
        transport, handle,
        state_field=JOB_STATE_FIELD,
        failure_states=JOB_FAILURE_STATES,
    )
    return await coordinator.wait()


@timed("wait_for_dell_job")
async def wait_for_dell_job(
    transport: Transport,
    location: str,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Wait for a Task backed by a Dell job.

    The Task can report Completed while the Dell job behind it failed; the
    ``Oem.Dell`` block of the finished task is checked for that.
    """
    handle = JobHandle(task_uri(location), poll_interval, timeout)
    body = await JobCoordinator(transport, handle).wait()

    oem_job = extract_and_decode(body, "Oem.Dell", DellOemJob.from_dict)
    if oem_job is not None and oem_job.job_state == DELL_JOB_FAILED:
        raise JobFailed(handle.uri, oem_job.job_state, oem_job.message)
    return body


@timed("delete_dell_job")
async def delete_dell_job(transport: Transport, job_id: str) -> None:
    """Delete a scheduled Dell job through the manager's Jobs collection.

    Raises:
        JobDeletionFailed: If the controller does not answer 200
    """
    status = await transport.delete(f"{DELL_JOBS_URI}{job_id}")
    if status != STATUS_OK:
        raise JobDeletionFailed(job_id, status)
    logger.info(f"Deleted job {job_id}")
