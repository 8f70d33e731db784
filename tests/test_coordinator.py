"""Tests for the asynchronous job coordinator."""
import asyncio
import time

import pytest

from conftest import FakeTransport
from oob_config.exceptions import (
    JobDeletionFailed,
    JobFailed,
    JobTimedOut,
    TransportError,
)
from oob_config.jobs import (
    JobCoordinator,
    JobHandle,
    JobStatus,
    delete_dell_job,
    task_uri,
    wait_for_dell_job,
    wait_for_job,
    wait_for_task,
)

TASK = "/redfish/v1/TaskService/Tasks/JID_123"


def task(state, **extra):
    return {"Id": "JID_123", "TaskState": state, **extra}


class TestJobCoordinator:
    """Tests for the polling state machine."""

    @pytest.mark.asyncio
    async def test_completes_on_third_poll(self):
        """Success after exactly three attempts."""
        transport = FakeTransport({TASK: [task("Running"), task("Running"), task("Completed")]})
        coordinator = JobCoordinator(transport, JobHandle(TASK, poll_interval=0.01, timeout=1))

        body = await coordinator.wait()

        assert coordinator.attempts == 3
        assert coordinator.status is JobStatus.COMPLETED
        assert transport.count("GET", TASK) == 3
        assert b"Completed" in body

    @pytest.mark.asyncio
    async def test_times_out(self):
        """A job that never finishes times out after the deadline."""
        transport = FakeTransport({TASK: task("Running")})
        coordinator = JobCoordinator(transport, JobHandle(TASK, poll_interval=0.05, timeout=0.1))

        with pytest.raises(JobTimedOut) as exc_info:
            await coordinator.wait()

        assert coordinator.status is JobStatus.TIMED_OUT
        assert exc_info.value.uri == TASK
        assert coordinator.attempts <= 2

    @pytest.mark.asyncio
    async def test_killed_on_first_poll(self):
        transport = FakeTransport({TASK: task("Killed")})
        coordinator = JobCoordinator(transport, JobHandle(TASK, poll_interval=0.01, timeout=1))

        with pytest.raises(JobFailed) as exc_info:
            await coordinator.wait()

        assert exc_info.value.state == "Killed"
        assert "Killed" in str(exc_info.value)
        assert coordinator.attempts == 1
        assert coordinator.status is JobStatus.FAILED

    @pytest.mark.asyncio
    async def test_exception_state(self):
        transport = FakeTransport({TASK: [task("Running"), task("Exception")]})
        with pytest.raises(JobFailed) as exc_info:
            await JobCoordinator(transport, JobHandle(TASK, 0.01, 1)).wait()
        assert exc_info.value.state == "Exception"

    @pytest.mark.asyncio
    async def test_transport_error_aborts(self):
        """A network failure ends the wait immediately, without retry."""
        transport = FakeTransport({TASK: [task("Running"), TransportError("connection reset")]})
        coordinator = JobCoordinator(transport, JobHandle(TASK, 0.01, 1))

        with pytest.raises(TransportError):
            await coordinator.wait()
        assert coordinator.attempts == 2
        assert coordinator.status is JobStatus.RUNNING

    @pytest.mark.asyncio
    async def test_error_status_aborts(self):
        """A non-200 answer is a transport failure, not a job state."""
        transport = FakeTransport({TASK: (b'{"error": {}}', 503)})
        with pytest.raises(TransportError) as exc_info:
            await JobCoordinator(transport, JobHandle(TASK, 0.01, 1)).wait()
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_state_keeps_waiting(self):
        transport = FakeTransport({TASK: [{"Id": "JID_123"}, task("Completed")]})
        coordinator = JobCoordinator(transport, JobHandle(TASK, 0.01, 1))
        await coordinator.wait()
        assert coordinator.attempts == 2

    @pytest.mark.asyncio
    async def test_deadline_counts_from_creation(self):
        transport = FakeTransport({TASK: task("Running")})
        coordinator = JobCoordinator(transport, JobHandle(TASK, poll_interval=0.01, timeout=0.05))
        await asyncio.sleep(0.06)

        start = time.monotonic()
        with pytest.raises(JobTimedOut):
            await coordinator.wait()
        assert time.monotonic() - start < 0.05

    @pytest.mark.asyncio
    async def test_independent_waits(self):
        """Waits on different jobs run concurrently."""
        other = "/redfish/v1/TaskService/Tasks/JID_456"
        transport = FakeTransport({
            TASK: [task("Running")] * 4 + [task("Completed")],
            other: task("Completed"),
        })
        slow = JobCoordinator(transport, JobHandle(TASK, 0.02, 1))
        fast = JobCoordinator(transport, JobHandle(other, 0.02, 1))

        await asyncio.gather(slow.wait(), fast.wait())

        assert fast.attempts == 1
        assert slow.attempts == 5


class TestWaitHelpers:
    """Tests for the task/job wait functions."""

    def test_task_uri_rewrites_task_monitor(self):
        assert task_uri("/redfish/v1/TaskService/TaskMonitors/JID_1") == \
            "/redfish/v1/TaskService/Tasks/JID_1"
        assert task_uri(TASK) == TASK

    @pytest.mark.asyncio
    async def test_wait_for_task_follows_task_monitor(self):
        transport = FakeTransport({TASK: task("Completed")})
        await wait_for_task(
            transport, "/redfish/v1/TaskService/TaskMonitors/JID_123",
            poll_interval=0.01, timeout=1,
        )
        assert transport.count("GET", TASK) == 1

    @pytest.mark.asyncio
    async def test_wait_for_job_uses_job_state(self):
        job = "/redfish/v1/Managers/iDRAC.Embedded.1/Jobs/JID_9"
        transport = FakeTransport({job: [{"JobState": "Running"}, {"JobState": "Completed"}]})
        await wait_for_job(transport, job, poll_interval=0.01, timeout=1)
        assert transport.count("GET", job) == 2

    @pytest.mark.asyncio
    async def test_wait_for_job_killed_is_not_terminal(self):
        """Jobs only fail on Exception; Killed is a Task state."""
        job = "/redfish/v1/Managers/iDRAC.Embedded.1/Jobs/JID_9"
        transport = FakeTransport({job: {"JobState": "Killed"}})
        with pytest.raises(JobTimedOut):
            await wait_for_job(transport, job, poll_interval=0.01, timeout=0.05)

    @pytest.mark.asyncio
    async def test_dell_job_failure_inside_completed_task(self):
        transport = FakeTransport({
            TASK: task("Completed", Oem={"Dell": {"JobState": "Failed", "Message": "Invalid share"}}),
        })
        with pytest.raises(JobFailed) as exc_info:
            await wait_for_dell_job(transport, TASK, poll_interval=0.01, timeout=1)
        assert exc_info.value.state == "Failed"
        assert exc_info.value.message == "Invalid share"
        assert "Invalid share" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_dell_job_success(self):
        transport = FakeTransport({
            TASK: task("Completed", Oem={"Dell": {"JobState": "Completed", "Message": "Done"}}),
        })
        body = await wait_for_dell_job(transport, TASK, poll_interval=0.01, timeout=1)
        assert b"Done" in body

    @pytest.mark.asyncio
    async def test_dell_job_without_oem(self):
        transport = FakeTransport({TASK: task("Completed")})
        await wait_for_dell_job(transport, TASK, poll_interval=0.01, timeout=1)


class TestDeleteDellJob:
    """Tests for job deletion."""

    @pytest.mark.asyncio
    async def test_success(self, fake_transport):
        await delete_dell_job(fake_transport, "JID_123")
        assert fake_transport.calls == [
            ("DELETE", "/redfish/v1/Managers/iDRAC.Embedded.1/Jobs/JID_123")
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [204, 400, 404, 500])
    async def test_non_200_fails(self, fake_transport, status):
        fake_transport.delete_status = status
        with pytest.raises(JobDeletionFailed) as exc_info:
            await delete_dell_job(fake_transport, "JID_123")
        assert exc_info.value.status_code == status
        assert str(status) in str(exc_info.value)
