import asyncio

import pytest

from assistantchat.exceptions import (
    RunCancelledError,
    RunExpiredError,
    RunFailedError,
    RunNotCompletedError,
    RunTimeoutError,
)
from assistantchat.polling import RunPoller, raise_for_status
from assistantchat.threads import CreateRunOptions, LastError, Run

from conftest import make_client


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


async def _start_run(client):
    thread = await client.create_thread()
    run = await client.create_run(thread.id, CreateRunOptions(assistant_id="a1"))
    return thread, run


def test_wait_polls_on_fixed_interval_until_terminal(service):
    service.run_script = ["queued", "in_progress", "in_progress", "completed"]
    clock = FakeClock()
    seen = []

    async def scenario():
        async with make_client(service) as client:
            thread, run = await _start_run(client)
            poller = RunPoller(
                client,
                thread.id,
                run.id,
                sleep=clock.sleep,
                clock=clock,
                on_status=lambda r: seen.append(r.status),
            )
            return poller, await poller.wait()

    poller, run = asyncio.run(scenario())

    assert run.status == "completed"
    assert seen == ["queued", "in_progress", "in_progress", "completed"]
    assert clock.sleeps == [1.0, 1.0, 1.0]
    assert poller.attempts == 4
    assert poller.elapsed == 3.0
    assert poller.done


def test_step_fetches_once(service):
    service.run_script = ["in_progress", "completed"]

    async def scenario():
        async with make_client(service) as client:
            thread, run = await _start_run(client)
            poller = RunPoller(client, thread.id, run.id)
            first = await poller.step()
            return poller, first

    poller, first = asyncio.run(scenario())

    assert first.status == "in_progress"
    assert not poller.done
    assert service.count("GET", f"/runs/{first.id}") == 1


def test_max_attempts_gives_up(service):
    service.run_script = ["in_progress"] * 10
    clock = FakeClock()

    async def scenario():
        async with make_client(service) as client:
            thread, run = await _start_run(client)
            poller = RunPoller(
                client, thread.id, run.id, max_attempts=3, sleep=clock.sleep, clock=clock
            )
            await poller.wait()

    with pytest.raises(RunTimeoutError):
        asyncio.run(scenario())
    assert len(clock.sleeps) == 2


@pytest.mark.parametrize(
    "status, error",
    [
        ("failed", RunFailedError),
        ("cancelled", RunCancelledError),
        ("expired", RunExpiredError),
    ],
)
def test_raise_for_status_distinguishes_terminal_statuses(status, error):
    run = Run(
        id="run_1",
        thread_id="thread_1",
        status=status,
        last_error=LastError(message="rate limited") if status == "failed" else None,
    )
    with pytest.raises(error) as excinfo:
        raise_for_status(run)
    assert excinfo.value.run is run


def test_raise_for_status_passes_completed_runs():
    run = Run(id="run_1", thread_id="thread_1", status="completed")
    assert raise_for_status(run) is run


def test_failed_message_includes_last_error():
    run = Run(
        id="run_1",
        thread_id="thread_1",
        status="failed",
        last_error=LastError(code="rate_limit_exceeded", message="rate limited"),
    )
    assert str(RunFailedError(run)) == "Run failed: rate limited"


def test_raise_for_status_reports_unknown_statuses():
    run = Run(id="run_1", thread_id="thread_1", status="incomplete")

    with pytest.raises(RunNotCompletedError) as excinfo:
        raise_for_status(run)
    assert str(excinfo.value) == "Run did not complete successfully. Status: incomplete"
