"""Run status polling."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Optional

from .exceptions import (
    RunCancelledError,
    RunExpiredError,
    RunFailedError,
    RunNotCompletedError,
    RunTimeoutError,
)
from .threads import Run, RunStatus
from .types import ClockFunc, RunStatusCallback, SleepFunc

if TYPE_CHECKING:
    from .async_client import AsyncAssistantsClient

DEFAULT_POLL_INTERVAL = 1.0

logger = logging.getLogger(__name__)


class RunPoller:
    """Polls a single run until it reaches a terminal status.

    ``step`` fetches the run once; ``wait`` alternates ``step`` and ``sleep``
    on a fixed interval. There is no attempt cap unless ``max_attempts`` is
    given, so a run the service never finishes keeps the caller waiting.
    """

    def __init__(
        self,
        client: "AsyncAssistantsClient",
        thread_id: str,
        run_id: str,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: Optional[int] = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: ClockFunc = time.monotonic,
        on_status: Optional[RunStatusCallback] = None,
    ) -> None:
        self._client = client
        self._thread_id = thread_id
        self._run_id = run_id
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock
        self._on_status = on_status
        self._started_at = clock()
        self.attempts = 0
        self.run: Optional[Run] = None

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started_at

    @property
    def done(self) -> bool:
        return self.run is not None and self.run.is_terminal

    async def step(self) -> Run:
        run = await self._client.get_run(self._thread_id, self._run_id)
        self.attempts += 1
        self.run = run
        logger.debug("run %s status %s (attempt %d)", run.id, run.status, self.attempts)
        if self._on_status:
            self._on_status(run)
        return run

    async def wait(self) -> Run:
        run = await self.step()
        while not run.is_terminal:
            if self._max_attempts is not None and self.attempts >= self._max_attempts:
                raise RunTimeoutError(
                    f"Run {self._run_id} did not finish after {self.attempts} checks"
                )
            await self._sleep(self._poll_interval)
            run = await self.step()
        logger.info("run %s finished with %s after %.1fs", run.id, run.status, self.elapsed)
        return run


def raise_for_status(run: Run) -> Run:
    """Return ``run`` if it completed, otherwise raise the matching error."""
    if run.status == RunStatus.COMPLETED:
        return run
    if run.status == RunStatus.FAILED:
        raise RunFailedError(run)
    if run.status == RunStatus.CANCELLED:
        raise RunCancelledError(run)
    if run.status == RunStatus.EXPIRED:
        raise RunExpiredError(run)
    raise RunNotCompletedError(run)
