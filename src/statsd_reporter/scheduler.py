"""Periodic runner driving a StatsD reporter from an asyncio event loop."""

import asyncio
import contextlib
import logging

from statsd_reporter.adapters.logging import get_logger
from statsd_reporter.reporter import StatsdReporter


class PeriodicReporter:
    """Runs ``reporter.run_cycle()`` every ``period`` seconds.

    Each cycle runs in a worker thread so a slow socket never blocks the
    event loop. The next cycle starts only after the previous one finished.

    Args:
        reporter: Reporter to drive.
        period: Seconds to wait between cycles.
        report_on_stop: Run one last cycle when stopped.
    """

    def __init__(
        self,
        reporter: StatsdReporter,
        period: float,
        report_on_stop: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        self._reporter = reporter
        self._period = period
        self._report_on_stop = report_on_stop
        self._logger = logger or get_logger(__name__)
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self.cycles = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self) -> None:
        """Report every ``period`` seconds until ``stop()`` is called.

        A cycle in progress always runs to completion; the stop signal is
        only observed between cycles.
        """
        while not self._stopping.is_set():
            await asyncio.to_thread(self._reporter.run_cycle)
            self.cycles += 1
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stopping.wait(), self._period)

    def start(self) -> "asyncio.Task[None]":
        """Start reporting in a background task on the running loop.

        Raises:
            RuntimeError: If already started.
        """
        if self.running:
            raise RuntimeError("periodic reporter already running")
        self._stopping.clear()
        self._task = asyncio.create_task(self.run(), name="statsd-reporter")
        self._logger.debug("Started statsd reporting every %ss", self._period)
        return self._task

    async def stop(self) -> None:
        """Stop the background task once its current cycle has finished.

        With ``report_on_stop`` a final cycle runs after that, so cycles of
        the same reporter never overlap.
        """
        task, self._task = self._task, None
        if task is not None:
            self._stopping.set()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._report_on_stop:
            await asyncio.to_thread(self._reporter.run_cycle)
            self.cycles += 1
        self._logger.debug("Stopped statsd reporting after %d cycles", self.cycles)
