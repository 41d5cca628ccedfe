"""Run coordinator spawning the workers of a fixed-duration run."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import aiohttp

from race_blitz.aggregator import OutcomeAggregator
from race_blitz.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from race_blitz.models.config import RunConfig
from race_blitz.models.summary import RunSummary
from race_blitz.worker import Worker

log = logging.getLogger(__name__)


class StartupError(Exception):
    """Raised when a run cannot start with the requested concurrency."""


@dataclass(frozen=True, kw_only=True)
class RunCoordinator:
    """Runs ``concurrency`` workers against the target until the deadline."""

    diagnostics: DiagnosticsSink = field(default_factory=LoggingDiagnosticsSink)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _stop_event: asyncio.Event = field(
        default_factory=asyncio.Event, init=False, repr=False
    )

    async def execute(self, config: RunConfig) -> RunSummary:
        """Execute one run and return its summary.

        Args:
            config: Validated run configuration

        Returns:
            Summary of every outcome recorded by every worker

        Raises:
            StartupError: If the requested number of workers could not be spawned

        """
        log.info(
            "Starting run: url=%s method=%s concurrency=%d duration=%.2fs",
            config.target_url,
            config.method,
            config.concurrency,
            config.duration,
        )
        self._stop_event.clear()
        aggregator = OutcomeAggregator()
        timeout = aiohttp.ClientTimeout(total=config.request_timeout)
        # limit=0 keeps the pool from capping the number of in-flight requests
        connector = aiohttp.TCPConnector(limit=0)

        async with aiohttp.ClientSession(
            timeout=timeout, connector=connector
        ) as session:
            started = self.clock()
            deadline = started + config.duration
            tasks: list[asyncio.Task[int]] = []
            try:
                self._spawn_workers(config, session, aggregator, deadline, tasks)
                await asyncio.gather(*tasks)
            finally:
                await _cancel_unfinished(tasks)
            elapsed = self.clock() - started

        summary = aggregator.summarize(elapsed=elapsed)
        log.info(
            "Run completed: total=%d passed=%d failed=%d transport_errors=%d",
            summary.total_requests,
            summary.passed_checks,
            summary.failed_checks,
            summary.transport_errors,
        )
        return summary

    def stop(self) -> None:
        """Ask every worker to stop before starting its next request."""
        log.info("Stop requested, waiting for in-flight requests")
        self._stop_event.set()

    def _spawn_workers(
        self,
        config: RunConfig,
        session: aiohttp.ClientSession,
        aggregator: OutcomeAggregator,
        deadline: float,
        tasks: list[asyncio.Task[int]],
    ) -> None:
        try:
            for index in range(config.concurrency):
                worker = Worker(
                    config=config,
                    session=session,
                    aggregator=aggregator,
                    diagnostics=self.diagnostics,
                    clock=self.clock,
                    stop_event=self._stop_event,
                    name=f"worker-{index}",
                )
                run = worker.run(deadline)
                try:
                    tasks.append(asyncio.create_task(run, name=worker.name))
                except BaseException:
                    run.close()
                    raise
        except (RuntimeError, OSError, MemoryError) as exc:
            raise StartupError(
                f"Could only spawn {len(tasks)} of {config.concurrency} workers, "
                f"cancelled them before any request was sent: {exc}"
            ) from exc

        log.debug("Spawned %d worker(s)", len(tasks))


async def _cancel_unfinished(tasks: list[asyncio.Task[int]]) -> None:
    # Workers must be gone before the session they share is closed
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
