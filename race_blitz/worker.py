"""Virtual user that repeatedly hits the target endpoint."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import aiohttp

from race_blitz.aggregator import OutcomeAggregator
from race_blitz.diagnostics import DiagnosticsSink
from race_blitz.models.config import RunConfig
from race_blitz.models.result import RequestOutcome

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Worker:
    """One concurrent client issuing requests until the run deadline."""

    config: RunConfig
    session: aiohttp.ClientSession = field(repr=False)
    aggregator: OutcomeAggregator = field(repr=False)
    diagnostics: DiagnosticsSink = field(repr=False)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    stop_event: asyncio.Event | None = field(default=None, repr=False)
    name: str = "worker"

    async def run(self, deadline: float) -> int:
        """Send requests back to back until the deadline passes.

        The deadline is only checked before starting a request, an in-flight
        request always completes.

        Args:
            deadline: Absolute time on ``clock`` after which no new request starts

        Returns:
            Number of requests this worker issued

        """
        sent = 0
        while self.clock() <= deadline:
            if self.stop_event is not None and self.stop_event.is_set():
                log.debug("%s stopped early after %d request(s)", self.name, sent)
                break

            outcome = await self.send_once()
            self.aggregator.record(outcome)
            sent += 1
            if not outcome.check_passed:
                self._report(outcome)

        log.debug("%s finished after %d request(s)", self.name, sent)
        return sent

    def _report(self, outcome: RequestOutcome) -> None:
        try:
            self.diagnostics.report_failure(outcome)
        except Exception:
            log.exception("%s: diagnostics sink failed", self.name)

    async def send_once(self) -> RequestOutcome:
        """Issue one request and capture its outcome, never raising for I/O errors."""
        started = time.perf_counter()
        try:
            async with self.session.request(
                self.config.method, self.config.target_url
            ) as response:
                body = await response.text(errors="replace")
                status = response.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            return RequestOutcome(
                status_code=None,
                check_passed=False,
                error=_describe_error(exc),
                latency=time.perf_counter() - started,
            )

        return RequestOutcome(
            status_code=status,
            body=body,
            check_passed=status == self.config.expected_status,
            latency=time.perf_counter() - started,
        )


def _describe_error(exc: BaseException) -> str:
    message = str(exc)
    if not message:
        return type(exc).__name__
    return f"{type(exc).__name__}: {message}"
