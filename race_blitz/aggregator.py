"""Thread-safe accumulation point for request outcomes."""

import threading

from race_blitz.models.result import RequestOutcome
from race_blitz.models.summary import LatencyStats, RunSummary


class OutcomeAggregator:
    """Collects outcomes emitted concurrently by all workers of a run.

    Every outcome increments exactly one of the passed, failed or transport
    error counters under a single lock, so readers always observe a
    consistent total.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._passed = 0
        self._failed = 0
        self._transport_errors = 0
        self._failure_status_codes: set[int] = set()
        self._latencies: list[float] = []

    def record(self, outcome: RequestOutcome) -> None:
        """Count one outcome."""
        with self._lock:
            self._total += 1
            self._latencies.append(outcome.latency)
            if outcome.status_code is None:
                self._transport_errors += 1
            elif outcome.check_passed:
                self._passed += 1
            else:
                self._failed += 1
                self._failure_status_codes.add(outcome.status_code)

    @property
    def total_requests(self) -> int:
        with self._lock:
            return self._total

    def summarize(self, elapsed: float = 0.0) -> RunSummary:
        """Snapshot the counters into a RunSummary."""
        with self._lock:
            return RunSummary(
                total_requests=self._total,
                passed_checks=self._passed,
                failed_checks=self._failed,
                transport_errors=self._transport_errors,
                failure_status_codes=frozenset(self._failure_status_codes),
                elapsed=elapsed,
                latency=LatencyStats.from_samples(self._latencies),
            )
