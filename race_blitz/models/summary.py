"""Models for the aggregate result of a run."""

import statistics
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True)
class LatencyStats:
    """Request latency distribution in seconds."""

    count: int = 0
    avg: float = 0.0
    min: float = 0.0
    med: float = 0.0
    p90: float = 0.0
    p95: float = 0.0
    max: float = 0.0

    @classmethod
    def from_samples(cls, samples: Sequence[float]) -> "LatencyStats":
        """Compute stats from raw latency samples."""
        if not samples:
            return cls()

        ordered = sorted(samples)
        return cls(
            count=len(ordered),
            avg=statistics.fmean(ordered),
            min=ordered[0],
            med=statistics.median(ordered),
            p90=_percentile(ordered, 90),
            p95=_percentile(ordered, 95),
            max=ordered[-1],
        )


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Counts over every request outcome of a run.

    ``total_requests`` always equals the sum of passed checks, failed checks
    and transport errors.
    """

    total_requests: int = 0
    passed_checks: int = 0
    failed_checks: int = 0
    transport_errors: int = 0
    failure_status_codes: frozenset[int] = field(default_factory=frozenset)
    elapsed: float = 0.0
    latency: LatencyStats = field(default_factory=LatencyStats)

    def __post_init__(self) -> None:
        counted = self.passed_checks + self.failed_checks + self.transport_errors
        if counted != self.total_requests:
            raise ValueError(
                f"Inconsistent summary: total={self.total_requests} but "
                f"passed + failed + transport_errors = {counted}"
            )

    @property
    def requests_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.total_requests / self.elapsed

    @property
    def check_pass_rate(self) -> float:
        """Share of passed checks among all requests, 0.0 for an empty run."""
        if self.total_requests == 0:
            return 0.0
        return self.passed_checks / self.total_requests


def _percentile(ordered: Sequence[float], pct: int) -> float:
    # Nearest-rank on an already sorted sequence
    rank = max(1, -(-len(ordered) * pct // 100))
    return ordered[min(rank, len(ordered)) - 1]
