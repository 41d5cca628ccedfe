"""Models for per-request outcomes."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class RequestOutcome:
    """Result of a single request attempt made by a worker.

    A transport error has no status code and carries the failure description
    in ``error``; otherwise the response status and body are recorded.
    """

    status_code: int | None
    body: str = ""
    check_passed: bool
    error: str | None = None
    latency: float = 0.0

    @property
    def is_transport_error(self) -> bool:
        """Whether the request never received a response."""
        return self.status_code is None

    def describe(self) -> str:
        """Short status description used in diagnostics."""
        if self.is_transport_error:
            return self.error or "transport error"
        return str(self.status_code)
