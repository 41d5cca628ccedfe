"""Diagnostics reported for requests that did not pass the check."""

import logging
from dataclasses import dataclass
from typing import Protocol

from race_blitz.models.result import RequestOutcome

log = logging.getLogger(__name__)

DEFAULT_BODY_LIMIT = 512


class DiagnosticsSink(Protocol):
    """Receives every outcome whose check failed, transport errors included."""

    def report_failure(self, outcome: RequestOutcome) -> None:
        """Report a failed request."""


@dataclass(frozen=True, kw_only=True)
class LoggingDiagnosticsSink:
    """Logs failed requests as warnings with their status and body."""

    logger: logging.Logger = log
    body_limit: int = DEFAULT_BODY_LIMIT

    def report_failure(self, outcome: RequestOutcome) -> None:
        body = outcome.body
        if len(body) > self.body_limit:
            body = f"{body[: self.body_limit]}... ({len(outcome.body)} chars)"
        self.logger.warning("Error: %s %s", outcome.describe(), body)
