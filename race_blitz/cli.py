"""CLI entry point for the race-blitz load generator."""

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
from typing import Any

from pydantic import ValidationError

from race_blitz.coordinator import RunCoordinator, StartupError
from race_blitz.models.config import RunConfig
from race_blitz.models.summary import RunSummary

DEFAULT_TARGET_URL = "http://127.0.0.1:9090/buy"

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "transport_errors": "!",
}


def log_run_summary(log: logging.Logger, summary: RunSummary) -> None:
    """Log a formatted summary of the run."""
    log.info("=" * 80)
    log.info("Run Summary:")
    log.info("=" * 80)
    log.info(
        "checks: %.2f%% %s %d %s %d",
        summary.check_pass_rate * 100,
        STATUS_SYMBOLS["passed"],
        summary.passed_checks,
        STATUS_SYMBOLS["failed"],
        summary.failed_checks,
    )
    log.info(
        "%s transport errors: %d",
        STATUS_SYMBOLS["transport_errors"],
        summary.transport_errors,
    )
    log.info(
        "requests: %d (%.2f/s over %.2fs)",
        summary.total_requests,
        summary.requests_per_second,
        summary.elapsed,
    )
    latency = summary.latency
    log.info(
        "latency: avg=%.2fms min=%.2fms med=%.2fms max=%.2fms "
        "p(90)=%.2fms p(95)=%.2fms",
        latency.avg * 1000,
        latency.min * 1000,
        latency.med * 1000,
        latency.max * 1000,
        latency.p90 * 1000,
        latency.p95 * 1000,
    )
    if summary.failure_status_codes:
        codes = ", ".join(str(code) for code in sorted(summary.failure_status_codes))
        log.info("  Failing status codes: %s", codes)


def format_output(summary: RunSummary) -> dict[str, Any]:
    """Format the run summary for JSON output."""
    latency = summary.latency
    return {
        "total": summary.total_requests,
        "passed": summary.passed_checks,
        "failed": summary.failed_checks,
        "transport_errors": summary.transport_errors,
        "failure_status_codes": sorted(summary.failure_status_codes),
        "elapsed": summary.elapsed,
        "requests_per_second": summary.requests_per_second,
        "check_pass_rate": summary.check_pass_rate,
        "latency": {
            "count": latency.count,
            "avg": latency.avg,
            "min": latency.min,
            "med": latency.med,
            "p90": latency.p90,
            "p95": latency.p95,
            "max": latency.max,
        },
    }


async def run(
    config: RunConfig,
    json_output: bool = False,
    coordinator: RunCoordinator | None = None,
) -> int:
    """Run the load generator and return exit code."""
    log = logging.getLogger("race_blitz")
    coordinator = coordinator or RunCoordinator()

    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, coordinator.stop)

    try:
        summary = await coordinator.execute(config)
    except StartupError as exc:
        log.error("Run failed to start: %s", exc)
        return 1
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)

    log_run_summary(log, summary)

    if json_output:
        print(json.dumps(format_output(summary), indent=2))

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="race-blitz",
        description="Hammer one HTTP endpoint with concurrent requests for a set time",
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_TARGET_URL,
        help=f"Target endpoint (default: {DEFAULT_TARGET_URL})",
    )
    parser.add_argument(
        "--method",
        default="POST",
        help="HTTP method of every request (default: POST)",
    )
    parser.add_argument(
        "--vus",
        type=int,
        default=10,
        help="Number of concurrent virtual users (default: 10)",
    )
    parser.add_argument(
        "--duration",
        default="5s",
        help="Run duration, e.g. 5s, 500ms, 1m30s (default: 5s)",
    )
    parser.add_argument(
        "--timeout",
        default="60s",
        help="Per-request timeout (default: 60s)",
    )
    parser.add_argument(
        "--expected-status",
        type=int,
        default=200,
        help="Status code a response needs to pass the check (default: 200)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary to stdout",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser


def parse_config(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> RunConfig:
    """Build a RunConfig from parsed arguments, exiting with usage on bad values."""
    try:
        return RunConfig(
            target_url=args.url,
            method=args.method,
            concurrency=args.vus,
            duration=args.duration,
            request_timeout=args.timeout,
            expected_status=args.expected_status,
        )
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        parser.error(f"invalid configuration: {errors}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = parse_config(parser, args)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(run(config, json_output=args.json))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
