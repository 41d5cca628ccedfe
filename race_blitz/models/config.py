"""Run configuration for a single load generation run."""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, field_validator
from yarl import URL

from race_blitz.models.base import Model

HTTP_METHODS = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"}
)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Any) -> Any:
    """Convert a duration string such as '5s', '500ms' or '1m30s' to seconds.

    Numbers and numeric strings are read as seconds. Non-string values are
    returned untouched for pydantic to validate.
    """
    if not isinstance(value, str):
        return value

    text = value.strip().lower()
    try:
        return float(text)
    except ValueError:
        pass

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if not text or position != len(text):
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. '5s', '1m30s')")
    return total


Seconds = Annotated[
    float, Field(gt=0, allow_inf_nan=False), BeforeValidator(parse_duration)
]


class RunConfig(Model):
    """Immutable configuration for one run, shared read-only by all workers."""

    target_url: str = Field(..., description="Absolute http(s) URL to hammer")
    method: str = Field(default="POST", description="HTTP method of every request")
    concurrency: int = Field(default=10, gt=0, description="Number of workers")
    duration: Seconds = Field(default=5.0, description="Run length in seconds")
    request_timeout: Seconds = Field(
        default=60.0, description="Total timeout of a single request in seconds"
    )
    expected_status: int = Field(
        default=200, ge=100, le=599, description="Status code the check expects"
    )

    @field_validator("target_url")
    @classmethod
    def _validate_target_url(cls, value: str) -> str:
        url = URL(value.strip())
        if url.scheme not in {"http", "https"} or not url.host:
            raise ValueError(f"Target URL must be an absolute http(s) URL: {value!r}")
        return str(url)

    @field_validator("method")
    @classmethod
    def _validate_method(cls, value: str) -> str:
        method = value.strip().upper()
        if method not in HTTP_METHODS:
            raise ValueError(
                f"Unsupported HTTP method {value!r}. Use one of: {sorted(HTTP_METHODS)}"
            )
        return method
