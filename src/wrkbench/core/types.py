"""Core type definitions for wrkbench.

This module defines the fundamental data structures used throughout
the library: load profiles and the measured outcome of running them.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

# Numeric metrics of a RunResult, in report order.
METRIC_FIELDS: tuple[str, ...] = (
    "requests_per_sec",
    "requests",
    "errors",
    "successes",
    "avg_latency_ms",
    "min_latency_ms",
    "max_latency_ms",
    "stdev_latency_ms",
    "transfer_mb",
    "errors_connect",
    "errors_read",
    "errors_write",
    "errors_status",
    "errors_timeout",
)

# Metrics where lower is better (increase = regression)
LOWER_IS_BETTER: frozenset[str] = frozenset(
    {
        "errors",
        "avg_latency_ms",
        "min_latency_ms",
        "max_latency_ms",
        "stdev_latency_ms",
        "errors_connect",
        "errors_read",
        "errors_write",
        "errors_status",
        "errors_timeout",
    }
)


class BenchmarkConfig(BaseModel):
    """A single wrk load profile.

    Attributes:
        threads: Number of wrk threads.
        connections: Number of open HTTP connections.
        duration: How long the load is applied.

    Example:
        >>> config = BenchmarkConfig(threads=4, connections=64, duration=10)
        >>> config.to_key()
        '4-64-10'
    """

    model_config = {"frozen": True}

    threads: int = Field(default=8, gt=0, description="Number of wrk threads")
    connections: int = Field(default=32, gt=0, description="Number of open connections")
    duration: timedelta = Field(
        default=timedelta(seconds=30),
        description="Duration of the load",
    )

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: timedelta) -> timedelta:
        if value.total_seconds() <= 0:
            raise ValueError("duration must be positive")
        return value

    @property
    def duration_secs(self) -> int:
        """Duration in whole seconds, as passed to wrk."""
        return int(self.duration.total_seconds())

    def to_key(self) -> str:
        """Compact identifier for this profile."""
        return f"{self.threads}-{self.connections}-{self.duration_secs}"

    def __str__(self) -> str:
        return f"threads: {self.threads} connections: {self.connections} duration: {self.duration_secs} secs"

    @classmethod
    def exponential(cls, duration: timedelta | None = None) -> list[BenchmarkConfig]:
        """Build the exponential grid of threads and connections.

        Args:
            duration: Duration of each profile. Defaults to 30 seconds.

        Returns:
            16 profiles: threads in (2, 4, 8, 16) times connections in
            (32, 64, 128, 256).
        """
        duration = duration or timedelta(seconds=30)
        return [
            cls(threads=threads, connections=connections, duration=duration)
            for threads in (2, 4, 8, 16)
            for connections in (32, 64, 128, 256)
        ]


class RunResult(BaseModel):
    """Outcome of executing one BenchmarkConfig against a target.

    Field names are the persisted history format and must stay stable.
    ``requests_sec`` is accepted on input as an alias of
    ``requests_per_sec``, which is what the wrk ``done()`` hook emits.

    Attributes:
        success: Whether the run is healthy. Set by ingestion, not by wrk.
        error: Error text for failed executions, empty otherwise.
        config: The profile that produced this run.
        timestamp: When the invocation holding this run was recorded.

    Example:
        >>> run = RunResult(requests=1000, successes=1000, requests_per_sec=100.0)
        >>> failed = RunResult.fail("wrk: command not found")
        >>> failed.success, failed.requests
        (False, 0)
    """

    model_config = {"frozen": True}

    success: bool = False
    error: str = ""
    config: BenchmarkConfig | None = None
    timestamp: datetime | None = None

    requests: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    successes: int = Field(default=0, ge=0)
    requests_per_sec: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("requests_per_sec", "requests_sec"),
    )
    avg_latency_ms: float = Field(default=0.0, ge=0)
    min_latency_ms: float = Field(default=0.0, ge=0)
    max_latency_ms: float = Field(default=0.0, ge=0)
    stdev_latency_ms: float = Field(default=0.0, ge=0)
    transfer_mb: int = Field(default=0, ge=0)
    errors_connect: int = Field(default=0, ge=0)
    errors_read: int = Field(default=0, ge=0)
    errors_write: int = Field(default=0, ge=0)
    errors_status: int = Field(default=0, ge=0)
    errors_timeout: int = Field(default=0, ge=0)

    @classmethod
    def fail(cls, error: str) -> RunResult:
        """Create a failed run carrying only an error message."""
        return cls(error=error or "unknown error")

    def metrics(self) -> dict[str, float]:
        """Numeric metrics keyed by field name, in report order."""
        return {name: getattr(self, name) for name in METRIC_FIELDS}

    def with_context(self, **update: Any) -> RunResult:
        """Return a copy with post-hoc fields (config, timestamp, success) set."""
        return self.model_copy(update=update)
