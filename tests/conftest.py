"""Shared fixtures for wrkbench tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from wrkbench.core.types import BenchmarkConfig, RunResult

T0 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


def make_run(requests_per_sec: float = 1000.0, success: bool = True, **fields: Any) -> RunResult:
    """Helper to create a run with sensible defaults."""
    values: dict[str, Any] = {
        "requests": 30000,
        "successes": 30000,
        "avg_latency_ms": 10.0,
        "min_latency_ms": 1.0,
        "max_latency_ms": 50.0,
        "stdev_latency_ms": 5.0,
        "transfer_mb": 12,
    }
    values.update(fields)
    return RunResult(requests_per_sec=requests_per_sec, success=success, **values)


class FakeExecutor:
    """Executor returning canned runs, in order, without running wrk."""

    def __init__(self, runs: list[RunResult] | None = None, error: Exception | None = None) -> None:
        self.runs = list(runs or [])
        self.error = error
        self.calls: list[BenchmarkConfig] = []

    def execute(self, config: BenchmarkConfig) -> RunResult:
        self.calls.append(config)
        if self.error is not None:
            raise self.error
        return self.runs.pop(0)


@pytest.fixture
def healthy_run() -> RunResult:
    """A successful run at 1000 requests/sec."""
    return make_run()
