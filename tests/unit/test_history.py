"""Tests for the BenchmarkHistory driver."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
import time_machine
from conftest import T0, FakeExecutor, make_run

from wrkbench.benchmarks.history import BenchmarkHistory
from wrkbench.benchmarks.period import HistoryPeriod
from wrkbench.benchmarks.storage import JSONHistoryStore
from wrkbench.core.config import Settings
from wrkbench.core.exceptions import ExecutionError, NoHistoryError, StatsError
from wrkbench.core.types import BenchmarkConfig

if TYPE_CHECKING:
    from datetime import datetime
    from pathlib import Path

T1 = T0 + timedelta(minutes=1)
CONFIG = BenchmarkConfig(threads=2, connections=32, duration=5)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def history_dir(tmp_path: Path) -> Path:
    """Directory holding the history records."""
    return tmp_path / ".wrk-api-bench"


def run_at(history_dir: Path, when: datetime, *requests_per_sec: float) -> BenchmarkHistory:
    """Run one invocation at ``when`` with one profile per throughput."""
    executor = FakeExecutor([make_run(rps) for rps in requests_per_sec])
    history = BenchmarkHistory(executor, store=JSONHistoryStore(history_dir))
    with time_machine.travel(when, tick=False):
        history.bench([CONFIG] * len(requests_per_sec))
    return history


# ============================================================================
# Benchmark Tests
# ============================================================================


class TestBench:
    """Tests for running and recording benchmarks."""

    def test_first_run_has_no_history(self, history_dir: Path) -> None:
        """The first invocation is persisted and finds nothing to compare."""
        history = run_at(history_dir, T0, 1000.0)

        assert history.history == []
        assert len(history.runs) == 1
        assert (history_dir / "result.2024-01-15-10:00:00-+0000.json").exists()

    def test_runs_carry_context(self, history_dir: Path) -> None:
        """Runs are stamped with their profile, timestamp and health."""
        history = run_at(history_dir, T0, 1000.0)

        run = history.runs[0]
        assert run.config == CONFIG
        assert run.timestamp == T0
        assert run.success is True
        assert history.benchmark_date == T0

    def test_timestamp_truncated_to_seconds(self, history_dir: Path) -> None:
        """Invocation timestamps have no sub-second part."""
        history = run_at(history_dir, T0 + timedelta(microseconds=500), 1000.0)

        assert history.benchmark_date == T0

    def test_second_run_loads_previous_record(self, history_dir: Path) -> None:
        """A new invocation loads the previous record as history."""
        run_at(history_dir, T0, 1000.0, 900.0)
        history = run_at(history_dir, T1, 1200.0)

        assert [r.requests_per_sec for r in history.history] == [1000.0, 900.0]

    def test_unhealthy_runs_are_recorded_as_failed(self, history_dir: Path) -> None:
        """Runs over the error threshold are kept but not successful."""
        executor = FakeExecutor([make_run(1000.0, requests=100, errors=5, successes=95)])
        history = BenchmarkHistory(executor, store=JSONHistoryStore(history_dir))

        with time_machine.travel(T0, tick=False):
            runs = history.bench([CONFIG])

        assert runs[0].success is False

    def test_executor_errors_become_failed_runs(self, history_dir: Path) -> None:
        """An executor exception fails that profile only."""
        executor = FakeExecutor(error=ExecutionError("wrk exited with status 1"))
        history = BenchmarkHistory(executor, store=JSONHistoryStore(history_dir))

        with time_machine.travel(T0, tick=False):
            runs = history.bench([CONFIG, CONFIG])

        assert len(runs) == 2
        assert all(not run.success for run in runs)
        assert runs[0].error == "wrk exited with status 1"
        with pytest.raises(StatsError):
            history.best()

    def test_history_disabled_when_location_unusable(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Runs are kept in memory when the directory cannot be created."""
        blocker = tmp_path / "file"
        blocker.write_text("")
        history = BenchmarkHistory(FakeExecutor([make_run()]), store=JSONHistoryStore(blocker / "history"))

        with caplog.at_level(logging.WARNING), time_machine.travel(T0, tick=False):
            runs = history.bench([CONFIG])

        assert history.history_enabled is False
        assert len(runs) == 1
        assert "History tracking is disabled" in caplog.text

    def test_bench_exponential(self, history_dir: Path) -> None:
        """The exponential grid runs all 16 profiles."""
        executor = FakeExecutor([make_run(float(i)) for i in range(16)])
        history = BenchmarkHistory(executor, store=JSONHistoryStore(history_dir))

        with time_machine.travel(T0, tick=False):
            history.bench_exponential(timedelta(seconds=5))

        assert len(executor.calls) == 16
        assert history.best().config == BenchmarkConfig(threads=16, connections=256, duration=5)

    def test_from_settings(self, history_dir: Path) -> None:
        """Settings choose the directory and the error threshold."""
        settings = Settings(history_dir=history_dir, max_error_percentage=10)

        history = BenchmarkHistory.from_settings(FakeExecutor(), settings)

        assert history.store.path == history_dir  # type: ignore[attr-defined]
        assert history.max_error_percentage == 10


# ============================================================================
# Variance Tests
# ============================================================================


class TestVariance:
    """Tests for comparing with history."""

    def test_variance_against_day(self, history_dir: Path) -> None:
        """The best current run is compared with the best of the day."""
        run_at(history_dir, T0, 1000.0, 800.0)
        history = run_at(history_dir, T1, 1200.0, 1100.0)

        with time_machine.travel(T1, tick=False):
            variance = history.variance(HistoryPeriod.DAY)

        assert variance.new.requests_per_sec == 1200.0
        assert variance.old.requests_per_sec == 1000.0
        assert variance.delta["requests_per_sec"] == pytest.approx(20.0)
        assert variance.timestamp == T1

    def test_variance_against_last(self, history_dir: Path) -> None:
        """LAST compares with the previous record only."""
        run_at(history_dir, T0 - timedelta(minutes=5), 5000.0)
        run_at(history_dir, T0, 1000.0)
        history = run_at(history_dir, T1, 1200.0)

        variance = history.variance()

        assert variance.old.requests_per_sec == 1000.0

    def test_identical_runs(self, history_dir: Path) -> None:
        """Identical runs have no variance."""
        run_at(history_dir, T0, 1000.0)
        history = run_at(history_dir, T1, 1000.0)

        variance = history.variance()

        assert all(delta == 0 for delta in variance.delta.values())

    def test_variance_without_history(self, history_dir: Path) -> None:
        """Nothing to compare with raises NoHistoryError."""
        history = run_at(history_dir, T0, 1000.0)

        with pytest.raises(NoHistoryError):
            history.variance()

    def test_variance_with_failed_history(self, history_dir: Path) -> None:
        """A history without successful runs raises StatsError."""
        run_at(history_dir, T0, 0.0)
        executor = FakeExecutor([make_run(1000.0)])
        history = BenchmarkHistory(executor, store=JSONHistoryStore(history_dir))
        with time_machine.travel(T1, tick=False):
            history.bench([CONFIG])
        (history_dir / "result.2024-01-15-10:00:00-+0000.json").write_text('[{"requests": 0}]')

        with pytest.raises(StatsError):
            history.variance()

    def test_repeated_loads_do_not_duplicate(self, history_dir: Path) -> None:
        """Loading a window twice keeps one copy of each run."""
        run_at(history_dir, T0, 1000.0)
        history = run_at(history_dir, T1, 1200.0)
        history.history = []

        with time_machine.travel(T1, tick=False):
            history.load(HistoryPeriod.DAY)
            history.load(HistoryPeriod.DAY)

        assert [r.requests_per_sec for r in history.history] == [1000.0]
