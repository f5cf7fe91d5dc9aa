"""High-level API for benchmark tracking.

This module provides BenchmarkHistory, the main interface for running
benchmarks, recording them and comparing them with past runs.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from wrkbench.benchmarks.period import HistoryPeriod
from wrkbench.benchmarks.selection import best_run
from wrkbench.benchmarks.storage import JSONHistoryStore, StorageProtocol
from wrkbench.core.exceptions import NoHistoryError, WrkBenchError
from wrkbench.core.ingest import ingest
from wrkbench.core.types import BenchmarkConfig, RunResult
from wrkbench.regression.variance import compare

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wrkbench.core.config import Settings
    from wrkbench.core.protocols import ExecutorProtocol
    from wrkbench.regression.models import Variance

logger = logging.getLogger(__name__)


class BenchmarkHistory:
    """Run benchmarks, record them and compare them with history.

    Profiles run one at a time through the executor. The runs of one
    invocation are persisted as a single record, then the previous
    record is loaded as history.

    Attributes:
        executor: Executor running each profile.
        max_error_percentage: Max percentage of errors for a healthy run.
        runs: Runs executed by this instance.
        history: Historical runs loaded from the store.
        benchmark_date: Timestamp of the latest invocation.
        history_enabled: False when the store location is unusable.

    Example:
        >>> history = BenchmarkHistory(WrkExecutor("http://localhost:8080/"))
        >>> history.bench([BenchmarkConfig(duration=5)])
        >>> variance = history.variance(HistoryPeriod.DAY)
    """

    def __init__(
        self,
        executor: ExecutorProtocol,
        store: StorageProtocol | None = None,
        max_error_percentage: float = 2.0,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize with an executor and a storage backend.

        Args:
            executor: Executor running each profile.
            store: Storage backend (default: JSONHistoryStore).
            max_error_percentage: Max percentage of errors for a healthy run.
            log: Logger to report on. Defaults to the module logger.
        """
        self.executor = executor
        self._store: StorageProtocol = store or JSONHistoryStore()
        self.max_error_percentage = max_error_percentage
        self._logger = log or logger
        self.runs: list[RunResult] = []
        self.history: list[RunResult] = []
        self.benchmark_date: datetime | None = None
        self.history_enabled = True

    @classmethod
    def from_settings(cls, executor: ExecutorProtocol, settings: Settings) -> BenchmarkHistory:
        """Build an instance storing history where ``settings`` says."""
        return cls(
            executor,
            store=JSONHistoryStore(settings.history_dir),
            max_error_percentage=settings.max_error_percentage,
        )

    @property
    def store(self) -> StorageProtocol:
        return self._store

    def _execute(self, config: BenchmarkConfig) -> RunResult:
        try:
            return self.executor.execute(config)
        except (WrkBenchError, OSError) as e:
            self._logger.error(f"Benchmark {config.to_key()} failed: {e}")
            return RunResult.fail(str(e))

    def bench(self, configs: Iterable[BenchmarkConfig]) -> list[RunResult]:
        """Run profiles sequentially and record them.

        A failing profile is recorded as a failed run and does not stop
        the others. When the history directory cannot be created the runs
        are kept in memory only.

        Args:
            configs: Profiles to run, in order.

        Returns:
            The runs of this invocation.

        Raises:
            HistoryError: If the runs cannot be persisted or the previous
                record cannot be read.
        """
        self.history_enabled = self._store.ensure_location()
        date = datetime.now(timezone.utc).replace(microsecond=0)
        self.benchmark_date = date

        batch: list[RunResult] = []
        for config in configs:
            run = self._execute(config).with_context(config=config, timestamp=date)
            run = ingest(run, self.max_error_percentage, self._logger)
            self._logger.info(
                f"Current run ({config}): {run.requests_per_sec:.2f} requests/sec, success: {run.success}"
            )
            batch.append(run)
        self.runs.extend(batch)

        if not self.history_enabled:
            self._logger.warning("History tracking is disabled for this run")
            return batch

        self._store.persist(date, batch)
        try:
            self.load(HistoryPeriod.LAST)
        except NoHistoryError as e:
            self._logger.info(f"No previous benchmark to compare with: {e}")
        return batch

    def bench_exponential(self, duration: timedelta | None = None) -> list[RunResult]:
        """Run the exponential grid of profiles (see BenchmarkConfig.exponential)."""
        return self.bench(BenchmarkConfig.exponential(duration))

    def load(self, period: HistoryPeriod, reduce_to_best: bool = False) -> list[RunResult]:
        """Load history for a window.

        LAST replaces the loaded history with the record preceding the
        current invocation. Other periods append the window's runs that
        are not already held (in history or in the current runs).

        Args:
            period: Window to load.
            reduce_to_best: Keep only the best run of each record.

        Returns:
            The history held after loading.

        Raises:
            NoHistoryError: If there is nothing to load.
            HistoryError: If a record cannot be read.
        """
        loaded = self._store.load(
            period,
            reduce_to_best,
            known=[*self.history, *self.runs],
            exclude_timestamp=self.benchmark_date,
        )
        if period is HistoryPeriod.LAST:
            self.history = loaded
        else:
            self.history.extend(loaded)
        return self.history

    def best(self) -> RunResult:
        """Best run of this instance.

        Raises:
            StatsError: If no run succeeded.
        """
        return best_run(self.runs)

    def historical_best(self) -> RunResult:
        """Best run of the loaded history.

        Raises:
            StatsError: If no historical run succeeded.
        """
        return best_run(self.history)

    def variance(self, period: HistoryPeriod = HistoryPeriod.LAST) -> Variance:
        """Compare the best current run with the best run of a window.

        The history is reloaded for ``period``, one best run per record.

        Args:
            period: Window to compare against.

        Returns:
            Variance of the current best against the historical best.

        Raises:
            StatsError: If either side has no successful run.
            HistoryError: If history cannot be loaded.
        """
        new = self.best()
        self.history = []
        self.load(period, reduce_to_best=True)
        return compare(new, self.historical_best())
