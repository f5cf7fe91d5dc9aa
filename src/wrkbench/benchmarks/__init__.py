"""Benchmark tracking module for wrkbench.

This module provides tools for recording, storing, and querying
benchmark runs for historical tracking and regression detection.

Example:
    >>> from wrkbench.benchmarks import BenchmarkHistory, HistoryPeriod
    >>> from wrkbench.adapters import WrkExecutor
    >>>
    >>> history = BenchmarkHistory(WrkExecutor("http://localhost:8080/api"))
    >>> history.bench_exponential()
    >>>
    >>> # Compare the best run with the best run of the last day
    >>> variance = history.variance(HistoryPeriod.DAY)
"""

from __future__ import annotations

from wrkbench.benchmarks.history import BenchmarkHistory
from wrkbench.benchmarks.models import HistoryRecord, filename_for, parse_filename
from wrkbench.benchmarks.period import HistoryPeriod
from wrkbench.benchmarks.selection import best_run
from wrkbench.benchmarks.storage import JSONHistoryStore, StorageProtocol

__all__ = [
    "BenchmarkHistory",
    "HistoryPeriod",
    "HistoryRecord",
    "JSONHistoryStore",
    "StorageProtocol",
    "best_run",
    "filename_for",
    "parse_filename",
]
