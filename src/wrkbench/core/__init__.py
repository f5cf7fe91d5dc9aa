"""Core module for wrkbench.

This module contains the fundamental types, protocols, configuration
and exceptions used throughout the library.
"""

from __future__ import annotations

from wrkbench.core.config import Settings
from wrkbench.core.exceptions import (
    ConfigurationError,
    ExecutionError,
    HistoryError,
    NoHistoryError,
    ScriptError,
    SerializationError,
    StatsError,
    WrkBenchError,
)
from wrkbench.core.ingest import error_percentage, ingest
from wrkbench.core.plan import BenchmarkPlan
from wrkbench.core.protocols import ExecutorProtocol
from wrkbench.core.types import LOWER_IS_BETTER, METRIC_FIELDS, BenchmarkConfig, RunResult

__all__ = [
    # Types
    "BenchmarkConfig",
    "BenchmarkPlan",
    "LOWER_IS_BETTER",
    "METRIC_FIELDS",
    "RunResult",
    # Protocols
    "ExecutorProtocol",
    # Ingestion
    "error_percentage",
    "ingest",
    # Configuration
    "Settings",
    # Exceptions
    "ConfigurationError",
    "ExecutionError",
    "HistoryError",
    "NoHistoryError",
    "ScriptError",
    "SerializationError",
    "StatsError",
    "WrkBenchError",
]
