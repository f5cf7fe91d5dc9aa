"""Custom exceptions for wrkbench.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from WrkBenchError for easy catching.
"""

from __future__ import annotations


class WrkBenchError(Exception):
    """Base exception for all wrkbench errors.

    Example:
        >>> try:
        ...     history.variance(HistoryPeriod.DAY)
        ... except WrkBenchError as e:
        ...     print(f"wrkbench error: {e}")
    """


class ExecutionError(WrkBenchError):
    """Raised when the load generator cannot be executed.

    Executors convert this into a failed RunResult, so it only escapes
    when an executor is used directly.

    Example:
        >>> raise ExecutionError("wrk exited with status 1")
    """


class ScriptError(WrkBenchError):
    """Raised when the wrk Lua script cannot be produced.

    Example:
        >>> raise ScriptError("Wrk Lua file not found: bench.lua")
    """


class HistoryError(WrkBenchError):
    """Raised when history storage cannot be read or written.

    Example:
        >>> raise HistoryError("no records in .wrk-api-bench")
    """


class NoHistoryError(HistoryError):
    """Raised when there is no stored record to load."""


class SerializationError(HistoryError):
    """Raised when a history file cannot be encoded or decoded."""


class StatsError(WrkBenchError):
    """Raised when a statistic cannot be computed from a set of runs.

    Example:
        >>> raise StatsError("no successful runs in a set of size 3")
    """


class ConfigurationError(WrkBenchError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("Invalid target URL: localhost:8080")
    """
