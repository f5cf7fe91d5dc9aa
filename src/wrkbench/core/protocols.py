"""Protocol definitions for wrkbench.

This module defines the abstract interfaces (protocols) that adapters
must implement. Using protocols enables duck typing and loose coupling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wrkbench.core.types import BenchmarkConfig, RunResult


@runtime_checkable
class ExecutorProtocol(Protocol):
    """Protocol for load generator executors.

    Any class implementing ``execute`` can drive benchmarks, without
    needing to inherit from a base class. Tests use in-memory fakes.

    Example:
        >>> class FakeExecutor:
        ...     def execute(self, config: BenchmarkConfig) -> RunResult:
        ...         return RunResult(requests=100, successes=100, requests_per_sec=10.0)
        ...
        >>> assert isinstance(FakeExecutor(), ExecutorProtocol)
    """

    def execute(self, config: BenchmarkConfig) -> RunResult:
        """Run one load profile.

        Args:
            config: The load profile to run.

        Returns:
            A populated RunResult with ``success`` not yet set, or
            ``RunResult.fail(...)`` when the run could not complete.
        """
        ...
