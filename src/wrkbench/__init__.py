"""wrkbench: HTTP benchmark history and regression tracking on top of wrk."""

from __future__ import annotations

from wrkbench.adapters import WrkExecutor
from wrkbench.benchmarks import BenchmarkHistory, HistoryPeriod, JSONHistoryStore, best_run
from wrkbench.core import BenchmarkConfig, BenchmarkPlan, RunResult, Settings
from wrkbench.regression import RegressionDetector, RegressionThresholds, Variance, compare

__version__ = "0.1.0"
__all__ = [
    # Benchmarks
    "BenchmarkConfig",
    "BenchmarkHistory",
    "BenchmarkPlan",
    "HistoryPeriod",
    "JSONHistoryStore",
    "RunResult",
    "best_run",
    # Execution
    "WrkExecutor",
    # Comparison
    "RegressionDetector",
    "RegressionThresholds",
    "Variance",
    "compare",
    # Configuration
    "Settings",
    # Version
    "__version__",
]
