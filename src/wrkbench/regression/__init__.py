"""Regression detection module for wrkbench.

This module compares a current run against a historical run, metric by
metric, and classifies the changes.

Example:
    >>> from wrkbench.regression import RegressionDetector, compare
    >>>
    >>> variance = compare(current_best, historical_best)
    >>> result = RegressionDetector().detect(variance)
    >>> if result.has_critical:
    ...     print("Critical regressions detected!")
"""

from __future__ import annotations

from wrkbench.regression.detector import RegressionDetector
from wrkbench.regression.models import (
    MetricChange,
    RegressionAlert,
    RegressionResult,
    RegressionThresholds,
    Variance,
)
from wrkbench.regression.variance import compare, percentage_change

__all__ = [
    "MetricChange",
    "RegressionAlert",
    "RegressionDetector",
    "RegressionResult",
    "RegressionThresholds",
    "Variance",
    "compare",
    "percentage_change",
]
