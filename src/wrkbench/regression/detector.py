"""Regression detector for benchmark variances.

This module provides the RegressionDetector class for classifying the
variance between a current run and a historical run.
"""

from __future__ import annotations

import math

from wrkbench.core.types import LOWER_IS_BETTER, METRIC_FIELDS
from wrkbench.regression.models import (
    MetricChange,
    RegressionAlert,
    RegressionResult,
    RegressionThresholds,
    Variance,
)

THROUGHPUT_METRICS: frozenset[str] = frozenset({"requests_per_sec", "requests", "successes", "transfer_mb"})
LATENCY_METRICS: frozenset[str] = frozenset(
    {"avg_latency_ms", "min_latency_ms", "max_latency_ms", "stdev_latency_ms"}
)


class RegressionDetector:
    """Detect regressions and improvements in a Variance.

    Throughput metrics regress when they drop; latency and error metrics
    regress when they increase. Metrics with a zero baseline are skipped.

    Attributes:
        thresholds: Thresholds for regression detection.

    Example:
        >>> detector = RegressionDetector(RegressionThresholds(throughput_drop=0.03))
        >>> result = detector.detect(compare(new, old))
        >>> if result.has_regressions:
        ...     for alert in result.alerts:
        ...         print(alert.message)
    """

    def __init__(self, thresholds: RegressionThresholds | None = None) -> None:
        """Initialize detector.

        Args:
            thresholds: Thresholds for regression detection. Defaults to RegressionThresholds().
        """
        self.thresholds = thresholds or RegressionThresholds()

    def _get_threshold(self, metric: str) -> float:
        """Get threshold for a specific metric, as a fraction."""
        if metric in THROUGHPUT_METRICS:
            return self.thresholds.throughput_drop
        if metric in LATENCY_METRICS:
            return self.thresholds.latency_increase
        return self.thresholds.errors_increase

    def detect(self, variance: Variance) -> RegressionResult:
        """Classify every metric of a variance.

        Args:
            variance: Variance of the current run against the historical one.

        Returns:
            RegressionResult with regressions and improvements.
        """
        alerts: list[RegressionAlert] = []
        improvements: list[MetricChange] = []

        for metric in METRIC_FIELDS:
            baseline_value = getattr(variance.old, metric)
            current_value = getattr(variance.new, metric)
            change_percent = variance.delta[metric]

            # Skip if baseline is zero (change is 0 or infinite)
            if baseline_value == 0 or math.isnan(change_percent):
                continue

            threshold_percent = self._get_threshold(metric) * 100
            critical_percent = threshold_percent * self.thresholds.critical_multiplier

            # Positive "worsening" means the metric moved in the bad direction
            worsening = change_percent if metric in LOWER_IS_BETTER else -change_percent

            if worsening > threshold_percent:
                alerts.append(
                    RegressionAlert(
                        metric=metric,
                        baseline_value=baseline_value,
                        current_value=current_value,
                        change_percent=change_percent,
                        threshold_percent=threshold_percent,
                        severity="critical" if worsening > critical_percent else "warning",
                    )
                )
            elif -worsening > threshold_percent:
                improvements.append(
                    MetricChange(
                        metric=metric,
                        baseline_value=baseline_value,
                        current_value=current_value,
                        change_percent=change_percent,
                        threshold_percent=threshold_percent,
                    )
                )

        return RegressionResult(alerts=alerts, improvements=improvements, variance=variance)
