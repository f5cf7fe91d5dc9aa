"""Models for variance and regression detection.

This module provides dataclasses for the per-metric variance between two
runs, regression thresholds, alerts, and detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from datetime import datetime

    from wrkbench.core.types import RunResult


@dataclass(frozen=True)
class Variance:
    """Percentage change of every metric between two runs.

    Attributes:
        new: The current run.
        old: The run it is compared against.
        delta: Percentage change per metric, keyed by metric name.
        timestamp: Timestamp of ``new``.

    Example:
        >>> variance = compare(new, old)
        >>> variance.delta["requests_per_sec"]
        20.0
    """

    new: RunResult
    old: RunResult
    delta: dict[str, float]
    timestamp: datetime | None = None


@dataclass
class RegressionThresholds:
    """Thresholds for regression detection.

    Throughput metrics: alert if drop exceeds threshold.
    Latency and error metrics: alert if increase exceeds threshold.

    Attributes:
        throughput_drop: Threshold for requests/sec, requests, successes
            and transfer (default 5%).
        latency_increase: Threshold for latency metrics (default 20%).
        errors_increase: Threshold for error counters (default 50%).
        critical_multiplier: Multiplier for critical severity (default 2x).

    Example:
        >>> thresholds = RegressionThresholds(throughput_drop=0.03)  # Stricter 3%
        >>> thresholds.throughput_drop
        0.03
    """

    throughput_drop: float = 0.05
    latency_increase: float = 0.20
    errors_increase: float = 0.50
    critical_multiplier: float = 2.0


@dataclass
class MetricChange:
    """A metric that moved beyond its threshold.

    Attributes:
        metric: Name of the metric.
        baseline_value: Value in the historical run.
        current_value: Value in the current run.
        change_percent: Percentage change (negative = drop, positive = increase).
        threshold_percent: Threshold that was exceeded (as percentage).
    """

    metric: str
    baseline_value: float
    current_value: float
    change_percent: float
    threshold_percent: float

    @property
    def direction(self) -> str:
        return "increased" if self.change_percent > 0 else "dropped"

    @property
    def message(self) -> str:
        """Human-readable message.

        Example:
            >>> change.message
            'requests_per_sec dropped by 8.2% (threshold: 5.0%)'
        """
        return (
            f"{self.metric} {self.direction} by {abs(self.change_percent):.1f}% "
            f"(threshold: {self.threshold_percent:.1f}%)"
        )


@dataclass
class RegressionAlert(MetricChange):
    """Alert for a detected regression.

    Attributes:
        severity: "warning" if exceeds threshold, "critical" if exceeds
            ``critical_multiplier`` times the threshold.
    """

    severity: Literal["warning", "critical"] = "warning"


@dataclass
class RegressionResult:
    """Outcome of classifying a Variance.

    Attributes:
        alerts: Metrics that regressed.
        improvements: Metrics that improved beyond their threshold.
        variance: The variance the result was computed from.

    Example:
        >>> result = RegressionDetector().detect(variance)
        >>> result.verdict
        'improvement'
    """

    alerts: list[RegressionAlert]
    improvements: list[MetricChange]
    variance: Variance

    @property
    def has_regressions(self) -> bool:
        return bool(self.alerts)

    @property
    def has_critical(self) -> bool:
        return any(alert.severity == "critical" for alert in self.alerts)

    @property
    def critical_count(self) -> int:
        return sum(alert.severity == "critical" for alert in self.alerts)

    @property
    def warning_count(self) -> int:
        return len(self.alerts) - self.critical_count

    @property
    def verdict(self) -> Literal["regression", "improvement", "unchanged"]:
        """Overall outcome of the comparison."""
        if self.alerts:
            return "regression"
        if self.improvements:
            return "improvement"
        return "unchanged"

    def summary(self) -> str:
        """Multi-line text listing every alert and improvement."""
        if self.verdict == "unchanged":
            return "No regressions detected."

        lines = [
            f"Verdict: {self.verdict} ({self.critical_count} critical, {self.warning_count} warning, "
            f"{len(self.improvements)} improved)"
        ]
        lines.extend(f"  [{alert.severity.upper()}] {alert.message}" for alert in self.alerts)
        lines.extend(f"  [IMPROVED] {change.message}" for change in self.improvements)
        return "\n".join(lines)
