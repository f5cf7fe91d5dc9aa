"""Console reporter for wrkbench.

This module provides terminal output for variances, with a box-drawn
table and color-coded changes.
"""

from __future__ import annotations

import math
import os
import sys
from typing import TYPE_CHECKING, TextIO

from wrkbench.core.types import LOWER_IS_BETTER

if TYPE_CHECKING:
    from wrkbench.regression.models import RegressionResult, Variance


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"


# (label, metric) rows of a variance report, in display order
VARIANCE_ROWS: tuple[tuple[str, str], ...] = (
    ("Requests/sec", "requests_per_sec"),
    ("Total requests", "requests"),
    ("Total errors", "errors"),
    ("Total successes", "successes"),
    ("Average latency ms", "avg_latency_ms"),
    ("Minimum latency ms", "min_latency_ms"),
    ("Maximum latency ms", "max_latency_ms"),
    ("Stdev latency ms", "stdev_latency_ms"),
    ("Transfer MB", "transfer_mb"),
    ("Connect errors", "errors_connect"),
    ("Read errors", "errors_read"),
    ("Write errors", "errors_write"),
    ("Status errors", "errors_status"),
    ("Timeout errors", "errors_timeout"),
)

VARIANCE_HEADERS: tuple[str, str, str, str] = ("Measurement", "Variance %", "Current", "Old")


def format_delta(delta: float) -> str:
    """Format a percentage change, e.g. ``+20.00%`` or ``+inf%``."""
    if math.isinf(delta):
        return "+inf%" if delta > 0 else "-inf%"
    return f"{delta:+.2f}%"


def format_value(value: float) -> str:
    """Format a metric value; counters are printed without decimals."""
    if isinstance(value, int):
        return str(value)
    return f"{value:.2f}"


def change_status(metric: str, delta: float) -> str:
    """Classify a change as "better", "worse" or "same"."""
    if delta == 0 or math.isnan(delta):
        return "same"
    improved = delta < 0 if metric in LOWER_IS_BETTER else delta > 0
    return "better" if improved else "worse"


def variance_rows(variance: Variance) -> list[tuple[str, str, str, str, str]]:
    """Rows of a variance table as (label, delta, current, old, status) strings."""
    return [
        (
            label,
            format_delta(variance.delta[metric]),
            format_value(getattr(variance.new, metric)),
            format_value(getattr(variance.old, metric)),
            change_status(metric, variance.delta[metric]),
        )
        for label, metric in VARIANCE_ROWS
    ]


class ConsoleReporter:
    """Reporter that outputs variances to the terminal.

    Attributes:
        use_colors: Whether to use ANSI colors in output.
        output: Output stream (defaults to stdout).

    Example:
        >>> reporter = ConsoleReporter()
        >>> reporter.report_variance(variance)
        ┌──────────────────────┬────────────┬──────────────┬──────────────┐
        │ Measurement          │ Variance % │ Current      │ Old          │
        ├──────────────────────┼────────────┼──────────────┼──────────────┤
        │ Requests/sec         │ +20.00%    │ 1200.00      │ 1000.00      │
        ...
    """

    column_widths: tuple[int, int, int, int] = (22, 12, 14, 14)

    def __init__(
        self,
        use_colors: bool = True,
        output: TextIO | None = None,
    ) -> None:
        """Initialize ConsoleReporter.

        Args:
            use_colors: Whether to use ANSI colors. Defaults to True.
            output: Output stream. Defaults to sys.stdout.
        """
        self.use_colors = use_colors and _supports_color(output or sys.stdout)
        self.output = output or sys.stdout

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _print(self, text: str = "") -> None:
        """Print text to output stream."""
        print(text, file=self.output)

    def _border(self, left: str, middle: str, right: str) -> str:
        horizontal = "─"
        return "  " + left + middle.join(horizontal * width for width in self.column_widths) + right

    def _row(self, cells: tuple[str, ...], colors: tuple[str | None, ...] | None = None) -> str:
        vertical = "│"
        parts = []
        for index, (cell, width) in enumerate(zip(cells, self.column_widths)):
            text = f" {cell:<{width - 1}}"
            color = colors[index] if colors else None
            parts.append(self._color(text, color) if color else text)
        return f"  {vertical}" + vertical.join(parts) + vertical

    def format_variance(self, variance: Variance) -> str:
        """Render a variance as a box-drawn table.

        Args:
            variance: The variance to render.

        Returns:
            The table, one line per row.
        """
        status_colors = {"better": Colors.GREEN, "worse": Colors.RED, "same": None}
        lines = [
            self._border("┌", "┬", "┐"),
            self._row(VARIANCE_HEADERS, (Colors.BOLD,) * 4),
            self._border("├", "┼", "┤"),
        ]
        for label, delta, current, old, status in variance_rows(variance):
            lines.append(self._row((label, delta, current, old), (None, status_colors[status], None, None)))
        lines.append(self._border("└", "┴", "┘"))
        return "\n".join(lines)

    def report_variance(self, variance: Variance, title: str | None = None) -> None:
        """Print a variance table.

        Args:
            variance: The variance to report.
            title: Optional title for the report section.
        """
        if title:
            self._print()
            self._print(self._color(f"  {title}", Colors.BOLD))
        self._print(self.format_variance(variance))
        self._print()

    def report_regression(self, result: RegressionResult) -> None:
        """Print regression alerts and improvements.

        Args:
            result: Detection result to report.
        """
        if not result.alerts and not result.improvements:
            self.print_success("No regressions detected.")
            return
        for alert in result.alerts:
            if alert.severity == "critical":
                self.print_error(alert.message)
            else:
                self.print_warning(alert.message)
        for change in result.improvements:
            self.print_success(change.message)

    def print_success(self, text: str) -> None:
        """Print a success message."""
        self._print(self._color(f"  ✅ {text}", Colors.GREEN))

    def print_warning(self, text: str) -> None:
        """Print a warning message."""
        self._print(self._color(f"  ⚠️  {text}", Colors.YELLOW))

    def print_error(self, text: str) -> None:
        """Print an error message."""
        self._print(self._color(f"  ❌ {text}", Colors.RED))


def _supports_color(stream: TextIO) -> bool:
    """Whether ANSI colors should be written to ``stream``.

    Colors need a terminal and are turned off by NO_COLOR or TERM=dumb.
    """
    isatty = getattr(stream, "isatty", None)
    if isatty is None or not isatty():
        return False
    return not os.environ.get("NO_COLOR") and os.environ.get("TERM") != "dumb"
