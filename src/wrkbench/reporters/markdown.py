"""Markdown reporter for wrkbench.

This module renders a variance as a GitHub-flavoured markdown table,
suitable for pull request comments and CI summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from wrkbench.benchmarks.models import format_timestamp
from wrkbench.reporters.console import VARIANCE_HEADERS, variance_rows

if TYPE_CHECKING:
    from wrkbench.regression.models import Variance

_STATUS_MARKERS = {"better": " 🟢", "worse": " 🔴", "same": ""}


class MarkdownReporter:
    """Reporter that outputs variances as markdown.

    Attributes:
        title: Heading of the document.
        markers: Whether to append colored markers to changed metrics.

    Example:
        >>> reporter = MarkdownReporter()
        >>> print(reporter.render(variance))
        ## Benchmark variance
        ...
        | Measurement | Variance % | Current | Old |
        |---|---:|---:|---:|
        | Requests/sec | +20.00% 🟢 | 1200.00 | 1000.00 |
    """

    def __init__(self, title: str = "Benchmark variance", markers: bool = True) -> None:
        self.title = title
        self.markers = markers

    def render(self, variance: Variance) -> str:
        """Render a variance as a markdown document.

        Args:
            variance: The variance to render.

        Returns:
            Markdown text ending with a newline.
        """
        lines = [f"## {self.title}", ""]
        if variance.new.timestamp is not None and variance.old.timestamp is not None:
            lines.append(
                f"Current run `{format_timestamp(variance.new.timestamp)}` "
                f"compared with `{format_timestamp(variance.old.timestamp)}`."
            )
            lines.append("")

        lines.append("| " + " | ".join(VARIANCE_HEADERS) + " |")
        lines.append("|---|---:|---:|---:|")
        for label, delta, current, old, status in variance_rows(variance):
            marker = _STATUS_MARKERS[status] if self.markers else ""
            lines.append(f"| {label} | {delta}{marker} | {current} | {old} |")

        return "\n".join(lines) + "\n"

    def write(self, variance: Variance, path: Path | str) -> Path:
        """Render a variance and write it to ``path``.

        Args:
            variance: The variance to render.
            path: Output file; parent directories are created.

        Returns:
            The written path.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(variance), encoding="utf-8")
        return path
