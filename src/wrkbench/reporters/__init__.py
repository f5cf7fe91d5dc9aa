"""Reporters module for wrkbench.

This module provides output formatters for variances:
- Console: Terminal output with tables and colors
- Markdown: Documentation-friendly tables
"""

from __future__ import annotations

from wrkbench.reporters.console import ConsoleReporter
from wrkbench.reporters.markdown import MarkdownReporter

__all__ = [
    "ConsoleReporter",
    "MarkdownReporter",
]
