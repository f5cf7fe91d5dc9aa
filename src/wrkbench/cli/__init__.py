"""CLI module for wrkbench.

This module provides the command-line interface using Typer.
"""

from __future__ import annotations

from wrkbench.cli.main import app

__all__ = ["app"]
