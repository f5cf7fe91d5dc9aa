"""Run ingestion: deciding whether a measured run is healthy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wrkbench.core.types import RunResult

logger = logging.getLogger(__name__)


def error_percentage(run: RunResult) -> float:
    """Percentage of failed requests in a run.

    A run that issued no requests counts as 100% errors.
    """
    if run.requests == 0:
        return 100.0
    return run.errors / run.requests * 100


def ingest(
    run: RunResult,
    max_error_percentage: float,
    log: logging.Logger | None = None,
) -> RunResult:
    """Set the ``success`` flag of a freshly executed run.

    A run is successful when it carries no execution error and its error
    percentage is strictly below ``max_error_percentage``.

    Args:
        run: Run as returned by an executor.
        max_error_percentage: Threshold, in percent (0-100).
        log: Logger to report unhealthy runs on.

    Returns:
        A copy of ``run`` with ``success`` set.
    """
    log = log or logger
    if run.error:
        return run.with_context(success=False)

    percentage = error_percentage(run)
    if percentage < max_error_percentage:
        return run.with_context(success=True)

    log.error(f"Errors percentage is {percentage:.2f}%, which is more than {max_error_percentage}%")
    return run.with_context(success=False)
