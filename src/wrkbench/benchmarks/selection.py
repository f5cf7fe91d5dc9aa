"""Best-run selection.

The best run of a set is the successful run with the highest throughput.
Ties fall through to successes, then requests, then transferred data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wrkbench.core.exceptions import StatsError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wrkbench.core.types import RunResult


def rank(run: RunResult) -> tuple[float, int, int, int]:
    """Sort key of a run; greater is better."""
    return (run.requests_per_sec, run.successes, run.requests, run.transfer_mb)


def best_run(runs: Iterable[RunResult]) -> RunResult:
    """Pick the best successful run.

    Failed runs are never selected. When several runs share the best rank
    the first one encountered wins.

    Args:
        runs: Runs to choose from.

    Returns:
        The best successful run.

    Raises:
        StatsError: If there is no successful run.

    Example:
        >>> best = best_run(history)
        >>> best.requests_per_sec
        1200.0
    """
    runs = list(runs)
    candidates = [run for run in runs if run.success]
    if not candidates:
        raise StatsError(f"no successful runs in a set of size {len(runs)}")
    return max(candidates, key=rank)
