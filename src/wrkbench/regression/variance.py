"""Per-metric variance between two runs."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from wrkbench.core.types import METRIC_FIELDS
from wrkbench.regression.models import Variance

if TYPE_CHECKING:
    from wrkbench.core.types import RunResult


def percentage_change(new: float, old: float) -> float:
    """Percentage change of ``new`` relative to ``old``.

    A zero baseline yields 0.0 when ``new`` is also zero and a signed
    infinity otherwise.

    Example:
        >>> percentage_change(150, 100)
        50.0
        >>> percentage_change(5, 0)
        inf
    """
    if old == 0:
        if new == 0:
            return 0.0
        return math.copysign(math.inf, new)
    return (new - old) / old * 100


def compare(new: RunResult, old: RunResult) -> Variance:
    """Compute the variance of ``new`` against ``old``, metric by metric.

    Args:
        new: The current run.
        old: The historical run.

    Returns:
        Variance carrying both runs, the deltas and ``new``'s timestamp.
    """
    delta = {name: percentage_change(getattr(new, name), getattr(old, name)) for name in METRIC_FIELDS}
    return Variance(new=new, old=old, delta=delta, timestamp=new.timestamp)
