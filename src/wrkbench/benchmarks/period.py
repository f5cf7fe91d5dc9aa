"""History retention windows."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

# Earliest representable instant, used by FOREVER.
EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


class HistoryPeriod(str, Enum):
    """Named window selecting which past records take part in a comparison.

    LAST only selects the most recent record; MONTH is four weeks, not a
    calendar month.

    Example:
        >>> HistoryPeriod("day").cutoff(datetime(2024, 1, 2, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """

    LAST = "last"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    FOREVER = "forever"

    def cutoff(self, now: datetime | None = None) -> datetime:
        """Earliest timestamp still inside this window.

        Args:
            now: Reference instant. Defaults to the current UTC time;
                naive values are taken as UTC.

        Returns:
            The cutoff instant, in UTC. Records at or after it are in the
            window.
        """
        if self is HistoryPeriod.FOREVER:
            return EPOCH_MIN
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc) - _SPANS[self]


_SPANS: dict[HistoryPeriod, timedelta] = {
    HistoryPeriod.LAST: timedelta(0),
    HistoryPeriod.HOUR: timedelta(hours=1),
    HistoryPeriod.DAY: timedelta(days=1),
    HistoryPeriod.WEEK: timedelta(weeks=1),
    HistoryPeriod.MONTH: timedelta(weeks=4),
}
