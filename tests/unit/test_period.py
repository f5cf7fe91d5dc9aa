"""Tests for history periods."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import time_machine

from wrkbench.benchmarks.period import EPOCH_MIN, HistoryPeriod

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestHistoryPeriod:
    """Tests for HistoryPeriod."""

    @pytest.mark.parametrize(
        ("period", "span"),
        [
            (HistoryPeriod.HOUR, timedelta(hours=1)),
            (HistoryPeriod.DAY, timedelta(days=1)),
            (HistoryPeriod.WEEK, timedelta(days=7)),
            (HistoryPeriod.MONTH, timedelta(days=28)),
        ],
    )
    def test_cutoff(self, period: HistoryPeriod, span: timedelta) -> None:
        """Cutoff is now minus the period span."""
        assert period.cutoff(NOW) == NOW - span

    def test_month_is_four_weeks(self) -> None:
        """MONTH is 28 days, not a calendar month."""
        assert HistoryPeriod.MONTH.cutoff(NOW) == datetime(2024, 2, 2, 12, 0, 0, tzinfo=timezone.utc)

    def test_forever_has_no_lower_bound(self) -> None:
        """FOREVER starts at the earliest representable instant."""
        assert HistoryPeriod.FOREVER.cutoff(NOW) == EPOCH_MIN
        assert EPOCH_MIN.tzinfo is not None

    def test_naive_now_is_utc(self) -> None:
        """A naive reference instant is taken as UTC."""
        cutoff = HistoryPeriod.DAY.cutoff(NOW.replace(tzinfo=None))

        assert cutoff == NOW - timedelta(days=1)
        assert cutoff.tzinfo is not None

    def test_from_name(self) -> None:
        """Periods are looked up by lowercase name."""
        assert HistoryPeriod("day") is HistoryPeriod.DAY
        assert HistoryPeriod("last") is HistoryPeriod.LAST

    @time_machine.travel(NOW, tick=False)
    def test_defaults_to_current_time(self) -> None:
        """Without a reference instant the current UTC time is used."""
        assert HistoryPeriod.HOUR.cutoff() == NOW - timedelta(hours=1)
