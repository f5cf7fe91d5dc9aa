"""Base protocol for history storage backends.

This module defines the StorageProtocol that all storage backends must implement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from pathlib import Path

    from wrkbench.benchmarks.models import HistoryRecord
    from wrkbench.benchmarks.period import HistoryPeriod
    from wrkbench.core.types import RunResult


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol for history storage backends.

    Storage is an append-only log of HistoryRecords, one per invocation,
    ordered by the timestamp each record was captured at.
    """

    def ensure_location(self) -> bool:
        """Create the storage location if it is missing.

        Returns:
            True if the location is usable, False otherwise.
        """
        ...

    def persist(self, timestamp: datetime, results: Sequence[RunResult]) -> Path:
        """Write the runs of one invocation.

        Args:
            timestamp: When the invocation was recorded.
            results: Runs in execution order.

        Returns:
            Path of the written record.

        Raises:
            HistoryError: If the record cannot be written or already exists.
        """
        ...

    def records(self) -> list[tuple[datetime, Path]]:
        """Stored records as (timestamp, location), oldest first."""
        ...

    def read(self, path: Path) -> list[RunResult]:
        """Read the runs of one stored record.

        Raises:
            HistoryError: If the record is unreadable.
        """
        ...

    def get(self, timestamp: datetime) -> HistoryRecord | None:
        """Get the record captured at ``timestamp``.

        Returns:
            The record if found, None otherwise.
        """
        ...

    def list(
        self,
        period: HistoryPeriod | None = None,
        limit: int = 100,
        now: datetime | None = None,
    ) -> list[HistoryRecord]:
        """List records, optionally restricted to a window.

        Returns:
            List of records, sorted by timestamp descending.
        """
        ...

    def load(
        self,
        period: HistoryPeriod,
        reduce_to_best: bool = False,
        *,
        known: Sequence[RunResult] = (),
        exclude_timestamp: datetime | None = None,
        now: datetime | None = None,
    ) -> list[RunResult]:
        """Load the runs of a history window.

        Raises:
            HistoryError: If there are no records or a record is unreadable.
        """
        ...
