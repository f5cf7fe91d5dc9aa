"""JSON file storage for benchmark history.

Each invocation is stored as its own ``result.<timestamp>.json`` file in
the history directory. Records are ordered by the timestamp embedded in
the filename, never by filesystem metadata.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from wrkbench.benchmarks.models import HistoryRecord, parse_filename, to_utc
from wrkbench.benchmarks.period import HistoryPeriod
from wrkbench.benchmarks.selection import best_run
from wrkbench.core.exceptions import HistoryError, NoHistoryError, StatsError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from wrkbench.core.types import RunResult

logger = logging.getLogger(__name__)


class JSONHistoryStore:
    """Directory of JSON history records.

    Uses atomic writes (temp file + rename) and refuses to overwrite an
    existing record.

    Example:
        >>> store = JSONHistoryStore(".wrk-api-bench")
        >>> store.ensure_location()
        True
        >>> store.persist(now, runs)
        PosixPath('.wrk-api-bench/result.2024-01-15-10:30:00-+0000.json')
        >>> store.load(HistoryPeriod.DAY, reduce_to_best=True)
    """

    def __init__(
        self,
        path: str | Path = ".wrk-api-bench",
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: History directory.
            log: Logger to report on. Defaults to the module logger.
        """
        self._path = Path(path)
        self._logger = log or logger

    @property
    def path(self) -> Path:
        """History directory."""
        return self._path

    def ensure_location(self) -> bool:
        """Create the history directory if it is missing.

        Returns:
            True if the directory exists afterwards. Failures are logged.
        """
        try:
            self._path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._logger.error(
                f"Unable to create storage dir {self._path}: {e}. Statistics calculation could be impaired"
            )
            return False
        return True

    def persist(self, timestamp: datetime, results: Sequence[RunResult]) -> Path:
        """Write the runs of one invocation.

        Args:
            timestamp: When the invocation was recorded.
            results: Runs in execution order.

        Returns:
            Path of the written record.

        Raises:
            HistoryError: If the directory is missing, the write fails or a
                record with the same timestamp already exists.
            SerializationError: If the runs cannot be encoded.
        """
        record = HistoryRecord(timestamp=timestamp, runs=list(results))
        if not self._path.is_dir():
            raise HistoryError(f"History directory {self._path} does not exist")

        target = self._path / record.filename
        if target.exists():
            raise HistoryError(f"History record {target} already exists")

        content = record.to_json()
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self._path,
                prefix=".result_",
                suffix=".tmp",
            )
        except OSError as e:
            raise HistoryError(f"Unable to write history record {target}: {e}") from e

        try:
            with os.fdopen(temp_fd, "w") as f:
                f.write(content)
            Path(temp_path).replace(target)
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise HistoryError(f"Unable to write history record {target}: {e}") from e

        self._logger.info(f"Writing current benchmark to {target.name}")
        return target

    def records(self) -> list[tuple[datetime, Path]]:
        """Stored records as (timestamp, path), oldest first.

        Files that do not follow the naming convention are skipped.

        Raises:
            HistoryError: If the directory cannot be listed.
        """
        try:
            paths = list(self._path.iterdir()) if self._path.is_dir() else []
        except OSError as e:
            raise HistoryError(f"Unable to list history directory {self._path}: {e}") from e

        entries: list[tuple[datetime, Path]] = []
        for path in paths:
            timestamp = parse_filename(path.name)
            if timestamp is None:
                self._logger.debug(f"Skipping {path.name}: not a history record")
                continue
            entries.append((timestamp, path))

        entries.sort(key=lambda entry: entry[0])
        return entries

    def _read(self, timestamp: datetime, path: Path) -> HistoryRecord:
        """Read one record from disk.

        Raises:
            HistoryError: If the file is unreadable.
            SerializationError: If the file is corrupt.
        """
        try:
            content = path.read_text()
        except OSError as e:
            raise HistoryError(f"Unable to read history record {path}: {e}") from e
        return HistoryRecord.from_json(timestamp, content)

    def read(self, path: Path) -> list[RunResult]:
        """Read the runs stored in one history file.

        Args:
            path: A ``result.<timestamp>.json`` file.

        Returns:
            The runs, in execution order.

        Raises:
            HistoryError: If the name is not a history record or the file
                is unreadable.
            SerializationError: If the file is corrupt.
        """
        path = Path(path)
        timestamp = parse_filename(path.name)
        if timestamp is None:
            raise HistoryError(f"{path.name} is not a history record")
        return self._read(timestamp, path).runs

    def _best_or_none(self, record: HistoryRecord, runs: list[RunResult]) -> RunResult | None:
        try:
            return best_run(runs)
        except StatsError as e:
            self._logger.warning(f"Ignoring history record {record.filename}: {e}")
            return None

    def get(self, timestamp: datetime) -> HistoryRecord | None:
        """Get the record captured at ``timestamp``.

        Args:
            timestamp: Capture instant of the record.

        Returns:
            The record if found, None otherwise.
        """
        timestamp = to_utc(timestamp)
        for entry_timestamp, path in self.records():
            if entry_timestamp == timestamp:
                return self._read(entry_timestamp, path)
        return None

    def list(
        self,
        period: HistoryPeriod | None = None,
        limit: int = 100,
        now: datetime | None = None,
    ) -> list[HistoryRecord]:
        """List records, optionally restricted to a window.

        Args:
            period: Window to restrict to (None or LAST for the most recent
                ``limit`` records regardless of age).
            limit: Maximum number of records to return.
            now: Reference instant for the window.

        Returns:
            List of records, sorted by timestamp descending.
        """
        entries = self.records()
        if period is not None and period is not HistoryPeriod.LAST:
            cutoff = period.cutoff(now)
            entries = [entry for entry in entries if entry[0] >= cutoff]

        entries.reverse()
        return [self._read(timestamp, path) for timestamp, path in entries[:limit]]

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

        With LAST only the most recent record is read; it is skipped in
        favour of the one before it when its timestamp equals
        ``exclude_timestamp``. Other periods read every record at or after
        the period cutoff and drop runs already present in ``known``.

        Records without any successful run are skipped when reducing.

        Args:
            period: Window to load.
            reduce_to_best: Reduce each record to its best run.
            known: Runs the caller already holds.
            exclude_timestamp: Timestamp of the invocation being compared.
            now: Reference instant for the window.

        Returns:
            The loaded runs, oldest record first.

        Raises:
            NoHistoryError: If there are no records to load.
            HistoryError: If a record is unreadable.
            SerializationError: If a record is corrupt.
        """
        entries = self.records()
        if not entries:
            raise NoHistoryError(f"no records in {self._path}")

        if period is HistoryPeriod.LAST:
            if exclude_timestamp is not None and entries[-1][0] == to_utc(exclude_timestamp):
                entries.pop()
            if not entries:
                raise NoHistoryError(f"no records in {self._path} other than the current run")

            record = self._read(*entries[-1])
            if not reduce_to_best:
                return list(record.runs)
            best = self._best_or_none(record, record.runs)
            return [best] if best is not None else []

        cutoff = period.cutoff(now)
        history: list[RunResult] = []
        for timestamp, path in entries:
            if timestamp < cutoff:
                continue
            record = self._read(timestamp, path)
            runs = [run for run in record.runs if run not in known]
            if not runs:
                continue
            if reduce_to_best:
                best = self._best_or_none(record, runs)
                if best is not None:
                    history.append(best)
            else:
                history.extend(runs)

        return history
