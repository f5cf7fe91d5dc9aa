"""Models for benchmark history.

This module provides the HistoryRecord dataclass, the unit of durable
storage, and the filename convention that encodes its timestamp.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import ValidationError

from wrkbench.core.exceptions import SerializationError
from wrkbench.core.types import RunResult

DATE_FORMAT = "%Y-%m-%d-%H:%M:%S-%z"
FILENAME_PREFIX = "result."
FILENAME_SUFFIX = ".json"


def to_utc(timestamp: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def format_timestamp(timestamp: datetime) -> str:
    """Encode a timestamp the way history filenames embed it."""
    return to_utc(timestamp).strftime(DATE_FORMAT)


def filename_for(timestamp: datetime) -> str:
    """History filename for a record captured at ``timestamp``.

    Example:
        >>> filename_for(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        'result.2024-01-15-10:30:00-+0000.json'
    """
    return f"{FILENAME_PREFIX}{format_timestamp(timestamp)}{FILENAME_SUFFIX}"


def parse_filename(name: str) -> datetime | None:
    """Extract the timestamp embedded in a history filename.

    Returns:
        The UTC timestamp, or None if ``name`` does not follow the
        convention.
    """
    if not (name.startswith(FILENAME_PREFIX) and name.endswith(FILENAME_SUFFIX)):
        return None
    encoded = name[len(FILENAME_PREFIX) : -len(FILENAME_SUFFIX)]
    try:
        return to_utc(datetime.strptime(encoded, DATE_FORMAT))
    except ValueError:
        return None


@dataclass
class HistoryRecord:
    """All runs captured during one benchmarking invocation.

    Attributes:
        timestamp: When the invocation was recorded.
        runs: Runs in execution order.

    Example:
        >>> record = HistoryRecord(timestamp=now, runs=[run_a, run_b])
        >>> record.filename
        'result.2024-01-15-10:30:00-+0000.json'
    """

    timestamp: datetime
    runs: list[RunResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.timestamp = to_utc(self.timestamp)

    @property
    def filename(self) -> str:
        """Filename this record is stored under."""
        return filename_for(self.timestamp)

    def to_json(self) -> str:
        """Serialize the runs as a JSON array.

        Raises:
            SerializationError: If a run cannot be encoded.
        """
        try:
            return json.dumps([run.model_dump(mode="json") for run in self.runs], indent=2)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Unable to serialize record {self.filename}: {e}") from e

    @classmethod
    def from_json(cls, timestamp: datetime, content: str) -> HistoryRecord:
        """Create a record from the content of a history file.

        Args:
            timestamp: Timestamp embedded in the filename.
            content: JSON array of runs.

        Returns:
            HistoryRecord instance.

        Raises:
            SerializationError: If the content is not a valid array of runs.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Corrupt history record {filename_for(timestamp)}: {e}") from e

        if not isinstance(data, list):
            raise SerializationError(f"History record {filename_for(timestamp)} is not a JSON array")

        try:
            runs = [RunResult.model_validate(item) for item in data]
        except ValidationError as e:
            raise SerializationError(f"Invalid run in history record {filename_for(timestamp)}: {e}") from e

        return cls(timestamp=timestamp, runs=runs)
