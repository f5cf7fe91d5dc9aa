"""Storage backends for benchmark history.

This module provides storage protocols and implementations for
persisting history records.

Example:
    >>> from wrkbench.benchmarks.storage import JSONHistoryStore
    >>> store = JSONHistoryStore(".wrk-api-bench")
    >>> store.persist(now, runs)
"""

from __future__ import annotations

from wrkbench.benchmarks.storage.base import StorageProtocol
from wrkbench.benchmarks.storage.json_store import JSONHistoryStore

__all__ = [
    "JSONHistoryStore",
    "StorageProtocol",
]
