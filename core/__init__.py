"""
Core module for PrintCostLedger.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- record_store: Record store interface and thread-safe in-memory store
- stats_cache: TTL cache for statistics results
"""

from .exceptions import (
    PrintCostLedgerError,
    PreconditionViolation,
    QueryRangeError,
    StoreUnavailableError,
    ConfigurationError,
)
from .record_store import RecordStore, InMemoryRecordStore
from .stats_cache import StatisticsCache

__all__ = [
    "PrintCostLedgerError",
    "PreconditionViolation",
    "QueryRangeError",
    "StoreUnavailableError",
    "ConfigurationError",
    "RecordStore",
    "InMemoryRecordStore",
    "StatisticsCache",
]
