"""
Record store for print job ledger entries.

RecordStore is the persistence boundary: the pipeline inserts finished
records through it and the statistics service asks it for range-filtered
grouped sums. All range queries are half-open [start, end).

InMemoryRecordStore is the bundled implementation. It keeps records in a
list guarded by a threading.Lock and hands out copies, so a stored record
can never be mutated by a caller - it is a ledger entry, not a live object.

A backend that can fail (network, timeout) must raise StoreUnavailableError;
callers propagate it unchanged and never retry.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from models.print_job import PrintJobRecord
from models.statistics import GroupedRow, SavingsAggregate, ZERO
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

# Columns a grouped query can group by (None = one row for the whole window)
GROUP_KEYS = ("department_id", "user_id", "printer_id")


class RecordStore(ABC):
    """Persistence interface consumed by the services."""

    @abstractmethod
    def insert(self, record: PrintJobRecord) -> PrintJobRecord:
        """Persist a finished record and return the stored copy with its id."""

    @abstractmethod
    def query_range(
        self,
        start: datetime,
        end: datetime,
        department_id: Optional[int] = None,
        user_id: Optional[int] = None,
        printer_id: Optional[int] = None
    ) -> List[PrintJobRecord]:
        """Records in [start, end) matching every given filter, newest first."""

    @abstractmethod
    def grouped_sum(
        self,
        group_key: Optional[str],
        start: datetime,
        end: datetime,
        department_id: Optional[int] = None
    ) -> List[GroupedRow]:
        """
        Count and page/cost sums per group over [start, end).

        Groups with no records are absent. With group_key=None the result
        is a single row keyed None, or empty if the window has no records.
        """

    @abstractmethod
    def grouped_savings(
        self,
        start: datetime,
        end: datetime,
        color_saving_per_page: Decimal,
        duplex_saving_per_page: Decimal,
        department_id: Optional[int] = None
    ) -> SavingsAggregate:
        """Counts and savings sums of policy-modified records over [start, end)."""


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe in-process record store.

    Thread Safety:
        - Uses threading.Lock for all operations
        - Records are deep-copied on the way in and on the way out
    """

    def __init__(self):
        self._records: List[PrintJobRecord] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def insert(self, record: PrintJobRecord) -> PrintJobRecord:
        stored = deepcopy(record)
        with self._lock:
            stored.id = self._next_id
            self._next_id += 1
            self._records.append(stored)
        logger.debug(f"Stored job {stored.job_id} as record {stored.id}")
        return deepcopy(stored)

    def query_range(
        self,
        start: datetime,
        end: datetime,
        department_id: Optional[int] = None,
        user_id: Optional[int] = None,
        printer_id: Optional[int] = None
    ) -> List[PrintJobRecord]:
        filters = {
            "department_id": department_id,
            "user_id": user_id,
            "printer_id": printer_id,
        }
        with self._lock:
            matches = [
                deepcopy(r) for r in self._in_window(start, end)
                if all(v is None or getattr(r, k) == v for k, v in filters.items())
            ]
        matches.sort(key=lambda r: (r.timestamp, r.id), reverse=True)
        return matches

    def grouped_sum(
        self,
        group_key: Optional[str],
        start: datetime,
        end: datetime,
        department_id: Optional[int] = None
    ) -> List[GroupedRow]:
        if group_key is not None and group_key not in GROUP_KEYS:
            raise ValueError(f"Cannot group by {group_key!r}")

        sums: Dict[Optional[int], List] = {}
        with self._lock:
            for r in self._in_window(start, end):
                if department_id is not None and r.department_id != department_id:
                    continue
                key = getattr(r, group_key) if group_key else None
                acc = sums.setdefault(key, [0, 0, 0, 0, ZERO])
                acc[0] += 1
                acc[1] += r.page_count
                acc[2] += r.color_page_count
                acc[3] += r.bw_page_count
                acc[4] += r.total_cost if r.total_cost is not None else ZERO

        return [
            GroupedRow(
                key=key,
                job_count=jobs,
                total_pages=pages,
                color_pages=color,
                bw_pages=bw,
                total_cost=cost,
            )
            for key, (jobs, pages, color, bw, cost) in sums.items()
        ]

    def grouped_savings(
        self,
        start: datetime,
        end: datetime,
        color_saving_per_page: Decimal,
        duplex_saving_per_page: Decimal,
        department_id: Optional[int] = None
    ) -> SavingsAggregate:
        converted = 0
        enforced = 0
        color_savings = ZERO
        duplex_savings = ZERO

        with self._lock:
            for r in self._in_window(start, end):
                if department_id is not None and r.department_id != department_id:
                    continue
                if r.was_color_converted:
                    converted += 1
                    color_savings += r.converted_color_pages * color_saving_per_page
                if r.was_duplex_enforced:
                    enforced += 1
                    duplex_savings += (r.page_count // 2) * duplex_saving_per_page

        return SavingsAggregate(
            color_converted_count=converted,
            duplex_enforced_count=enforced,
            color_savings=color_savings,
            duplex_savings=duplex_savings,
        )

    def _in_window(self, start: datetime, end: datetime):
        # Caller holds the lock
        return (r for r in self._records if start <= r.timestamp < end)
