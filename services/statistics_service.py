"""
Statistics aggregation over the print job ledger.

Every query delegates the range filter and the summation to the record
store (one grouped-sum query, plus one grouped-savings query where savings
are reported) and only shapes the rows into typed snapshots here.

Caching:
    Each result is cached under (query, period_start, period_end, scope).
    A hit returns the exact same snapshot object without touching the
    store. Entries expire after the cache TTL; recording new jobs does not
    refresh them unless write-through invalidation is enabled on the job
    service.

Failure semantics:
    - period_end < period_start raises QueryRangeError
    - an empty window yields all-zero results, never an error
    - a store failure propagates unchanged and nothing is cached

Usage:
    stats = StatisticsService(store, StatisticsCache(ttl_seconds=60), policy)
    snapshot = stats.overall(start, end)
    for dept in stats.by_department(start, end):
        ...
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Optional, Tuple, TypeVar

from core.exceptions import QueryRangeError, StoreUnavailableError
from core.record_store import RecordStore
from core.stats_cache import StatisticsCache, make_key
from models.policy import PolicyConfiguration
from modules.cost_calculator import quantize_amount
from models.statistics import (
    DepartmentStatistics,
    GroupedRow,
    PrinterStatistics,
    SavingsSummary,
    StatisticsSnapshot,
    UserStatistics,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

T = TypeVar("T")


class StatisticsService:
    """
    Produces cached rollups of print activity for a time window.

    Safe to call from many request threads at once. The cache locks
    internally; the configuration snapshot and its generation are swapped
    under a separate lock.
    """

    def __init__(
        self,
        store: RecordStore,
        cache: StatisticsCache,
        config: PolicyConfiguration
    ):
        """
        Initialize the service.

        Args:
            store: Record store to query
            cache: Statistics cache
            config: Pricing used for savings aggregates
        """
        self._store = store
        self._cache = cache
        self._config = config
        # Bumped on every reload; results computed under an older one are not cached
        self._generation = 0
        self._config_lock = threading.Lock()

    @property
    def cache(self) -> StatisticsCache:
        return self._cache

    @property
    def configuration(self) -> PolicyConfiguration:
        return self._config

    def update_configuration(self, config: PolicyConfiguration) -> None:
        """
        Swap the pricing used for savings and drop cached results.

        Computations already running keep the snapshot they started with,
        but their results are not cached.

        Args:
            config: New configuration snapshot
        """
        with self._config_lock:
            self._config = config
            self._generation += 1
            self._cache.clear()
        logger.info("Statistics configuration updated, cache cleared")

    # =========================================================================
    # QUERIES
    # =========================================================================

    def overall(self, period_start: datetime, period_end: datetime) -> StatisticsSnapshot:
        """
        Totals, costs and savings for all jobs in [period_start, period_end).

        Raises:
            QueryRangeError: If period_end is before period_start
            StoreUnavailableError: If the record store fails
        """
        return self._cached(
            "overall", period_start, period_end, None,
            lambda config: self._compute_overall(period_start, period_end, config),
        )

    def by_department(
        self,
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[DepartmentStatistics, ...]:
        """Per-department rollups, ordered by department id."""
        return self._cached(
            "department", period_start, period_end, None,
            lambda config: self._compute_by_department(period_start, period_end),
        )

    def by_user(
        self,
        department_id: int,
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[UserStatistics, ...]:
        """Per-user rollups within one department, highest total cost first."""
        return self._cached(
            "user", period_start, period_end, department_id,
            lambda config: self._compute_by_user(department_id, period_start, period_end),
        )

    def by_printer(
        self,
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[PrinterStatistics, ...]:
        """Per-printer rollups, most jobs first."""
        return self._cached(
            "printer", period_start, period_end, None,
            lambda config: self._compute_by_printer(period_start, period_end),
        )

    def cost_analysis(
        self,
        period_start: datetime,
        period_end: datetime,
        department_id: Optional[int] = None
    ) -> SavingsSummary:
        """Savings by category, for all departments or one."""
        return self._cached(
            "savings", period_start, period_end, department_id,
            lambda config: self._compute_savings(period_start, period_end, department_id, config),
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _cached(
        self,
        name: str,
        period_start: datetime,
        period_end: datetime,
        scope,
        compute: Callable[[PolicyConfiguration], T]
    ) -> T:
        if period_end < period_start:
            raise QueryRangeError(period_start, period_end)

        key = make_key(name, period_start, period_end, scope)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        with self._config_lock:
            config = self._config
            generation = self._generation

        logger.info(f"Computing {name} statistics: {period_start} ~ {period_end}")
        try:
            result = compute(config)
        except StoreUnavailableError as e:
            logger.error(f"{name} statistics failed: {e}")
            raise

        with self._config_lock:
            if generation == self._generation:
                self._cache.put(key, result)
            else:
                logger.debug(f"Configuration reloaded during {name} statistics, result not cached")
        return result

    def _compute_overall(
        self,
        period_start: datetime,
        period_end: datetime,
        config: PolicyConfiguration
    ) -> StatisticsSnapshot:
        rows = self._store.grouped_sum(None, period_start, period_end)
        savings = self._store.grouped_savings(
            period_start,
            period_end,
            config.color_conversion_saving_per_page,
            config.duplex_saving_per_page,
        )

        # An empty window has no row at all
        row = rows[0] if rows else GroupedRow(key=None)
        return StatisticsSnapshot(
            period_start=period_start,
            period_end=period_end,
            total_jobs=row.job_count,
            total_pages=row.total_pages,
            total_color_pages=row.color_pages,
            total_bw_pages=row.bw_pages,
            total_cost=row.total_cost,
            color_converted_count=savings.color_converted_count,
            duplex_enforced_count=savings.duplex_enforced_count,
            color_savings=quantize_amount(savings.color_savings),
            duplex_savings=quantize_amount(savings.duplex_savings),
        )

    def _compute_by_department(
        self,
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[DepartmentStatistics, ...]:
        rows = self._store.grouped_sum("department_id", period_start, period_end)
        stats = [
            DepartmentStatistics(
                department_id=row.key,
                total_jobs=row.job_count,
                total_pages=row.total_pages,
                total_color_pages=row.color_pages,
                total_bw_pages=row.bw_pages,
                total_cost=row.total_cost,
            )
            for row in rows
        ]
        stats.sort(key=lambda s: s.department_id)
        return tuple(stats)

    def _compute_by_user(
        self,
        department_id: int,
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[UserStatistics, ...]:
        rows = self._store.grouped_sum(
            "user_id", period_start, period_end, department_id=department_id
        )
        stats = [
            UserStatistics(
                user_id=row.key,
                department_id=department_id,
                total_jobs=row.job_count,
                total_pages=row.total_pages,
                total_color_pages=row.color_pages,
                total_cost=row.total_cost,
            )
            for row in rows
        ]
        stats.sort(key=lambda s: (-s.total_cost, s.user_id))
        return tuple(stats)

    def _compute_by_printer(
        self,
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[PrinterStatistics, ...]:
        rows = self._store.grouped_sum("printer_id", period_start, period_end)
        stats = [
            PrinterStatistics(
                printer_id=row.key,
                total_jobs=row.job_count,
                total_pages=row.total_pages,
                total_cost=row.total_cost,
            )
            for row in rows
        ]
        stats.sort(key=lambda s: (-s.total_jobs, s.printer_id))
        return tuple(stats)

    def _compute_savings(
        self,
        period_start: datetime,
        period_end: datetime,
        department_id: Optional[int],
        config: PolicyConfiguration
    ) -> SavingsSummary:
        savings = self._store.grouped_savings(
            period_start,
            period_end,
            config.color_conversion_saving_per_page,
            config.duplex_saving_per_page,
            department_id=department_id,
        )
        return SavingsSummary(
            period_start=period_start,
            period_end=period_end,
            department_id=department_id,
            color_converted_count=savings.color_converted_count,
            duplex_enforced_count=savings.duplex_enforced_count,
            color_savings=quantize_amount(savings.color_savings),
            duplex_savings=quantize_amount(savings.duplex_savings),
        )
