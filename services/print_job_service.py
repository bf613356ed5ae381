"""
Print job submission pipeline.

Flow (one request thread owns the record end to end, no locking needed):
    1. Validate the raw record (PreconditionViolation on bad input)
    2. Apply cost-saving policies (PolicyEngine)
    3. Compute costs on the post-policy page counts
    4. Persist through the record store
    5. Compute the savings report returned to the caller

The configuration snapshot is passed on every call, so a hot reload
takes effect on the next submission.

Usage:
    job_service = PrintJobService(store)
    stored, savings = job_service.submit_job(raw_record, policy)
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from core.exceptions import QueryRangeError, StoreUnavailableError
from core.record_store import RecordStore
from core.stats_cache import StatisticsCache
from models.policy import PolicyConfiguration
from models.print_job import PrintJobRecord
from models.statistics import SavingsReport
from modules.cost_calculator import apply_cost
from modules.policy_engine import PolicyEngine
from modules.savings_calculator import calculate_savings
from modules.validation import validate_raw_record
from logging_config import get_logger, get_job_logger


# Module logger
logger = get_logger(__name__)


class PrintJobService:
    """
    Service for recording print jobs.

    Attributes:
        store: Record store the finished records go to
    """

    def __init__(
        self,
        store: RecordStore,
        policy_engine: Optional[PolicyEngine] = None,
        stats_cache: Optional[StatisticsCache] = None,
        invalidate_on_write: bool = False
    ):
        """
        Initialize the job service.

        Args:
            store: Record store for persistence
            policy_engine: Engine to apply (a fresh PolicyEngine by default)
            stats_cache: Statistics cache to invalidate on write
            invalidate_on_write: Drop cached windows containing each new job
        """
        if invalidate_on_write and stats_cache is None:
            raise ValueError("invalidate_on_write requires a stats_cache")

        self._store = store
        self._policy_engine = policy_engine or PolicyEngine()
        self._stats_cache = stats_cache
        self._invalidate_on_write = invalidate_on_write

        logger.info(
            f"PrintJobService initialized (invalidate on write: {invalidate_on_write})"
        )

    @property
    def store(self) -> RecordStore:
        return self._store

    def submit_job(
        self,
        raw_record: PrintJobRecord,
        config: PolicyConfiguration
    ) -> Tuple[PrintJobRecord, SavingsReport]:
        """
        Run a raw job through policies, costing and persistence.

        Args:
            raw_record: Record as submitted (mutated in place by the pipeline)
            config: Policy and pricing snapshot

        Returns:
            (stored record with id, savings report)

        Raises:
            PreconditionViolation: If the raw record is malformed
            StoreUnavailableError: If the record store fails
        """
        validate_raw_record(raw_record)

        if raw_record.timestamp is None:
            raw_record.timestamp = datetime.now()

        job_logger = get_job_logger(raw_record.job_id)
        job_logger.info(
            f"Recording job '{raw_record.document_name}' "
            f"(user: {raw_record.user_id}, printer: {raw_record.printer_id})"
        )

        # =================================================================
        # STEP 1: Policies, then costs on the modified page counts
        # =================================================================
        self._policy_engine.apply(raw_record, config)
        apply_cost(raw_record, config)

        # =================================================================
        # STEP 2: Persist
        # =================================================================
        try:
            stored = self._store.insert(raw_record)
        except StoreUnavailableError as e:
            job_logger.error(f"Failed to store job: {e}")
            raise

        if self._invalidate_on_write:
            self._stats_cache.invalidate(stored.timestamp)

        # =================================================================
        # STEP 3: Savings report for the caller
        # =================================================================
        savings = calculate_savings(stored, config)

        job_logger.info(
            f"Job stored as record {stored.id}: cost {stored.total_cost}, "
            f"saved {savings.total_savings}"
        )
        return stored, savings

    def list_jobs(
        self,
        period_start: datetime,
        period_end: datetime,
        department_id: Optional[int] = None,
        user_id: Optional[int] = None,
        printer_id: Optional[int] = None
    ) -> List[PrintJobRecord]:
        """
        Jobs in [period_start, period_end), newest first.

        Only the first given filter is used, checked in the order
        department, user, printer. With no filter nothing is returned.

        Raises:
            QueryRangeError: If period_end is before period_start
            StoreUnavailableError: If the record store fails
        """
        if period_end < period_start:
            raise QueryRangeError(period_start, period_end)

        if department_id is not None:
            return self._store.query_range(period_start, period_end, department_id=department_id)
        if user_id is not None:
            return self._store.query_range(period_start, period_end, user_id=user_id)
        if printer_id is not None:
            return self._store.query_range(period_start, period_end, printer_id=printer_id)
        return []
