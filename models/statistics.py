"""
Statistics and savings data models.

Snapshots are frozen dataclasses: the statistics cache hands the same
instance to every reader, so nothing may mutate them after construction.

GroupedRow and SavingsAggregate are the raw shapes returned by the record
store; the statistics service turns them into the typed snapshots below.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Any, Optional, Hashable

ZERO = Decimal("0.00")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# PER-JOB
# =============================================================================

@dataclass(frozen=True)
class CostBreakdown:
    """Monetary cost of one job."""

    bw_cost: Decimal
    color_cost: Decimal
    total_cost: Decimal


@dataclass(frozen=True)
class SavingsReport:
    """
    Savings attributable to the policies applied to one job.

    Computed per submission and returned to the caller; never persisted.
    """

    color_savings: Decimal = ZERO
    duplex_savings: Decimal = ZERO
    total_savings: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colorSavings": str(self.color_savings),
            "duplexSavings": str(self.duplex_savings),
            "totalSavings": str(self.total_savings),
        }


# =============================================================================
# STORE ROWS
# =============================================================================

@dataclass(frozen=True)
class GroupedRow:
    """One group of a grouped-sum query over a window."""

    key: Hashable
    """Group key value (department/user/printer id, or None for 'all')."""

    job_count: int = 0
    total_pages: int = 0
    color_pages: int = 0
    bw_pages: int = 0
    total_cost: Decimal = ZERO


@dataclass(frozen=True)
class SavingsAggregate:
    """Result of the grouped savings query over a window."""

    color_converted_count: int = 0
    duplex_enforced_count: int = 0
    color_savings: Decimal = ZERO
    duplex_savings: Decimal = ZERO


# =============================================================================
# SNAPSHOTS
# =============================================================================

@dataclass(frozen=True)
class StatisticsSnapshot:
    """
    Aggregate of all jobs printed in [period_start, period_end).

    An empty window yields a snapshot with every count and amount at zero.
    """

    period_start: datetime
    period_end: datetime
    total_jobs: int = 0
    total_pages: int = 0
    total_color_pages: int = 0
    total_bw_pages: int = 0
    total_cost: Decimal = ZERO
    color_converted_count: int = 0
    duplex_enforced_count: int = 0
    color_savings: Decimal = ZERO
    duplex_savings: Decimal = ZERO

    @property
    def total_savings(self) -> Decimal:
        return self.color_savings + self.duplex_savings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periodStart": _iso(self.period_start),
            "periodEnd": _iso(self.period_end),
            "totalJobs": self.total_jobs,
            "totalPages": self.total_pages,
            "totalColorPages": self.total_color_pages,
            "totalBwPages": self.total_bw_pages,
            "totalCost": str(self.total_cost),
            "colorConvertedCount": self.color_converted_count,
            "duplexEnforcedCount": self.duplex_enforced_count,
            "colorSavings": str(self.color_savings),
            "duplexSavings": str(self.duplex_savings),
            "totalSavings": str(self.total_savings),
        }


@dataclass(frozen=True)
class DepartmentStatistics:
    """Per-department rollup for a window."""

    department_id: int
    total_jobs: int
    total_pages: int
    total_color_pages: int
    total_bw_pages: int
    total_cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "departmentId": self.department_id,
            "totalJobs": self.total_jobs,
            "totalPages": self.total_pages,
            "totalColorPages": self.total_color_pages,
            "totalBwPages": self.total_bw_pages,
            "totalCost": str(self.total_cost),
        }


@dataclass(frozen=True)
class UserStatistics:
    """Per-user rollup within one department."""

    user_id: int
    department_id: int
    total_jobs: int
    total_pages: int
    total_color_pages: int
    total_cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "departmentId": self.department_id,
            "totalJobs": self.total_jobs,
            "totalPages": self.total_pages,
            "totalColorPages": self.total_color_pages,
            "totalCost": str(self.total_cost),
        }


@dataclass(frozen=True)
class PrinterStatistics:
    """Per-printer rollup for a window."""

    printer_id: int
    total_jobs: int
    total_pages: int
    total_cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "printerId": self.printer_id,
            "totalJobs": self.total_jobs,
            "totalPages": self.total_pages,
            "totalCost": str(self.total_cost),
        }


@dataclass(frozen=True)
class SavingsSummary:
    """Savings by category for a window, optionally for one department."""

    period_start: datetime
    period_end: datetime
    department_id: Optional[int] = None
    color_converted_count: int = 0
    duplex_enforced_count: int = 0
    color_savings: Decimal = ZERO
    duplex_savings: Decimal = ZERO

    @property
    def total_savings(self) -> Decimal:
        return self.color_savings + self.duplex_savings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periodStart": _iso(self.period_start),
            "periodEnd": _iso(self.period_end),
            "departmentId": self.department_id,
            "colorConvertedCount": self.color_converted_count,
            "duplexEnforcedCount": self.duplex_enforced_count,
            "colorSavings": str(self.color_savings),
            "duplexSavings": str(self.duplex_savings),
            "totalSavings": str(self.total_savings),
        }
