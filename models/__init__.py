"""
Data models for PrintCostLedger.

This module contains dataclasses for:
- PrintJobRecord: One print event (mutable until stored)
- PolicyConfiguration: Policy switches and pricing (frozen)
- StatisticsSnapshot and per-group rows: Aggregates over a window (frozen)
- SavingsReport: Savings for one job (frozen)

Snapshots are frozen because the statistics cache shares one instance
between all readers.
"""

from .print_job import PrintJobRecord, PolicyTag
from .policy import PolicyConfiguration
from .statistics import (
    CostBreakdown,
    SavingsReport,
    GroupedRow,
    SavingsAggregate,
    StatisticsSnapshot,
    DepartmentStatistics,
    UserStatistics,
    PrinterStatistics,
    SavingsSummary,
)

__all__ = [
    # Job models
    "PrintJobRecord",
    "PolicyTag",
    # Configuration
    "PolicyConfiguration",
    # Statistics models
    "CostBreakdown",
    "SavingsReport",
    "GroupedRow",
    "SavingsAggregate",
    "StatisticsSnapshot",
    "DepartmentStatistics",
    "UserStatistics",
    "PrinterStatistics",
    "SavingsSummary",
]
