"""
Services layer for PrintCostLedger.

- PrintJobService: validate -> policies -> cost -> store -> savings
- StatisticsService: cached rollups over a time window

Thread Model:
    Flask request threads call both services concurrently. Job records are
    owned by one request; the statistics cache is the only shared state.
"""

from .print_job_service import PrintJobService
from .statistics_service import StatisticsService

__all__ = [
    "PrintJobService",
    "StatisticsService",
]
