"""Savings attribution for policies applied to a job."""

from __future__ import annotations

from models.policy import PolicyConfiguration
from models.print_job import PrintJobRecord
from models.statistics import SavingsReport, ZERO
from modules.cost_calculator import quantize_amount


def calculate_savings(record: PrintJobRecord, pricing: PolicyConfiguration) -> SavingsReport:
    """
    Compute the savings attributable to each policy that fired on a record.

    Color savings use the exact number of pages the color policy
    reclassified (converted_color_pages), not the job's whole bw page
    count. Duplex savings count one saved sheet per two pages.

    Args:
        record: Record with policy flags already set
        pricing: Savings constants

    Returns:
        SavingsReport (all zero when no policy fired)
    """
    color_savings = ZERO
    duplex_savings = ZERO

    if record.was_color_converted:
        color_savings = quantize_amount(
            record.converted_color_pages * pricing.color_conversion_saving_per_page
        )

    if record.was_duplex_enforced:
        sheets_saved = record.page_count // 2
        duplex_savings = quantize_amount(sheets_saved * pricing.duplex_saving_per_page)

    return SavingsReport(
        color_savings=color_savings,
        duplex_savings=duplex_savings,
        total_savings=color_savings + duplex_savings,
    )
