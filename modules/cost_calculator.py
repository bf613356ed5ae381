"""
Cost calculation for print jobs.

Formula (amounts per page come from PolicyConfiguration):
    bw_cost    = bw_pages x price_bw  [- total_pages x duplex_discount if duplex]
    color_cost = color_pages x price_color
    total_cost = bw_cost + color_cost

The duplex discount is scaled by the total page count, not the bw page
count, so a color-heavy duplex job can end up with a negative bw_cost.
The amount is kept as computed.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from models.policy import PolicyConfiguration
from models.print_job import PrintJobRecord
from models.statistics import CostBreakdown

CENT = Decimal("0.01")


def quantize_amount(amount: Decimal) -> Decimal:
    """Round a currency amount to two fractional digits."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_cost(
    bw_pages: int,
    color_pages: int,
    total_pages: int,
    is_duplex: bool,
    pricing: PolicyConfiguration
) -> CostBreakdown:
    """
    Compute the cost breakdown of a job.

    Pure and deterministic. Page counts are assumed validated.

    Args:
        bw_pages: Black/white page count
        color_pages: Color page count
        total_pages: Total page count (drives the duplex discount)
        is_duplex: Whether the job prints double-sided
        pricing: Pricing constants

    Returns:
        CostBreakdown with two-decimal amounts
    """
    bw_cost = bw_pages * pricing.price_per_page_bw
    if is_duplex:
        bw_cost -= total_pages * pricing.duplex_discount_per_page

    color_cost = color_pages * pricing.price_per_page_color

    bw_cost = quantize_amount(bw_cost)
    color_cost = quantize_amount(color_cost)
    return CostBreakdown(
        bw_cost=bw_cost,
        color_cost=color_cost,
        total_cost=bw_cost + color_cost,
    )


def apply_cost(record: PrintJobRecord, pricing: PolicyConfiguration) -> PrintJobRecord:
    """Populate the cost fields of a record from its (post-policy) page counts."""
    breakdown = compute_cost(
        bw_pages=record.bw_page_count,
        color_pages=record.color_page_count,
        total_pages=record.page_count,
        is_duplex=record.is_duplex,
        pricing=pricing,
    )
    record.cost_bw = breakdown.bw_cost
    record.cost_color = breakdown.color_cost
    record.total_cost = breakdown.total_cost
    return record
