"""Precondition checks for raw print job records."""

from __future__ import annotations

from core.exceptions import PreconditionViolation
from models.print_job import PrintJobRecord


REQUIRED_IDENTIFIERS = ("printer_id", "user_id", "department_id")

PIPELINE_OUTPUTS = (
    "was_color_converted",
    "was_duplex_enforced",
    "converted_color_pages",
    "policies_applied",
)

COST_FIELDS = ("cost_bw", "cost_color", "total_cost")


def validate_raw_record(record: PrintJobRecord) -> None:
    """
    Reject a raw record before any policy or cost computation.

    Args:
        record: Record as received from the caller

    Raises:
        PreconditionViolation: On the first violated precondition
    """
    job_id = record.job_id or None

    if not record.job_id or not record.job_id.strip():
        raise PreconditionViolation("Job identifier is required", "job_id", record.job_id)

    for name in REQUIRED_IDENTIFIERS:
        if getattr(record, name) is None:
            raise PreconditionViolation(f"{name} is required", name, None, job_id)

    if record.page_count <= 0:
        raise PreconditionViolation(
            "Total page count must be at least 1", "page_count", record.page_count, job_id
        )

    for name in ("color_page_count", "bw_page_count"):
        value = getattr(record, name)
        if value < 0:
            raise PreconditionViolation(f"{name} must not be negative", name, value, job_id)

    if record.color_page_count + record.bw_page_count > record.page_count:
        raise PreconditionViolation(
            "Color and black/white pages exceed the total page count",
            "page_count",
            record.page_count,
            job_id,
        )

    if record.copies < 1:
        raise PreconditionViolation("Copies must be at least 1", "copies", record.copies, job_id)

    if record.is_persisted:
        raise PreconditionViolation(
            "Record has already been stored", "id", record.id, job_id
        )

    # Policy outcomes and costs are produced by the pipeline, never supplied
    for name in PIPELINE_OUTPUTS:
        if getattr(record, name):
            raise PreconditionViolation(
                f"{name} is set by the pipeline and must not be submitted",
                name,
                getattr(record, name),
                job_id,
            )
    for name in COST_FIELDS:
        if getattr(record, name) is not None:
            raise PreconditionViolation(
                f"{name} is set by the pipeline and must not be submitted",
                name,
                getattr(record, name),
                job_id,
            )
