"""
Cost-saving policy engine.

Policies run in a fixed order on a raw record, before cost calculation:

    RAW -> color-to-bw conversion -> forced duplex -> FINAL

1. Color-to-bw auto-conversion
   Fires when enabled, the job has color pages, and
   color_pages / total_pages <= threshold (pre-conversion counts).
   Color pages are moved into the bw count.

2. Forced duplex
   Fires when enabled, the job is single-sided, the paper is neither A3
   nor PHOTO (case-insensitive), and the job has at least 2 pages.

Every policy that fires is appended to record.policies_applied, so a job
that was both converted and duplexed keeps both tags.

Applying the engine twice is safe: a converted record has no color pages
left and is flagged, a duplexed record is already duplex.
"""

from __future__ import annotations

from models.policy import PolicyConfiguration
from models.print_job import PrintJobRecord, PolicyTag
from logging_config import get_logger, get_job_logger


# Module logger
logger = get_logger(__name__)

DUPLEX_EXEMPT_PAPER_SIZES = ("A3", "PHOTO")


class PolicyEngine:
    """
    Applies cost-saving policies to a job record in place.

    Stateless: one engine can serve every request thread. The
    configuration is passed on each call so hot reloads take effect on
    the next job without touching the engine.
    """

    def apply(
        self,
        record: PrintJobRecord,
        config: PolicyConfiguration
    ) -> PrintJobRecord:
        """
        Apply all policies to a record.

        Args:
            record: Validated raw record (page_count >= 1)
            config: Policy configuration snapshot

        Returns:
            The same record, mutated
        """
        job_logger = get_job_logger(record.job_id)
        job_logger.debug("Applying cost-saving policies")

        if config.auto_convert_color_to_bw and self.should_convert_color_to_bw(record, config):
            self._apply_color_to_bw_conversion(record, config, job_logger)

        if config.force_duplex and self.should_force_duplex(record):
            self._apply_duplex_enforcement(record, config, job_logger)

        job_logger.debug(
            f"Policies done: {[tag.value for tag in record.policies_applied] or 'none'}"
        )
        return record

    # =========================================================================
    # ELIGIBILITY
    # =========================================================================

    @staticmethod
    def should_convert_color_to_bw(
        record: PrintJobRecord,
        config: PolicyConfiguration
    ) -> bool:
        """
        Whether the color-to-bw policy applies.

        The ratio test is color / total <= threshold, evaluated as
        color <= threshold * total so it stays exact in Decimal.
        """
        if record.was_color_converted:
            return False

        if not record.color_page_count or record.color_page_count <= 0:
            return False

        limit = config.color_page_ratio_threshold * record.page_count
        if record.color_page_count <= limit:
            logger.info(
                f"Color ratio {record.color_page_count}/{record.page_count} "
                f"<= {config.color_page_ratio_threshold} -> convert to black/white"
            )
            return True

        return False

    @staticmethod
    def should_force_duplex(record: PrintJobRecord) -> bool:
        """Whether the forced duplex policy applies."""
        if record.is_duplex:
            return False

        paper_size = (record.paper_size or "").upper()
        if paper_size in DUPLEX_EXEMPT_PAPER_SIZES:
            return False

        if record.page_count < 2:
            return False

        return True

    # =========================================================================
    # EFFECTS
    # =========================================================================

    def _apply_color_to_bw_conversion(
        self,
        record: PrintJobRecord,
        config: PolicyConfiguration,
        job_logger
    ) -> None:
        color_pages = record.color_page_count

        record.bw_page_count += color_pages
        record.color_page_count = 0
        record.converted_color_pages += color_pages
        record.was_color_converted = True
        self._tag(record, PolicyTag.COLOR_TO_BW_AUTO_CONVERT)

        job_logger.info(
            f"Color to black/white conversion applied: {color_pages} pages "
            f"(~{color_pages * config.color_conversion_saving_per_page} saved)"
        )

    def _apply_duplex_enforcement(
        self,
        record: PrintJobRecord,
        config: PolicyConfiguration,
        job_logger
    ) -> None:
        record.is_duplex = True
        record.was_duplex_enforced = True
        self._tag(record, PolicyTag.FORCE_DUPLEX)

        sheets_saved = record.page_count // 2
        job_logger.info(
            f"Duplex enforced: {sheets_saved} sheets saved "
            f"(~{sheets_saved * config.duplex_saving_per_page} saved)"
        )

    @staticmethod
    def _tag(record: PrintJobRecord, tag: PolicyTag) -> None:
        if tag not in record.policies_applied:
            record.policies_applied.append(tag)

