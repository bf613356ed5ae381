"""
Unit tests for the cost-saving policy engine.
"""

from decimal import Decimal

import pytest

from models.policy import PolicyConfiguration
from models.print_job import PolicyTag
from modules.policy_engine import PolicyEngine


@pytest.fixture
def engine():
    return PolicyEngine()


@pytest.fixture
def color_only():
    """Only the color policy enabled."""
    return PolicyConfiguration(force_duplex=False)


@pytest.fixture
def duplex_only():
    """Only the duplex policy enabled."""
    return PolicyConfiguration(auto_convert_color_to_bw=False)


class TestColorToBwConversion:
    """Test the color-to-black/white policy."""

    def test_ratio_at_threshold_converts(self, engine, color_only, make_record):
        """10 pages, 1 color, threshold 0.1 -> converted."""
        record = make_record(page_count=10, color_page_count=1, bw_page_count=9)

        engine.apply(record, color_only)

        assert record.color_page_count == 0
        assert record.bw_page_count == 10
        assert record.was_color_converted is True
        assert record.converted_color_pages == 1
        assert record.policies_applied == [PolicyTag.COLOR_TO_BW_AUTO_CONVERT]
        assert record.policy_applied == "COLOR_TO_BW_AUTO_CONVERT"

    def test_ratio_above_threshold_unchanged(self, engine, color_only, make_record):
        record = make_record(page_count=10, color_page_count=2, bw_page_count=8)

        engine.apply(record, color_only)

        assert record.color_page_count == 2
        assert record.bw_page_count == 8
        assert record.was_color_converted is False
        assert record.policies_applied == []
        assert record.policy_applied == ""

    def test_no_color_pages_is_skipped(self, engine, color_only, make_record):
        record = make_record()

        engine.apply(record, color_only)

        assert record.was_color_converted is False

    def test_disabled_policy_is_skipped(self, engine, no_policies, make_record):
        record = make_record(page_count=100, color_page_count=1, bw_page_count=99)

        engine.apply(record, no_policies)

        assert record.color_page_count == 1
        assert record.was_color_converted is False

    def test_threshold_comes_from_configuration(self, engine, make_record):
        config = PolicyConfiguration(force_duplex=False, color_page_ratio_threshold=Decimal("0.5"))
        record = make_record(page_count=4, color_page_count=2, bw_page_count=2)

        engine.apply(record, config)

        assert record.bw_page_count == 4
        assert record.was_color_converted is True

    def test_unclassified_pages_are_kept_out_of_bw(self, engine, color_only, make_record):
        """Only the color pages move; the split may sum to less than the total."""
        record = make_record(page_count=20, color_page_count=1, bw_page_count=15)

        engine.apply(record, color_only)

        assert record.bw_page_count == 16
        assert record.color_page_count + record.bw_page_count <= record.page_count

    @pytest.mark.parametrize("total,color", [
        (10, 1), (20, 2), (100, 10), (100, 3), (50, 5), (1000, 1),
    ])
    def test_converts_whenever_ratio_within_threshold(self, engine, color_only, make_record, total, color):
        record = make_record(page_count=total, color_page_count=color, bw_page_count=total - color)

        engine.apply(record, color_only)

        assert record.color_page_count == 0
        assert record.bw_page_count == total

    @pytest.mark.parametrize("total,color", [
        (10, 2), (9, 1), (3, 1), (1, 1), (100, 11),
    ])
    def test_leaves_record_when_ratio_above_threshold(self, engine, color_only, make_record, total, color):
        record = make_record(page_count=total, color_page_count=color, bw_page_count=total - color)

        engine.apply(record, color_only)

        assert record.color_page_count == color
        assert record.bw_page_count == total - color


class TestForcedDuplex:
    """Test the forced duplex policy."""

    def test_single_sided_a4_goes_duplex(self, engine, duplex_only, make_record):
        record = make_record(page_count=3, bw_page_count=3, is_duplex=False, paper_size="A4")

        engine.apply(record, duplex_only)

        assert record.is_duplex is True
        assert record.was_duplex_enforced is True
        assert record.policies_applied == [PolicyTag.FORCE_DUPLEX]

    @pytest.mark.parametrize("paper_size", ["A3", "a3", "PHOTO", "Photo"])
    def test_exempt_paper_sizes(self, engine, duplex_only, make_record, paper_size):
        record = make_record(paper_size=paper_size)

        engine.apply(record, duplex_only)

        assert record.is_duplex is False
        assert record.was_duplex_enforced is False

    def test_single_page_job_is_skipped(self, engine, duplex_only, make_record):
        record = make_record(page_count=1, bw_page_count=1)

        engine.apply(record, duplex_only)

        assert record.is_duplex is False

    def test_already_duplex_is_not_marked_enforced(self, engine, duplex_only, make_record):
        record = make_record(is_duplex=True)

        engine.apply(record, duplex_only)

        assert record.is_duplex is True
        assert record.was_duplex_enforced is False
        assert record.policies_applied == []


class TestPolicyOrdering:
    """Test both policies together."""

    def test_both_policies_are_recorded(self, engine, policy, make_record):
        record = make_record(page_count=10, color_page_count=1, bw_page_count=9)

        engine.apply(record, policy)

        assert record.was_color_converted is True
        assert record.was_duplex_enforced is True
        assert record.policies_applied == [
            PolicyTag.COLOR_TO_BW_AUTO_CONVERT,
            PolicyTag.FORCE_DUPLEX,
        ]
        # Single-field view still reports the last policy
        assert record.policy_applied == "FORCE_DUPLEX"

    def test_applying_twice_does_not_double_convert(self, engine, policy, make_record):
        record = make_record(page_count=10, color_page_count=1, bw_page_count=9)

        engine.apply(record, policy)
        engine.apply(record, policy)

        assert record.bw_page_count == 10
        assert record.color_page_count == 0
        assert record.converted_color_pages == 1
        assert len(record.policies_applied) == 2
