"""Shared fixtures for PrintCostLedger tests."""

from datetime import datetime

import pytest

from core.exceptions import StoreUnavailableError
from core.record_store import InMemoryRecordStore
from core.stats_cache import StatisticsCache
from models.policy import PolicyConfiguration
from models.print_job import PrintJobRecord


T0 = datetime(2026, 3, 10, 9, 0, 0)
MARCH = (datetime(2026, 3, 1), datetime(2026, 4, 1))


class FakeClock:
    """Monotonic clock the tests can move forward."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FlakyStore(InMemoryRecordStore):
    """In-memory store whose queries fail while `failing` is set."""

    def __init__(self):
        super().__init__()
        self.failing = False

    def _check(self, operation):
        if self.failing:
            raise StoreUnavailableError(operation, "query timed out", timeout_seconds=5.0)

    def insert(self, record):
        self._check("insert")
        return super().insert(record)

    def grouped_sum(self, *args, **kwargs):
        self._check("grouped_sum")
        return super().grouped_sum(*args, **kwargs)

    def grouped_savings(self, *args, **kwargs):
        self._check("grouped_savings")
        return super().grouped_savings(*args, **kwargs)


def build_record(**overrides) -> PrintJobRecord:
    """A valid raw 10-page black/white A4 job; override any field."""
    values = {
        "job_id": "JOB-0001",
        "printer_id": 1,
        "user_id": 10,
        "department_id": 100,
        "page_count": 10,
        "color_page_count": 0,
        "bw_page_count": 10,
        "timestamp": T0,
        "document_name": "quarterly-report.pdf",
    }
    values.update(overrides)
    return PrintJobRecord(**values)


@pytest.fixture
def make_record():
    """Factory for raw job records."""
    return build_record


@pytest.fixture
def policy():
    """Default policy configuration (both policies on, 10% threshold)."""
    return PolicyConfiguration()


@pytest.fixture
def no_policies():
    """Configuration with both policies switched off."""
    return PolicyConfiguration(auto_convert_color_to_bw=False, force_duplex=False)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def flaky_store():
    return FlakyStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return StatisticsCache(ttl_seconds=60.0, clock=clock)
