"""
pytest configuration and shared fixtures for xorca-cloudevent tests.
"""

import datetime as dt
from typing import Any, Dict

import pytest

from tests.fixtures import FakeClock, RecordingTracer, SequentialIds, create_test_clock


# Sample records for contract and construction tests

@pytest.fixture
def order_created_record() -> Dict[str, Any]:
    """Minimal producer record: only the required fields."""
    return {
        "type": "order.created",
        "source": "svc/orders",
        "subject": "order-42",
        "data": {"amount": 10},
    }


@pytest.fixture
def full_record(order_created_record) -> Dict[str, Any]:
    """Record carrying every core and extension field."""
    record = order_created_record.copy()
    record.update({
        "id": "7d3c9f1e-2b4a-4c8e-9f10-5a6b7c8d9e0f",
        "specversion": "1.0",
        "datacontenttype": "application/json",
        "time": dt.datetime(2025, 1, 1, 12, 30, tzinfo=dt.timezone.utc).isoformat(),
        "to": "svc/billing",
        "redirectto": "svc/audit log",
        "traceparent": "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01",
        "tracestate": "xorca=t61rcWkgMzE",
        "elapsedtime": "125",
        "executionunits": "3.5",
    })
    return record


@pytest.fixture
def invalid_record_missing_subject(order_created_record) -> Dict[str, Any]:
    record = order_created_record.copy()
    del record["subject"]
    return record


# Port fixtures

@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock pinned to 2025-01-01T00:00:00Z."""
    return create_test_clock()


@pytest.fixture
def sequential_ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def recording_tracer() -> RecordingTracer:
    return RecordingTracer()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "contract: mark test as a contract validation test"
    )
