"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import os
from decimal import Decimal
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord  # noqa: E402
from mbs_estimate.services.mbs_lookup import DataSourceError  # noqa: E402


def build_record(
    item_code: str = "30175",
    schedule_fee: str = "380.90",
    benefit_75: Optional[str] = None,
    benefit_85: Optional[str] = None,
    is_assist_eligible: bool = False,
    description: Optional[str] = None,
) -> FeeScheduleRecord:
    """Fee schedule record with the 75% benefit derived from the fee unless given."""
    fee = Decimal(schedule_fee)
    if benefit_75 is None:
        benefit_75 = str((fee * Decimal("0.75")).quantize(Decimal("0.01")))
    if benefit_85 is None:
        benefit_85 = str((fee * Decimal("0.85")).quantize(Decimal("0.01")))
    return FeeScheduleRecord(
        item_code=item_code,
        description=description or f"Item {item_code} description",
        schedule_fee=fee,
        benefit_75_percent=Decimal(benefit_75),
        benefit_85_percent=Decimal(benefit_85),
        is_assist_eligible=is_assist_eligible,
        is_anaes_eligible=False,
    )


class FakeLookupService:
    """
    In-memory stand-in for MbsLookupService.

    ``failures`` maps item codes to exceptions raised on lookup.
    """

    def __init__(self, records=None, failures=None):
        self.records = {r.item_code: r for r in (records or [])}
        self.failures = failures or {}
        self.calls: list[str] = []

    async def search(self, query: str) -> list[FeeScheduleRecord]:
        self.calls.append(query)
        code = query.strip().upper()
        if code in self.failures:
            raise self.failures[code]
        record = self.records.get(code)
        return [record] if record else []

    async def get_item(self, item_code: str) -> Optional[FeeScheduleRecord]:
        records = await self.search(item_code)
        return records[0] if records else None


@pytest.fixture
def record_30175():
    """Item 30175: schedule fee $380.90, 75% benefit $285.70."""
    return build_record("30175", "380.90", benefit_75="285.70", is_assist_eligible=True)


@pytest.fixture
def assistant_51300():
    return build_record(
        "51300",
        "76.15",
        benefit_75="57.15",
        description="Assistance at any operation with a fee below the threshold",
    )


@pytest.fixture
def assistant_51303():
    return build_record(
        "51303",
        "0.00",
        benefit_75="0.00",
        description="Assistance at any operation with a fee at or above the threshold",
    )


@pytest.fixture
def fake_lookup(record_30175, assistant_51300, assistant_51303):
    """Lookup service holding 30175 and both assistant items."""
    return FakeLookupService([record_30175, assistant_51300, assistant_51303])


@pytest.fixture
def failing_lookup():
    """Lookup service whose store is unreachable."""
    error = DataSourceError("connection refused")
    return FakeLookupService(failures={"30175": error})


@pytest.fixture
def mock_db_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def session_factory(mock_db_session):
    """Session factory yielding ``mock_db_session`` as an async context manager."""
    factory = MagicMock()
    context = AsyncMock()
    context.__aenter__.return_value = mock_db_session
    context.__aexit__.return_value = False
    factory.return_value = context
    return factory


def scalars_result(rows):
    """Mock execute() result whose scalars().all() returns ``rows``."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def make_lookup():
    return FakeLookupService


@pytest.fixture
def make_result():
    return scalars_result


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as an API test"
    )
