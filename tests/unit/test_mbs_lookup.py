"""
Unit tests for the MBS lookup service.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from mbs_estimate.core.enums import SearchMode
from mbs_estimate.models.mbs_item import MbsItem
from mbs_estimate.services.mbs_lookup import (
    DataSourceError,
    ItemNotFoundError,
    MbsLookupService,
    MbsValidationError,
    build_item_code_query,
    build_keyword_query,
    detect_search_mode,
    is_item_code,
)


def _compile(statement) -> str:
    return str(
        statement.compile(
            dialect=postgresql.dialect(),
            compile_kwargs={"literal_binds": True},
        )
    )


def _mbs_item(item_code: str, schedule_fee: str, benefit_75: str, **kwargs) -> MbsItem:
    return MbsItem(
        mbs_item_id=uuid4(),
        item_code=item_code,
        description=kwargs.get("description", f"Item {item_code}"),
        schedule_fee=Decimal(schedule_fee),
        benefit_75_percent=Decimal(benefit_75),
        benefit_85_percent=Decimal(kwargs.get("benefit_85", "0.00")),
        is_assist_eligible=kwargs.get("is_assist_eligible", False),
        is_anaes_eligible=kwargs.get("is_anaes_eligible", False),
        effective_from=date(2025, 7, 1),
        effective_to=None,
    )


class TestSearchMode:
    """Tests for telling item numbers from keywords."""

    @pytest.mark.parametrize("query", ["30175", "105A", "105a", "1", "12345B"])
    def test_item_codes(self, query):
        assert is_item_code(query)
        assert detect_search_mode(query) == SearchMode.ITEM_CODE

    @pytest.mark.parametrize("query", ["knee surgery", "123456", "AB12", "30175 30180", "105AB"])
    def test_keywords(self, query):
        assert not is_item_code(query)
        assert detect_search_mode(query) == SearchMode.KEYWORD


class TestQueryBuilders:
    """Tests for the generated SQL."""

    def test_item_code_query_is_exact_and_current(self):
        sql = _compile(build_item_code_query("105a"))

        assert "mbs_items.item_code = '105A'" in sql
        assert "mbs_items.effective_to IS NULL" in sql

    def test_keyword_query_uses_full_text_search(self):
        sql = _compile(build_keyword_query("knee arthroscopy", limit=50))

        assert "to_tsvector('english', mbs_items.description)" in sql
        assert "plainto_tsquery('english', 'knee arthroscopy')" in sql
        assert "@@" in sql
        assert "mbs_items.effective_to IS NULL" in sql
        assert "LIMIT 50" in sql


class TestMbsLookupService:
    """Tests for MbsLookupService.search and get_item."""

    @pytest.mark.asyncio
    async def test_blank_query_rejected(self, session_factory):
        service = MbsLookupService(session_factory)

        with pytest.raises(MbsValidationError, match="Query parameter is required"):
            await service.search("   ")

        session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_rows_mapped_to_records(self, session_factory, mock_db_session, make_result):
        row = _mbs_item("30175", "380.90", "285.70", is_assist_eligible=True)
        mock_db_session.execute.return_value = make_result([row])
        service = MbsLookupService(session_factory)

        records = await service.search("30175")

        assert len(records) == 1
        assert records[0].item_code == "30175"
        assert records[0].schedule_fee == Decimal("380.90")
        assert records[0].is_assist_eligible is True

    @pytest.mark.asyncio
    async def test_no_match_returns_empty_list(self, session_factory, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])
        service = MbsLookupService(session_factory)

        assert await service.search("knee") == []

    @pytest.mark.asyncio
    async def test_store_failure_raises_data_source_error(self, session_factory, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        service = MbsLookupService(session_factory)

        with pytest.raises(DataSourceError):
            await service.search("30175")

    @pytest.mark.asyncio
    async def test_get_item_returns_first_record(self, session_factory, mock_db_session, make_result):
        rows = [
            _mbs_item("105", "100.00", "75.00"),
            _mbs_item("105", "110.00", "82.50"),
        ]
        mock_db_session.execute.return_value = make_result(rows)
        service = MbsLookupService(session_factory)

        record = await service.get_item("105")

        assert record.schedule_fee == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_get_item_missing(self, session_factory, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])
        service = MbsLookupService(session_factory)

        assert await service.get_item("99999") is None


class TestExceptions:
    """Tests for service exception messages."""

    def test_item_not_found_message(self):
        error = ItemNotFoundError("30175")
        assert str(error) == "MBS Item 30175 not found or is not current."
        assert error.item_code == "30175"

    def test_validation_error_collects_messages(self):
        error = MbsValidationError("a; b", errors=["a", "b"])
        assert error.errors == ["a", "b"]
        assert MbsValidationError("only").errors == ["only"]


class TestMbsItemModel:
    """Tests for the ORM model."""

    def test_current_row(self):
        assert _mbs_item("30175", "380.90", "285.70").is_current

    def test_closed_row_is_not_current(self):
        row = _mbs_item("30175", "380.90", "285.70")
        row.effective_to = date(2025, 6, 30)
        assert not row.is_current
