"""
MBS Lookup Service.

Finds current fee schedule records by item number or by keywords in the
item description. Persistence and text search are delegated to PostgreSQL.
"""

import re
from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mbs_estimate.core.enums import SearchMode
from mbs_estimate.models.mbs_item import MbsItem
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord
from mbs_estimate.utils.logging import get_logger

logger = get_logger(__name__)

# One to five digits, optionally followed by a single letter (e.g. 30175, 105A)
ITEM_CODE_PATTERN = re.compile(r"^\d{1,5}[A-Z]?$", re.IGNORECASE)

DEFAULT_SEARCH_LIMIT = 50
TEXT_SEARCH_CONFIG = "english"


# =============================================================================
# Exceptions
# =============================================================================


class MbsServiceError(Exception):
    """Base exception for fee schedule lookup and estimate errors."""

    pass


class MbsValidationError(MbsServiceError):
    """Raised when user input is missing or malformed."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class ItemNotFoundError(MbsServiceError):
    """Raised when a requested item code has no current record."""

    def __init__(self, item_code: str):
        super().__init__(f"MBS Item {item_code} not found or is not current.")
        self.item_code = item_code


class DataSourceError(MbsServiceError):
    """Raised when the fee schedule store is unreachable or returns an error."""

    pass


# =============================================================================
# Query Builders
# =============================================================================


def is_item_code(query: str) -> bool:
    """Check whether a query looks like an MBS item number."""
    return bool(ITEM_CODE_PATTERN.match(query.strip()))


def detect_search_mode(query: str) -> SearchMode:
    """Pick exact item lookup or description keyword search for a query."""
    return SearchMode.ITEM_CODE if is_item_code(query) else SearchMode.KEYWORD


def build_item_code_query(item_code: str) -> Select:
    """Exact, case-insensitive item number match against current records."""
    return (
        select(MbsItem)
        .where(MbsItem.item_code == item_code.strip().upper())
        .where(MbsItem.effective_to.is_(None))
        .order_by(MbsItem.item_code)
    )


def build_keyword_query(query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> Select:
    """
    Full-text match of every word in the query against item descriptions.

    plainto_tsquery joins the words with AND, so "knee arthroscopy" only
    matches items whose description contains both.
    """
    document = func.to_tsvector(TEXT_SEARCH_CONFIG, MbsItem.description)
    terms = func.plainto_tsquery(TEXT_SEARCH_CONFIG, query.strip())
    return (
        select(MbsItem)
        .where(document.bool_op("@@")(terms))
        .where(MbsItem.effective_to.is_(None))
        .order_by(MbsItem.item_code)
        .limit(limit)
    )


# =============================================================================
# Service
# =============================================================================


class MbsLookupService:
    """
    Read-only access to current MBS items.

    Each lookup opens its own session so several lookups can run
    concurrently for one estimate.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ):
        self._session_factory = session_factory
        self.search_limit = search_limit

    async def search(self, query: str) -> list[FeeScheduleRecord]:
        """
        Search current MBS items.

        Args:
            query: Item number (exact match) or keywords (AND-combined)

        Returns:
            Matching records; an empty list when nothing matches

        Raises:
            MbsValidationError: If the query is empty
            DataSourceError: If the store fails
        """
        if query is None or not query.strip():
            raise MbsValidationError("Query parameter is required")

        query = query.strip()
        mode = detect_search_mode(query)
        if mode == SearchMode.ITEM_CODE:
            statement = build_item_code_query(query)
        else:
            statement = build_keyword_query(query, self.search_limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                rows = list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Fee schedule query failed: mode={mode.value}, query={query!r}, error={e}")
            raise DataSourceError(str(e)) from e

        logger.debug(f"Fee schedule search: mode={mode.value}, query={query!r}, results={len(rows)}")

        return [FeeScheduleRecord.model_validate(row) for row in rows]

    async def get_item(self, item_code: str) -> Optional[FeeScheduleRecord]:
        """Return the first current record for a query, or None."""
        records = await self.search(item_code)
        return records[0] if records else None


_mbs_lookup_service: Optional[MbsLookupService] = None


def get_mbs_lookup_service() -> MbsLookupService:
    """Get singleton lookup service bound to the global session maker."""
    global _mbs_lookup_service
    if _mbs_lookup_service is None:
        from mbs_estimate.api.config import settings
        from mbs_estimate.db.connection import get_session_maker

        _mbs_lookup_service = MbsLookupService(
            get_session_maker(),
            search_limit=settings.SEARCH_RESULT_LIMIT,
        )
    return _mbs_lookup_service
