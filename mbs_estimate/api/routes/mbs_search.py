"""
MBS Item Search Endpoint.

Looks up current Medicare Benefits Schedule items by item number
(e.g. 30175, 105A) or by keywords in the item description.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from mbs_estimate.api.deps import get_lookup_service
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord
from mbs_estimate.services.mbs_lookup import (
    DataSourceError,
    MbsLookupService,
    MbsValidationError,
)
from mbs_estimate.utils.errors import BadRequestError, DataSourceUnavailableError
from mbs_estimate.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["mbs-search"],
)


@router.get("/search-mbs", response_model=list[FeeScheduleRecord])
async def search_mbs(
    query: Optional[str] = Query(None, description="Item number or keywords"),
    lookup_service: MbsLookupService = Depends(get_lookup_service),
) -> list[FeeScheduleRecord]:
    """
    Search current MBS items.

    A query of one to five digits with an optional trailing letter is an
    exact item lookup; anything else is a keyword search limited to 50 rows.
    """
    try:
        return await lookup_service.search(query or "")
    except MbsValidationError as e:
        raise BadRequestError(str(e))
    except DataSourceError as e:
        logger.error(f"MBS search failed: query={query!r}, error={e}")
        raise DataSourceUnavailableError(f"Error fetching data from the fee schedule: {e}")
