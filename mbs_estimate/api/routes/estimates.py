"""
Fee Estimate Endpoints.

Provides:
- Single specialist service estimate with surgical assistant item
- Multi-item surgical claim estimate under the multiple operation rule
"""

from fastapi import APIRouter, Depends

from mbs_estimate.api.deps import get_estimator
from mbs_estimate.schemas.estimate import (
    MultiEstimateRequest,
    MultiItemEstimate,
    SingleEstimateRequest,
    SingleItemEstimate,
)
from mbs_estimate.services.estimate_service import EstimateService
from mbs_estimate.services.mbs_lookup import (
    DataSourceError,
    ItemNotFoundError,
    MbsValidationError,
)
from mbs_estimate.utils.errors import (
    BadRequestError,
    DataSourceUnavailableError,
    NotFoundError,
)
from mbs_estimate.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/estimates",
    tags=["estimates"],
)


@router.post("/single", response_model=SingleItemEstimate)
async def create_single_estimate(
    request: SingleEstimateRequest,
    estimator: EstimateService = Depends(get_estimator),
) -> SingleItemEstimate:
    """Estimate the out-of-pocket cost of one specialist service."""
    try:
        return await estimator.estimate_single(
            request.item_code,
            request.charged_fee,
            assistant_gap_fee=request.assistant_gap_fee,
        )
    except MbsValidationError as e:
        logger.warning(f"Single estimate rejected: {e}")
        raise BadRequestError(str(e))
    except ItemNotFoundError as e:
        logger.warning(f"Single estimate item not found: item={e.item_code}")
        raise NotFoundError(str(e))
    except DataSourceError as e:
        logger.error(f"Single estimate failed: item={request.item_code}, error={e}")
        raise DataSourceUnavailableError(f"Error fetching data from the fee schedule: {e}")


@router.post("/multiple", response_model=MultiItemEstimate)
async def create_multiple_estimate(
    request: MultiEstimateRequest,
    estimator: EstimateService = Depends(get_estimator),
) -> MultiItemEstimate:
    """
    Estimate a claim with several items billed in one episode.

    Items that cannot be found are excluded and listed in ``lookup_errors``;
    the request fails with 400 only when none of them can be found.
    """
    try:
        return await estimator.estimate_multiple(
            request.item_codes,
            request.total_charged_fee,
            assistant_gap_fee=request.assistant_gap_fee,
        )
    except MbsValidationError as e:
        logger.warning(f"Multi-item estimate rejected: {e}")
        raise BadRequestError(str(e))
