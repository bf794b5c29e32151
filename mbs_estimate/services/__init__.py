"""
Services Layer for the MBS fee estimate service.

Exports fee schedule lookup, the fee estimator and estimate orchestration.
"""

from mbs_estimate.services.estimate_service import EstimateService
from mbs_estimate.services.fee_estimator import (
    determine_assistant_item_code,
    estimate_multiple,
    estimate_single,
    select_assistant_item_code,
)
from mbs_estimate.services.mbs_lookup import (
    DataSourceError,
    ItemNotFoundError,
    MbsLookupService,
    MbsServiceError,
    MbsValidationError,
    get_mbs_lookup_service,
    is_item_code,
)

__all__ = [
    # Lookup
    "MbsLookupService",
    "get_mbs_lookup_service",
    "is_item_code",
    # Estimation
    "estimate_single",
    "estimate_multiple",
    "select_assistant_item_code",
    "determine_assistant_item_code",
    "EstimateService",
    # Errors
    "MbsServiceError",
    "MbsValidationError",
    "ItemNotFoundError",
    "DataSourceError",
]
