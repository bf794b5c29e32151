"""
FastAPI Dependencies
Dependency injection for the fee schedule services
Source: https://fastapi.tiangolo.com/tutorial/dependencies/
"""

from fastapi import Depends

from mbs_estimate.services.estimate_service import EstimateService
from mbs_estimate.services.mbs_lookup import MbsLookupService, get_mbs_lookup_service


def get_lookup_service() -> MbsLookupService:
    """Fee schedule lookup bound to the application's session maker."""
    return get_mbs_lookup_service()


def get_estimator(
    lookup_service: MbsLookupService = Depends(get_lookup_service),
) -> EstimateService:
    """Estimate service sharing the request's lookup service."""
    return EstimateService(lookup_service)
