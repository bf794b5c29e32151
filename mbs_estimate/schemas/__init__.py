"""
Pydantic Schemas for the MBS fee estimate service.
"""

from mbs_estimate.schemas.estimate import (
    AssistantFeeLine,
    EstimateState,
    EstimateTotals,
    ItemEstimateLine,
    MultiEstimateRequest,
    MultiItemEstimate,
    SingleEstimateRequest,
    SingleItemEstimate,
)
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord, Money

__all__ = [
    "FeeScheduleRecord",
    "Money",
    "SingleEstimateRequest",
    "MultiEstimateRequest",
    "SingleItemEstimate",
    "ItemEstimateLine",
    "AssistantFeeLine",
    "EstimateTotals",
    "MultiItemEstimate",
    "EstimateState",
]
