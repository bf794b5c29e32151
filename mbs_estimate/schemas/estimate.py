"""
Pydantic Schemas for Fee Estimates.

Requests accepted by the estimate endpoints and the results the
estimator produces. Results are transient and never persisted.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from mbs_estimate.core.enums import EstimateStatus
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord, Money


# =============================================================================
# Requests
# =============================================================================


class SingleEstimateRequest(BaseModel):
    """Request for a single specialist service estimate."""

    item_code: str = Field(..., description="MBS item number, e.g. 30175")
    charged_fee: Decimal = Field(..., description="Fee charged by the specialist")
    assistant_gap_fee: Optional[Decimal] = Field(
        None, description="Gap charged by the surgical assistant, if any"
    )


class MultiEstimateRequest(BaseModel):
    """Request for a multi-item surgical claim estimate."""

    item_codes: list[str] = Field(
        ...,
        max_length=20,
        description="MBS item numbers billed in the same episode",
    )
    total_charged_fee: Decimal = Field(
        ..., description="Total fee charged across all items"
    )
    assistant_gap_fee: Optional[Decimal] = Field(
        None, description="Gap charged by the surgical assistant, if any"
    )


# =============================================================================
# Single-Item Results
# =============================================================================


class SingleItemEstimate(BaseModel):
    """Rebate split for one MBS item against the charged fee."""

    model_config = ConfigDict(frozen=True)

    item: FeeScheduleRecord
    charged_fee: Money
    medicare_rebate: Money
    health_fund_rebate: Money
    out_of_pocket: Money

    # Surgical assistant (display only on this path)
    assistant_item_code: Optional[str] = None
    assistant_item_description: Optional[str] = None
    assistant_error: Optional[str] = None
    assistant_gap_fee: Money = Decimal("0")

    total_out_of_pocket: Money


# =============================================================================
# Multi-Item Results
# =============================================================================


class ItemEstimateLine(BaseModel):
    """One item after the multiple operation rule has been applied."""

    model_config = ConfigDict(frozen=True)

    item_code: str
    description: str
    rank: int = Field(..., ge=0, description="Position after sorting by schedule fee")
    scale: Decimal
    schedule_fee: Money
    effective_fee: Money
    medicare_rebate: Money
    health_fund_rebate: Money
    out_of_pocket: Optional[Money] = Field(
        None, description="Only set when the claim has a single item"
    )


class AssistantFeeLine(BaseModel):
    """Surgical assistant fee claimed alongside the operation."""

    model_config = ConfigDict(frozen=True)

    item_code: str
    description: Optional[str] = None
    rule_fee: Money
    medicare_rebate: Money
    health_fund_rebate: Money
    gap_fee: Money
    charged_fee: Money
    out_of_pocket: Money


class EstimateTotals(BaseModel):
    """Grand totals across all items and the assistant line."""

    model_config = ConfigDict(frozen=True)

    charged_fee: Money
    medicare_rebate: Money
    health_fund_rebate: Money
    out_of_pocket: Money


class MultiItemEstimate(BaseModel):
    """Estimate for several items billed in one episode."""

    model_config = ConfigDict(frozen=True)

    lines: list[ItemEstimateLine]
    total_effective_fee: Money
    total_charged_fee: Money
    assistant_item_code: Optional[str] = None
    assistant: Optional[AssistantFeeLine] = None
    totals: EstimateTotals
    lookup_errors: list[str] = Field(
        default_factory=list,
        description="Items excluded from the estimate and why",
    )


# =============================================================================
# Form State
# =============================================================================


class EstimateState(BaseModel):
    """
    Single tagged state for a form.

    Replaces separate loading/error/result flags: a form is either waiting
    on a request, showing an error, or showing a payload.
    """

    status: EstimateStatus = EstimateStatus.PENDING
    payload: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def pending(cls) -> "EstimateState":
        return cls(status=EstimateStatus.PENDING)

    @classmethod
    def failed(cls, message: str) -> "EstimateState":
        return cls(status=EstimateStatus.ERROR, error=message)

    @classmethod
    def ready(cls, payload: Any) -> "EstimateState":
        return cls(status=EstimateStatus.READY, payload=payload)

    @property
    def is_ready(self) -> bool:
        return self.status == EstimateStatus.READY

    @property
    def is_pending(self) -> bool:
        return self.status == EstimateStatus.PENDING
