"""
Fee Estimation Engine.

Estimates Medicare and health fund rebates and the patient's out-of-pocket
cost for MBS items:
- Single item: Medicare pays the 75% benefit, the fund pays the rest of
  the schedule fee
- Multiple items: the multiple operation rule scales the 2nd and later
  items, then the surgical assistant item is determined from the total

Source: https://www.mbsonline.gov.au/internet/mbsonline/publishing.nsf/Content/Factsheet-MultipleOperationRule

All functions here are pure; lookups happen in the estimate service.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Sequence

from mbs_estimate.core.enums import AssistantItemCode
from mbs_estimate.schemas.estimate import (
    AssistantFeeLine,
    EstimateTotals,
    ItemEstimateLine,
    MultiItemEstimate,
    SingleItemEstimate,
)
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord
from mbs_estimate.services.mbs_lookup import MbsValidationError
from mbs_estimate.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Fees below this are assisted under 51300, otherwise 51303
ASSISTANT_FEE_THRESHOLD = Decimal("636.05")
ASSISTANT_FEE_RATE = Decimal("0.20")

MEDICARE_RATE = Decimal("0.75")

# Multiple operation rule: 100% / 50% / 25% for the rest
MULTIPLE_OPERATION_SCALES = (Decimal("1.0"), Decimal("0.5"))
MULTIPLE_OPERATION_TAIL_SCALE = Decimal("0.25")


def _money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_gap_fee(gap_fee) -> Decimal:  # type: ignore[no-untyped-def]
    """
    Coerce an optional assistant gap fee to a non-negative amount.

    Missing, non-numeric or negative values count as no gap.
    """
    if gap_fee is None:
        return ZERO
    try:
        amount = Decimal(str(gap_fee))
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return _money(amount)


def validate_charged_fee(charged_fee) -> Decimal:  # type: ignore[no-untyped-def]
    """Parse a charged fee, rejecting missing, non-numeric and negative values."""
    message = "Please enter a valid positive number for the charged fee."
    try:
        amount = Decimal(str(charged_fee))
    except (InvalidOperation, ValueError) as e:
        raise MbsValidationError(message) from e
    if not amount.is_finite() or amount < 0:
        raise MbsValidationError(message)
    return amount


def select_assistant_item_code(fee: Decimal) -> str:
    """Assistant item for an operation (or set of operations) with this fee."""
    if fee < ASSISTANT_FEE_THRESHOLD:
        return AssistantItemCode.LOW_FEE.value
    return AssistantItemCode.HIGH_FEE.value


def split_rebates(record: FeeScheduleRecord) -> tuple[Decimal, Decimal]:
    """Medicare pays the 75% benefit; the fund covers up to the schedule fee."""
    medicare = record.benefit_75_percent
    return medicare, record.schedule_fee - medicare


# =============================================================================
# Single Item
# =============================================================================


def estimate_single(
    record: FeeScheduleRecord,
    charged_fee: Decimal,
    assistant_gap_fee: Optional[Decimal] = None,
) -> SingleItemEstimate:
    """
    Estimate rebates and out-of-pocket for one item.

    Out-of-pocket can be negative when the charged fee is below the schedule
    fee; it is reported as-is.

    The assistant description is not looked up here; the estimate service
    fills it in when an assistant item code is returned.
    """
    charged_fee = validate_charged_fee(charged_fee)

    medicare_rebate, health_fund_rebate = split_rebates(record)
    out_of_pocket = charged_fee - medicare_rebate - health_fund_rebate

    assistant_item_code = None
    gap_fee = ZERO
    if record.is_assist_eligible:
        assistant_item_code = select_assistant_item_code(record.schedule_fee)
        gap_fee = normalize_gap_fee(assistant_gap_fee)

    logger.info(
        f"Single-item estimate: item={record.item_code}, "
        f"assistant={assistant_item_code}, out_of_pocket={out_of_pocket}"
    )

    return SingleItemEstimate(
        item=record,
        charged_fee=charged_fee,
        medicare_rebate=medicare_rebate,
        health_fund_rebate=health_fund_rebate,
        out_of_pocket=out_of_pocket,
        assistant_item_code=assistant_item_code,
        assistant_gap_fee=gap_fee,
        total_out_of_pocket=out_of_pocket + gap_fee,
    )


# =============================================================================
# Multiple Items
# =============================================================================


def multiple_operation_scale(rank: int) -> Decimal:
    """Scale applied to the item at this rank (0 = highest schedule fee)."""
    if rank < len(MULTIPLE_OPERATION_SCALES):
        return MULTIPLE_OPERATION_SCALES[rank]
    return MULTIPLE_OPERATION_TAIL_SCALE


def rank_by_schedule_fee(records: Sequence[FeeScheduleRecord]) -> list[FeeScheduleRecord]:
    """Sort highest schedule fee first; equal fees keep their input order."""
    return sorted(records, key=lambda r: r.schedule_fee, reverse=True)


def scale_items(records: Sequence[FeeScheduleRecord]) -> list[ItemEstimateLine]:
    """Apply the multiple operation rule and split each scaled fee 75/25."""
    lines = []
    for rank, record in enumerate(rank_by_schedule_fee(records)):
        scale = multiple_operation_scale(rank)
        effective_fee = _money(record.schedule_fee * scale)
        medicare_rebate = _money(effective_fee * MEDICARE_RATE)
        lines.append(
            ItemEstimateLine(
                item_code=record.item_code,
                description=record.description,
                rank=rank,
                scale=scale,
                schedule_fee=record.schedule_fee,
                effective_fee=effective_fee,
                medicare_rebate=medicare_rebate,
                health_fund_rebate=effective_fee - medicare_rebate,
            )
        )
    return lines


def exact_effective_total(records: Sequence[FeeScheduleRecord]) -> Decimal:
    """
    Sum of scaled schedule fees before any rounding.

    The assistant threshold is compared against this total; quarter-cent
    amounts from the 25% scale must not be rounded up across it.
    """
    return sum(
        (
            record.schedule_fee * multiple_operation_scale(rank)
            for rank, record in enumerate(rank_by_schedule_fee(records))
        ),
        ZERO,
    )


def determine_assistant_item_code(records: Sequence[FeeScheduleRecord]) -> Optional[str]:
    """
    Assistant item for a multi-item claim, or None when no assistant applies.

    Eligibility follows the highest-fee item; the code follows the total
    fee after the multiple operation rule.
    """
    if not records:
        return None
    top = rank_by_schedule_fee(records)[0]
    if not top.is_assist_eligible:
        return None
    return select_assistant_item_code(exact_effective_total(records))


def build_assistant_line(
    item_code: str,
    top_record: FeeScheduleRecord,
    gap_fee: Decimal,
    assistant_record: Optional[FeeScheduleRecord] = None,
) -> Optional[AssistantFeeLine]:
    """
    Price the assistant item.

    51300 uses its own schedule fee and benefit, so it needs the looked-up
    record; without one no line is produced. 51303 is one fifth of the
    highest item's unscaled schedule fee, split 75/25.
    """
    if item_code == AssistantItemCode.LOW_FEE.value:
        if assistant_record is None:
            return None
        rule_fee = assistant_record.schedule_fee
        medicare_rebate, health_fund_rebate = split_rebates(assistant_record)
    else:
        rule_fee = _money(top_record.schedule_fee * ASSISTANT_FEE_RATE)
        medicare_rebate = _money(rule_fee * MEDICARE_RATE)
        health_fund_rebate = rule_fee - medicare_rebate

    charged_fee = rule_fee + gap_fee
    return AssistantFeeLine(
        item_code=item_code,
        description=assistant_record.description if assistant_record else None,
        rule_fee=rule_fee,
        medicare_rebate=medicare_rebate,
        health_fund_rebate=health_fund_rebate,
        gap_fee=gap_fee,
        charged_fee=charged_fee,
        out_of_pocket=charged_fee - medicare_rebate - health_fund_rebate,
    )


def estimate_multiple(
    records: Sequence[FeeScheduleRecord],
    total_charged_fee: Decimal,
    assistant_gap_fee: Optional[Decimal] = None,
    assistant_record: Optional[FeeScheduleRecord] = None,
) -> MultiItemEstimate:
    """
    Estimate a claim with several items billed in one episode.

    Args:
        records: Fee schedule records for the claimed items, in entry order
        total_charged_fee: Fee charged for all items together
        assistant_gap_fee: Optional gap charged by the assistant
        assistant_record: The 51300 record, when that item applies

    Returns:
        MultiItemEstimate with per-item lines, assistant line and totals

    Raises:
        MbsValidationError: If no records are given or the fee is negative
    """
    if not records:
        raise MbsValidationError("Please select at least one MBS item.")
    total_charged_fee = validate_charged_fee(total_charged_fee)

    lines = scale_items(records)
    exact_total = exact_effective_total(records)
    total_effective_fee = _money(exact_total)

    # The charged fee is shared across items, so a per-item split only
    # exists for a single item
    if len(lines) == 1:
        line = lines[0]
        lines = [
            line.model_copy(
                update={
                    "out_of_pocket": total_charged_fee
                    - line.medicare_rebate
                    - line.health_fund_rebate
                }
            )
        ]

    top_record = rank_by_schedule_fee(records)[0]
    assistant_item_code = None
    assistant = None
    if top_record.is_assist_eligible:
        assistant_item_code = select_assistant_item_code(exact_total)
        assistant = build_assistant_line(
            assistant_item_code,
            top_record,
            normalize_gap_fee(assistant_gap_fee),
            assistant_record,
        )

    medicare_total = sum((line.medicare_rebate for line in lines), ZERO)
    health_fund_total = sum((line.health_fund_rebate for line in lines), ZERO)
    charged_total = total_charged_fee
    if assistant is not None:
        medicare_total += assistant.medicare_rebate
        health_fund_total += assistant.health_fund_rebate
        charged_total += assistant.charged_fee

    totals = EstimateTotals(
        charged_fee=charged_total,
        medicare_rebate=medicare_total,
        health_fund_rebate=health_fund_total,
        out_of_pocket=charged_total - medicare_total - health_fund_total,
    )

    logger.info(
        f"Multi-item estimate: items={len(lines)}, "
        f"total_effective_fee={total_effective_fee}, "
        f"assistant={assistant_item_code}, "
        f"out_of_pocket={totals.out_of_pocket}"
    )

    return MultiItemEstimate(
        lines=lines,
        total_effective_fee=total_effective_fee,
        total_charged_fee=total_charged_fee,
        assistant_item_code=assistant_item_code,
        assistant=assistant,
        totals=totals,
    )
