"""
Estimate Service.

Runs one estimate per user action as a fixed pipeline:
inputs -> fee schedule lookups -> calculation -> result.

Multi-item lookups are issued concurrently and joined before any
calculation; failed items are excluded and reported together.
"""

import asyncio
from decimal import Decimal
from typing import Optional, Sequence

from mbs_estimate.schemas.estimate import MultiItemEstimate, SingleItemEstimate
from mbs_estimate.schemas.fee_schedule import FeeScheduleRecord
from mbs_estimate.services.fee_estimator import (
    determine_assistant_item_code,
    estimate_multiple,
    estimate_single,
    validate_charged_fee,
)
from mbs_estimate.services.mbs_lookup import (
    ItemNotFoundError,
    MbsLookupService,
    MbsServiceError,
    MbsValidationError,
    get_mbs_lookup_service,
)
from mbs_estimate.utils.logging import get_logger

logger = get_logger(__name__)


def assistant_not_found_message(item_code: str) -> str:
    return f"Details for assistant item {item_code} not found."


class EstimateService:
    """Looks up MBS items and feeds them to the fee estimator."""

    def __init__(self, lookup_service: Optional[MbsLookupService] = None):
        self.lookup_service = lookup_service or get_mbs_lookup_service()

    async def _lookup_item(self, item_code: str) -> FeeScheduleRecord:
        record = await self.lookup_service.get_item(item_code)
        if record is None:
            raise ItemNotFoundError(item_code)
        return record

    async def estimate_single(
        self,
        item_code: str,
        charged_fee: Decimal,
        assistant_gap_fee: Optional[Decimal] = None,
    ) -> SingleItemEstimate:
        """
        Estimate one specialist service.

        Raises:
            MbsValidationError: If the item code is blank or the fee invalid
            ItemNotFoundError: If the item has no current record
            DataSourceError: If the primary lookup fails
        """
        if not item_code or not item_code.strip():
            raise MbsValidationError("Please enter both MBS Item Number and Your Charged Fee.")
        item_code = item_code.strip()
        validate_charged_fee(charged_fee)

        record = await self._lookup_item(item_code)
        estimate = estimate_single(record, charged_fee, assistant_gap_fee)

        if estimate.assistant_item_code is None:
            return estimate

        # The assistant item is only shown, so its lookup never fails the estimate
        assistant_code = estimate.assistant_item_code
        try:
            assistant = await self.lookup_service.get_item(assistant_code)
        except MbsServiceError as e:
            logger.warning(f"Assistant item lookup failed: code={assistant_code}, error={e}")
            return estimate.model_copy(update={"assistant_error": str(e)})

        if assistant is None:
            return estimate.model_copy(
                update={"assistant_error": assistant_not_found_message(assistant_code)}
            )
        return estimate.model_copy(update={"assistant_item_description": assistant.description})

    async def estimate_multiple(
        self,
        item_codes: Sequence[str],
        total_charged_fee: Decimal,
        assistant_gap_fee: Optional[Decimal] = None,
    ) -> MultiItemEstimate:
        """
        Estimate several items billed together.

        Items whose lookup fails are left out and their messages returned in
        ``lookup_errors``. If every item fails, nothing is estimated.

        Raises:
            MbsValidationError: On invalid input, or when no item could be found
        """
        codes = [code.strip() for code in item_codes if code and code.strip()]
        if not codes:
            raise MbsValidationError("Please select at least one MBS item.")
        validate_charged_fee(total_charged_fee)

        results = await asyncio.gather(
            *(self._lookup_item(code) for code in codes),
            return_exceptions=True,
        )

        records: list[FeeScheduleRecord] = []
        errors: list[str] = []
        for code, result in zip(codes, results):
            if isinstance(result, MbsServiceError):
                logger.warning(f"Item excluded from estimate: code={code}, error={result}")
                errors.append(str(result))
            elif isinstance(result, BaseException):
                raise result
            else:
                records.append(result)

        if not records:
            raise MbsValidationError("; ".join(errors), errors=errors)

        assistant_record = None
        assistant_code = determine_assistant_item_code(records)
        if assistant_code is not None:
            try:
                assistant_record = await self.lookup_service.get_item(assistant_code)
            except MbsServiceError as e:
                errors.append(str(e))
            else:
                if assistant_record is None:
                    errors.append(assistant_not_found_message(assistant_code))

        estimate = estimate_multiple(
            records,
            total_charged_fee,
            assistant_gap_fee=assistant_gap_fee,
            assistant_record=assistant_record,
        )
        return estimate.model_copy(update={"lookup_errors": errors})

