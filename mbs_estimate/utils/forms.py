"""
Form input validation for the fee estimate pages.

Inputs are checked before any request is sent: required fields must be
non-empty and fees must be non-negative numbers.
"""

import re
from decimal import Decimal, InvalidOperation

from mbs_estimate.services.fee_estimator import normalize_gap_fee
from mbs_estimate.services.mbs_lookup import MbsValidationError

ITEM_CODE_SEPARATORS = re.compile(r"[\s,;]+")


def require_query(text: str) -> str:
    """Return the stripped search query, rejecting blank input."""
    if text is None or not text.strip():
        raise MbsValidationError("Please enter a search query.")
    return text.strip()


def parse_fee(text: str, label: str = "Your Charged Fee") -> Decimal:
    """
    Parse a required fee field.

    Raises:
        MbsValidationError: If the field is blank, non-numeric or negative
    """
    if text is None or not str(text).strip():
        raise MbsValidationError(f"Please enter {label}.")
    try:
        amount = Decimal(str(text).strip())
    except InvalidOperation as e:
        raise MbsValidationError(f"Please enter a valid positive number for {label}.") from e
    if not amount.is_finite() or amount < 0:
        raise MbsValidationError(f"Please enter a valid positive number for {label}.")
    return amount


def parse_gap_fee(text: str) -> Decimal:
    """Parse the optional assistant gap fee; blank or invalid input means no gap."""
    if text is None or not str(text).strip():
        return Decimal("0")
    return normalize_gap_fee(str(text).strip())


def parse_item_codes(text: str) -> list[str]:
    """
    Split a list of item numbers typed as "30175, 30180 105A".

    Raises:
        MbsValidationError: If no item number is present
    """
    codes = [code for code in ITEM_CODE_SEPARATORS.split(text or "") if code]
    if not codes:
        raise MbsValidationError("Please enter at least one MBS Item Number.")
    return codes
