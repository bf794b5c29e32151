"""
Display formatting for fee estimate results.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


def format_aud(amount: Any) -> str:
    """
    Format an amount as Australian dollars, e.g. $1,234.56 or -$12.00.

    Missing or non-numeric amounts render as N/A.
    """
    if amount is None:
        return "N/A"
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return "N/A"
    if not value.is_finite():
        return "N/A"

    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"
