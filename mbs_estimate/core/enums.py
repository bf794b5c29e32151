"""
Core Enumerations for the MBS fee estimate service.
"""

from enum import Enum


class SearchMode(str, Enum):
    """How a search query is matched against the fee schedule."""

    ITEM_CODE = "item_code"  # Exact item number, e.g. 30175 or 105A
    KEYWORD = "keyword"  # AND-combined words in the description


class AssistantItemCode(str, Enum):
    """Surgical assistant items claimed alongside an assist-eligible operation."""

    LOW_FEE = "51300"  # Operation fee below the threshold; fixed schedule fee
    HIGH_FEE = "51303"  # Operation fee at or above the threshold; derived fee


class EstimateStatus(str, Enum):
    """Lifecycle of an estimate as seen by the forms."""

    PENDING = "pending"
    ERROR = "error"
    READY = "ready"
