"""
Pydantic Schemas for Fee Schedule Records.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Money stays Decimal in Python and is written as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class FeeScheduleRecord(BaseModel):
    """A current MBS item as returned by the search endpoint."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    item_code: str = Field(..., description="MBS item number")
    description: str = Field(..., description="Item descriptor")
    schedule_fee: Money = Field(..., ge=0, description="Schedule fee")
    benefit_75_percent: Money = Field(..., ge=0, description="75% Medicare benefit")
    benefit_85_percent: Money = Field(..., ge=0, description="85% Medicare benefit")
    is_assist_eligible: bool = Field(default=False, description="Surgical assistant claimable")
    is_anaes_eligible: bool = Field(default=False, description="Anaesthetic claimable")
