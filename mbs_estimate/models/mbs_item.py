"""
MBS Item Model for the Medicare Benefits Schedule fee table.
Source: https://www.mbsonline.gov.au/internet/mbsonline/publishing.nsf/Content/downloads

The table is loaded by an external import job and consumed read-only here.
"""

from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Index, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from mbs_estimate.models.base import Base, EffectiveDatedModel, TimeStampedModel


class MbsItem(Base, TimeStampedModel, EffectiveDatedModel):
    """
    A single MBS item version.

    Each item code may have several rows over time; the current one has no
    effective_to date.
    """

    __tablename__ = "mbs_items"

    mbs_item_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    # Item Identification
    item_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
        comment="MBS item number, e.g. 30175 or 105A",
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Item descriptor",
    )
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    sub_category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    item_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Fees
    schedule_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Schedule fee set by the Department of Health",
    )
    benefit_75_percent: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Medicare benefit for in-hospital services",
    )
    benefit_85_percent: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Medicare benefit for out-of-hospital services",
    )

    # Eligibility Flags
    is_assist_eligible: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Surgical assistant may be claimed",
    )
    is_anaes_eligible: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Anaesthetic may be claimed",
    )

    explanatory_note_refs: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    raw_xml_fragment: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)

    __table_args__ = (
        Index("ix_mbs_items_code_effective", "item_code", "effective_to"),
    )

    def __repr__(self) -> str:
        return f"<MbsItem(code='{self.item_code}', fee={self.schedule_fee})>"
