"""
SQLAlchemy Base Model and Mixins
Source: https://docs.sqlalchemy.org/en/20/orm/declarative_mixins.html
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, MetaData, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Index and constraint names match those created by the fee schedule import job
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for the read-only fee schedule models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class TimeStampedModel:
    """Mixin for rows carrying import timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class EffectiveDatedModel:
    """
    Mixin for schedule rows that are versioned by date.

    A row stays current until the next schedule release closes it by
    setting effective_to.
    """

    effective_from: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First date this version applies",
    )
    effective_to: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        comment="Last date this version applies; NULL for the current version",
    )
    version_tag: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Schedule release the row was imported from",
    )

    @property
    def is_current(self) -> bool:
        """Check if this is the currently effective version."""
        return self.effective_to is None
