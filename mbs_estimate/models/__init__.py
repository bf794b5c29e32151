"""
SQLAlchemy Models for the MBS fee estimate service.
"""

from mbs_estimate.models.base import Base, EffectiveDatedModel, TimeStampedModel
from mbs_estimate.models.mbs_item import MbsItem

__all__ = [
    "Base",
    "TimeStampedModel",
    "EffectiveDatedModel",
    "MbsItem",
]
