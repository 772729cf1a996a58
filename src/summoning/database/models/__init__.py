"""SQLAlchemy models for Summoning Circle."""

from summoning.database.models.base import Base, TimestampMixin, UuidPrimaryKeyMixin
from summoning.database.models.monster import (
    MAX_ATTACKS_PER_MONSTER,
    Monster,
    MonsterAttack,
    MonsterPower,
    MonsterPowerIntention,
    MonsterSource,
    MonsterTag,
    MonsterTier,
    MonsterTrait,
    PowerDefenceRequirement,
    PowerDurationType,
    PowerIntentionType,
)
from summoning.database.models.trait import TraitDefinition

__all__ = [
    "Base",
    "TimestampMixin",
    "UuidPrimaryKeyMixin",
    "MAX_ATTACKS_PER_MONSTER",
    "Monster",
    "MonsterAttack",
    "MonsterPower",
    "MonsterPowerIntention",
    "MonsterSource",
    "MonsterTag",
    "MonsterTier",
    "MonsterTrait",
    "PowerDefenceRequirement",
    "PowerDurationType",
    "PowerIntentionType",
    "TraitDefinition",
]
