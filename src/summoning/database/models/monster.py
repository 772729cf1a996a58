"""Monster models for the Summoning Circle bestiary."""

import enum
import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from summoning.game.monster.attributes import DieSize

from .base import Base, TimestampMixin, UuidPrimaryKeyMixin

if TYPE_CHECKING:
    from .trait import TraitDefinition


class MonsterTier(enum.Enum):
    """Threat tiers; higher tiers scale resilience up."""

    MINION = "MINION"
    SOLDIER = "SOLDIER"
    ELITE = "ELITE"
    BOSS = "BOSS"


class MonsterSource(enum.Enum):
    """Where a monster (or trait definition) comes from."""

    CORE = "CORE"
    CAMPAIGN = "CAMPAIGN"


class PowerDurationType(enum.Enum):
    """How long a power's effect lasts."""

    INSTANT = "INSTANT"
    TURNS = "TURNS"
    PASSIVE = "PASSIVE"


class PowerDefenceRequirement(enum.Enum):
    """Which defence a target uses against a power."""

    PROTECTION = "PROTECTION"
    RESIST = "RESIST"
    NONE = "NONE"


class PowerIntentionType(enum.Enum):
    """What a power is meant to do."""

    ATTACK = "ATTACK"
    DEFENCE = "DEFENCE"
    HEALING = "HEALING"
    CLEANSE = "CLEANSE"
    CONTROL = "CONTROL"
    MOVEMENT = "MOVEMENT"
    AUGMENT = "AUGMENT"
    DEBUFF = "DEBUFF"
    SUMMON = "SUMMON"
    TRANSFORMATION = "TRANSFORMATION"


MAX_ATTACKS_PER_MONSTER = 3


class Monster(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """
    A monster stat block.

    CORE monsters are shared across every campaign and are read-only.
    CAMPAIGN monsters belong to exactly one campaign and can be edited there.
    """

    __tablename__ = "monsters"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        CheckConstraint("level >= 1", name="monster_level_min"),
        CheckConstraint(
            "physical_resilience_current >= 0 AND physical_resilience_max >= 0",
            name="monster_pr_nonnegative",
        ),
        CheckConstraint(
            "mental_perseverance_current >= 0 AND mental_perseverance_max >= 0",
            name="monster_mp_nonnegative",
        ),
        CheckConstraint(
            "weapon_skill_value >= 1 AND armor_skill_value >= 1",
            name="monster_skill_values_min",
        ),
        CheckConstraint(
            "attack_resist_dice >= 0 AND defence_resist_dice >= 0 "
            "AND fortitude_resist_dice >= 0 AND intellect_resist_dice >= 0 "
            "AND support_resist_dice >= 0 AND bravery_resist_dice >= 0",
            name="monster_resist_nonnegative",
        ),
        CheckConstraint(
            "(source = 'CORE' AND campaign_id IS NULL) "
            "OR (source = 'CAMPAIGN' AND campaign_id IS NOT NULL)",
            name="monster_core_scope",
        ),
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display name of the monster",
    )

    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="Monster level (>= 1)",
    )

    tier: Mapped[MonsterTier] = mapped_column(
        Enum(MonsterTier),
        nullable=False,
        comment="Threat tier",
    )

    legendary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
    )

    source: Mapped[MonsterSource] = mapped_column(
        Enum(MonsterSource),
        nullable=False,
        default=MonsterSource.CAMPAIGN,
        index=True,
        comment="CORE (shared) or CAMPAIGN (owned by one campaign)",
    )

    is_read_only: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
    )

    campaign_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        index=True,
        comment="Owning campaign; NULL for CORE monsters",
    )

    custom_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Resilience pools
    physical_resilience_current: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    physical_resilience_max: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mental_perseverance_current: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mental_perseverance_max: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Stored protection, used when no equipment is slotted
    physical_protection: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mental_protection: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Core attributes: die, resist dice count and flat modifier each.
    # A NULL die means the attribute is not set yet.
    attack_die: Mapped[DieSize | None] = mapped_column(Enum(DieSize), nullable=True)
    attack_resist_dice: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attack_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    defence_die: Mapped[DieSize | None] = mapped_column(Enum(DieSize), nullable=True)
    defence_resist_dice: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    defence_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    fortitude_die: Mapped[DieSize | None] = mapped_column(Enum(DieSize), nullable=True)
    fortitude_resist_dice: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fortitude_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    intellect_die: Mapped[DieSize | None] = mapped_column(Enum(DieSize), nullable=True)
    intellect_resist_dice: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    intellect_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    support_die: Mapped[DieSize | None] = mapped_column(Enum(DieSize), nullable=True)
    support_resist_dice: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    support_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    bravery_die: Mapped[DieSize | None] = mapped_column(Enum(DieSize), nullable=True)
    bravery_resist_dice: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bravery_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Skill values as last saved by the editor
    weapon_skill_value: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    weapon_skill_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    armor_skill_value: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    armor_skill_modifier: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Equipment slots hold forge item ids
    main_hand_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    off_hand_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    small_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    head_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shoulder_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    torso_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    legs_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    feet_item_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships. Tags load alphabetically; they carry no display order of their own.
    tags: Mapped[list["MonsterTag"]] = relationship(
        "MonsterTag",
        back_populates="monster",
        cascade="all, delete-orphan",
        order_by="MonsterTag.tag",
        lazy="selectin",
    )

    traits: Mapped[list["MonsterTrait"]] = relationship(
        "MonsterTrait",
        back_populates="monster",
        cascade="all, delete-orphan",
        order_by="MonsterTrait.sort_order",
        lazy="selectin",
    )

    attacks: Mapped[list["MonsterAttack"]] = relationship(
        "MonsterAttack",
        back_populates="monster",
        cascade="all, delete-orphan",
        order_by="MonsterAttack.sort_order",
        lazy="selectin",
    )

    powers: Mapped[list["MonsterPower"]] = relationship(
        "MonsterPower",
        back_populates="monster",
        cascade="all, delete-orphan",
        order_by="MonsterPower.sort_order",
        lazy="selectin",
    )

    @property
    def is_editable(self) -> bool:
        """Whether campaign users may change this monster."""
        return self.source == MonsterSource.CAMPAIGN and not self.is_read_only

    def __repr__(self) -> str:
        """String representation of Monster."""
        return (
            f"<Monster(id={self.id}, name='{self.name}', level={self.level}, "
            f"tier={self.tier.value}, source={self.source.value})>"
        )


class MonsterTag(Base, UuidPrimaryKeyMixin):
    """Free-form tag on a monster (e.g. 'undead', 'beast')."""

    __tablename__ = "monster_tags"
    __table_args__ = (UniqueConstraint("monster_id", "tag", name="monster_tag_unique"),)

    monster_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("monsters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    tag: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    monster: Mapped["Monster"] = relationship("Monster", back_populates="tags")


class MonsterTrait(Base, UuidPrimaryKeyMixin):
    """Link from a monster to a trait definition, in display order."""

    __tablename__ = "monster_traits"
    __table_args__ = (
        UniqueConstraint("monster_id", "trait_definition_id", name="monster_trait_unique"),
    )

    monster_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("monsters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    trait_definition_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("trait_definitions.id", ondelete="RESTRICT"),
        nullable=False,
    )

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    monster: Mapped["Monster"] = relationship("Monster", back_populates="traits")

    definition: Mapped["TraitDefinition"] = relationship("TraitDefinition", lazy="joined")


class MonsterAttack(Base, UuidPrimaryKeyMixin):
    """A natural weapon attack. A monster has at most three."""

    __tablename__ = "monster_attacks"
    __table_args__ = (
        UniqueConstraint("monster_id", "sort_order", name="monster_attack_slot_unique"),
        CheckConstraint("sort_order >= 0 AND sort_order <= 2", name="monster_attack_slot_range"),
    )

    monster_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("monsters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    attack_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # {"melee": {"enabled": true, "targets": 1, "physicalStrength": 2, ...}, "ranged": {...}}
    attack_config: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Melee/ranged/aoe configuration for this attack",
    )

    monster: Mapped["Monster"] = relationship("Monster", back_populates="attacks")


class MonsterPower(Base, UuidPrimaryKeyMixin):
    """A special power with dice, potency, duration and cooldown."""

    __tablename__ = "monster_powers"
    __table_args__ = (
        CheckConstraint("dice_count >= 1 AND dice_count <= 20", name="power_dice_count_range"),
        CheckConstraint("potency >= 1 AND potency <= 5", name="power_potency_range"),
        CheckConstraint("cooldown_turns >= 1", name="power_cooldown_min"),
        CheckConstraint(
            "cooldown_reduction >= 0 AND cooldown_reduction < cooldown_turns",
            name="power_cooldown_reduction_bounds",
        ),
        CheckConstraint(
            "(duration_type = 'TURNS' AND duration_turns >= 1 AND duration_turns <= 4) "
            "OR (duration_type <> 'TURNS' AND duration_turns IS NULL)",
            name="power_duration_turns_rules",
        ),
    )

    monster_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("monsters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    dice_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    potency: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    duration_type: Mapped[PowerDurationType] = mapped_column(
        Enum(PowerDurationType),
        nullable=False,
        default=PowerDurationType.INSTANT,
    )
    duration_turns: Mapped[int | None] = mapped_column(Integer, nullable=True)

    defence_requirement: Mapped[PowerDefenceRequirement] = mapped_column(
        Enum(PowerDefenceRequirement),
        nullable=False,
        default=PowerDefenceRequirement.NONE,
    )

    cooldown_turns: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cooldown_reduction: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    response_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    monster: Mapped["Monster"] = relationship("Monster", back_populates="powers")

    intentions: Mapped[list["MonsterPowerIntention"]] = relationship(
        "MonsterPowerIntention",
        back_populates="power",
        cascade="all, delete-orphan",
        order_by="MonsterPowerIntention.sort_order",
        lazy="selectin",
    )


class MonsterPowerIntention(Base, UuidPrimaryKeyMixin):
    """One of the (up to four) intentions of a power."""

    __tablename__ = "monster_power_intentions"

    power_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("monster_powers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    type: Mapped[PowerIntentionType] = mapped_column(
        Enum(PowerIntentionType),
        nullable=False,
        default=PowerIntentionType.ATTACK,
    )

    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    power: Mapped["MonsterPower"] = relationship("MonsterPower", back_populates="intentions")
