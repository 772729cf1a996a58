"""
Normalization of untrusted monster payloads.

Bodies arrive from YAML bestiaries or from editor forms as loose mappings.
Scalars are coerced and clamped into range; only structural problems (no
name, unknown tier, unnamed powers, too many attacks) are rejected.
"""

import math
from typing import Any

from pydantic import BaseModel, Field

from summoning.database.models.monster import (
    MAX_ATTACKS_PER_MONSTER,
    MonsterTier,
    PowerDefenceRequirement,
    PowerDurationType,
    PowerIntentionType,
)
from summoning.game.monster.attributes import CORE_ATTRIBUTE_ORDER, DieSize
from summoning.game.monster.equipment import EquipmentSlot

MAX_INTENTIONS_PER_POWER = 4
DEFAULT_DIE = DieSize.D6
DEFAULT_ATTACK_NAME = "Natural Weapon"


class MonsterValidationError(Exception):
    """Raised when a monster payload cannot be normalized."""

    pass


class IntentionInput(BaseModel):
    """Normalized power intention."""

    sort_order: int
    type: PowerIntentionType = PowerIntentionType.ATTACK
    details: dict[str, Any] = Field(default_factory=dict)


class PowerInput(BaseModel):
    """Normalized monster power."""

    sort_order: int
    name: str
    description: str | None = None
    dice_count: int = 1
    potency: int = 1
    duration_type: PowerDurationType = PowerDurationType.INSTANT
    duration_turns: int | None = None
    defence_requirement: PowerDefenceRequirement = PowerDefenceRequirement.NONE
    cooldown_turns: int = 1
    cooldown_reduction: int = 0
    response_required: bool = False
    intentions: list[IntentionInput] = Field(default_factory=list)


class AttackInput(BaseModel):
    """Normalized natural weapon attack."""

    sort_order: int
    attack_name: str = DEFAULT_ATTACK_NAME
    attack_config: dict[str, Any] = Field(default_factory=dict)


class TraitLinkInput(BaseModel):
    """
    Reference to a trait definition.

    Either the definition id or its name identifies the trait; the effect text
    is only used when a bestiary import has to create the definition.
    """

    sort_order: int
    trait_definition_id: str | None = None
    name: str | None = None
    effect_text: str | None = None

    @property
    def key(self) -> str:
        """Identity used to de-duplicate trait links."""
        if self.trait_definition_id:
            return f"id:{self.trait_definition_id}"
        return f"name:{(self.name or '').lower()}"


class MonsterInput(BaseModel):
    """A fully normalized monster, ready to be stored or rendered."""

    name: str
    level: int = 1
    tier: MonsterTier
    legendary: bool = False
    custom_notes: str | None = None

    physical_resilience_current: int = 0
    physical_resilience_max: int = 0
    mental_perseverance_current: int = 0
    mental_perseverance_max: int = 0
    physical_protection: int = 0
    mental_protection: int = 0

    attack_die: DieSize | None = DEFAULT_DIE
    attack_resist_dice: int = 0
    attack_modifier: int = 0
    defence_die: DieSize | None = DEFAULT_DIE
    defence_resist_dice: int = 0
    defence_modifier: int = 0
    fortitude_die: DieSize | None = DEFAULT_DIE
    fortitude_resist_dice: int = 0
    fortitude_modifier: int = 0
    intellect_die: DieSize | None = DEFAULT_DIE
    intellect_resist_dice: int = 0
    intellect_modifier: int = 0
    support_die: DieSize | None = DEFAULT_DIE
    support_resist_dice: int = 0
    support_modifier: int = 0
    bravery_die: DieSize | None = DEFAULT_DIE
    bravery_resist_dice: int = 0
    bravery_modifier: int = 0

    weapon_skill_value: int = 1
    weapon_skill_modifier: int = 0
    armor_skill_value: int = 1
    armor_skill_modifier: int = 0

    main_hand_item_id: str | None = None
    off_hand_item_id: str | None = None
    small_item_id: str | None = None
    head_item_id: str | None = None
    shoulder_item_id: str | None = None
    torso_item_id: str | None = None
    legs_item_id: str | None = None
    feet_item_id: str | None = None

    tags: list[str] = Field(default_factory=list)
    traits: list[TraitLinkInput] = Field(default_factory=list)
    attacks: list[AttackInput] = Field(default_factory=list)
    powers: list[PowerInput] = Field(default_factory=list)

    def column_values(self) -> dict[str, Any]:
        """Scalar fields, keyed by Monster column name."""
        return self.model_dump(exclude={"tags", "traits", "attacks", "powers"})


def as_int(value: Any, fallback: int = 0) -> int:
    """Coerce numbers and numeric strings to int, truncating toward zero."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        return math.trunc(value) if math.isfinite(value) else fallback
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value)
        except ValueError:
            return fallback
        return math.trunc(parsed) if math.isfinite(parsed) else fallback
    return fallback


def as_bool(value: Any, fallback: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    return fallback


def as_str(value: Any, fallback: str = "") -> str:
    return value.strip() if isinstance(value, str) else fallback


def as_nullable_str(value: Any) -> str | None:
    normalized = as_str(value)
    return normalized or None


def as_die(value: Any, fallback: DieSize = DEFAULT_DIE) -> DieSize:
    """Parse a die token such as 'D8' or 'd8'; anything else becomes the fallback."""
    token = as_str(value).upper()
    try:
        return DieSize(token)
    except ValueError:
        return fallback


def _as_enum(enum_cls: Any, value: Any, fallback: Any) -> Any:
    try:
        return enum_cls(as_str(value).upper())
    except ValueError:
        return fallback


def _clamp(value: int, low: int, high: int | None = None) -> int:
    value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def _normalize_intention(value: Any, sort_order: int) -> IntentionInput:
    raw = value if isinstance(value, dict) else {}
    details = raw.get("details")
    return IntentionInput(
        sort_order=sort_order,
        type=_as_enum(PowerIntentionType, raw.get("type"), PowerIntentionType.ATTACK),
        details=details if isinstance(details, dict) else {},
    )


def _normalize_power(value: Any, sort_order: int) -> PowerInput:
    raw = value if isinstance(value, dict) else {}

    duration_type = _as_enum(
        PowerDurationType, raw.get("duration_type"), PowerDurationType.INSTANT
    )
    cooldown_turns = _clamp(as_int(raw.get("cooldown_turns"), 1), 1)
    cooldown_reduction = min(
        _clamp(as_int(raw.get("cooldown_reduction"), 0), 0), cooldown_turns - 1
    )

    intentions_raw = raw.get("intentions")
    if not isinstance(intentions_raw, list):
        intentions_raw = []
    intentions = [
        _normalize_intention(entry, index)
        for index, entry in enumerate(intentions_raw[:MAX_INTENTIONS_PER_POWER])
    ]

    return PowerInput(
        sort_order=sort_order,
        name=as_str(raw.get("name")),
        description=as_nullable_str(raw.get("description")),
        dice_count=_clamp(as_int(raw.get("dice_count"), 1), 1, 20),
        potency=_clamp(as_int(raw.get("potency"), 1), 1, 5),
        duration_type=duration_type,
        duration_turns=(
            _clamp(as_int(raw.get("duration_turns"), 1), 1, 4)
            if duration_type == PowerDurationType.TURNS
            else None
        ),
        defence_requirement=_as_enum(
            PowerDefenceRequirement,
            raw.get("defence_requirement"),
            PowerDefenceRequirement.NONE,
        ),
        cooldown_turns=cooldown_turns,
        cooldown_reduction=cooldown_reduction,
        response_required=as_bool(raw.get("response_required")),
        intentions=intentions or [_normalize_intention({}, 0)],
    )


def _normalize_attack(value: Any, sort_order: int) -> AttackInput:
    raw = value if isinstance(value, dict) else {}
    config = raw.get("attack_config")
    return AttackInput(
        sort_order=sort_order,
        attack_name=as_str(raw.get("attack_name")) or DEFAULT_ATTACK_NAME,
        attack_config=config if isinstance(config, dict) else {},
    )


def dedupe_tags(tags: list[Any]) -> list[str]:
    """Trim tags, drop blanks and repeats, keep first-seen order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for raw in tags:
        tag = as_str(raw)
        if not tag or tag in seen:
            continue
        seen.add(tag)
        ordered.append(tag)
    return ordered


def _normalize_traits(traits_raw: list[Any]) -> list[TraitLinkInput]:
    links: list[TraitLinkInput] = []
    for index, entry in enumerate(traits_raw):
        if isinstance(entry, str):
            link = TraitLinkInput(sort_order=index, trait_definition_id=as_nullable_str(entry))
        elif isinstance(entry, dict):
            link = TraitLinkInput(
                sort_order=as_int(entry.get("sort_order"), index),
                trait_definition_id=as_nullable_str(entry.get("trait_definition_id")),
                name=as_nullable_str(entry.get("name")),
                effect_text=as_nullable_str(entry.get("effect_text")),
            )
        else:
            continue
        if link.trait_definition_id or link.name:
            links.append(link)

    links.sort(key=lambda link: link.sort_order)

    seen: set[str] = set()
    unique: list[TraitLinkInput] = []
    for link in links:
        if link.key in seen:
            continue
        seen.add(link.key)
        unique.append(link.model_copy(update={"sort_order": len(unique)}))
    return unique


def normalize_monster_input(body: Any) -> MonsterInput:
    """
    Normalize a raw monster payload.

    Args:
        body: Mapping with snake_case monster fields

    Returns:
        The normalized MonsterInput

    Raises:
        MonsterValidationError: If the payload is not a mapping, lacks a name,
            has an unknown tier, has an unnamed power, or lists too many attacks
    """
    if not isinstance(body, dict):
        raise MonsterValidationError("Invalid body")

    name = as_str(body.get("name"))
    if not name:
        raise MonsterValidationError("name is required")

    try:
        tier = MonsterTier(as_str(body.get("tier")).upper())
    except ValueError:
        raise MonsterValidationError("tier must be one of MINION, SOLDIER, ELITE, BOSS")

    powers_raw = body.get("powers")
    powers = [
        _normalize_power(entry, index)
        for index, entry in enumerate(powers_raw if isinstance(powers_raw, list) else [])
    ]
    for power in powers:
        if not power.name:
            raise MonsterValidationError("Each power requires a name")

    attacks_raw = body.get("attacks")
    if attacks_raw is None:
        attacks_raw = []
    if not isinstance(attacks_raw, list):
        raise MonsterValidationError("attacks must be a list")
    if len(attacks_raw) > MAX_ATTACKS_PER_MONSTER:
        raise MonsterValidationError(
            f"A monster can have at most {MAX_ATTACKS_PER_MONSTER} attacks"
        )
    attacks = [_normalize_attack(entry, index) for index, entry in enumerate(attacks_raw)]

    tags_raw = body.get("tags")
    traits_raw = body.get("traits")

    data: dict[str, Any] = {
        "name": name,
        "level": _clamp(as_int(body.get("level"), 1), 1),
        "tier": tier,
        "legendary": as_bool(body.get("legendary")),
        "custom_notes": as_nullable_str(body.get("custom_notes")),
        "weapon_skill_value": _clamp(as_int(body.get("weapon_skill_value"), 1), 1),
        "weapon_skill_modifier": as_int(body.get("weapon_skill_modifier")),
        "armor_skill_value": _clamp(as_int(body.get("armor_skill_value"), 1), 1),
        "armor_skill_modifier": as_int(body.get("armor_skill_modifier")),
        "tags": dedupe_tags(tags_raw if isinstance(tags_raw, list) else []),
        "traits": _normalize_traits(traits_raw if isinstance(traits_raw, list) else []),
        "attacks": attacks,
        "powers": powers,
    }

    for field in (
        "physical_resilience_current",
        "physical_resilience_max",
        "mental_perseverance_current",
        "mental_perseverance_max",
        "physical_protection",
        "mental_protection",
    ):
        data[field] = _clamp(as_int(body.get(field)), 0)

    for attribute in CORE_ATTRIBUTE_ORDER:
        die_key = f"{attribute}_die"
        # An explicit null leaves the attribute unset; a missing key takes the default die
        if die_key in body and body[die_key] is None:
            data[die_key] = None
        else:
            data[die_key] = as_die(body.get(die_key))
        data[f"{attribute}_resist_dice"] = _clamp(as_int(body.get(f"{attribute}_resist_dice")), 0)
        data[f"{attribute}_modifier"] = as_int(body.get(f"{attribute}_modifier"))

    for slot in EquipmentSlot:
        data[slot.value] = as_nullable_str(body.get(slot.value))

    return MonsterInput(**data)
