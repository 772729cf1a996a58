"""Forge items slotted onto a monster and the bonuses they grant."""

import math
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EquipmentError(Exception):
    """Raised when a monster's equipment loadout is invalid."""

    pass


class ItemType(StrEnum):
    """Forge item categories."""

    WEAPON = "WEAPON"
    SHIELD = "SHIELD"
    ARMOR = "ARMOR"
    ITEM = "ITEM"
    CONSUMABLE = "CONSUMABLE"


class ItemSize(StrEnum):
    """How many hands a held item needs."""

    SMALL = "SMALL"
    ONE_HANDED = "ONE_HANDED"
    TWO_HANDED = "TWO_HANDED"


class ArmorLocation(StrEnum):
    """Body location an armor piece covers."""

    HEAD = "HEAD"
    SHOULDERS = "SHOULDERS"
    TORSO = "TORSO"
    LEGS = "LEGS"
    FEET = "FEET"


class EquipmentSlot(StrEnum):
    """Monster equipment slots; values match the Monster ``*_item_id`` columns."""

    MAIN_HAND = "main_hand_item_id"
    OFF_HAND = "off_hand_item_id"
    SMALL = "small_item_id"
    HEAD = "head_item_id"
    SHOULDER = "shoulder_item_id"
    TORSO = "torso_item_id"
    LEGS = "legs_item_id"
    FEET = "feet_item_id"


HAND_SLOTS = (EquipmentSlot.MAIN_HAND, EquipmentSlot.OFF_HAND, EquipmentSlot.SMALL)

BODY_SLOT_LOCATIONS: dict[EquipmentSlot, ArmorLocation] = {
    EquipmentSlot.HEAD: ArmorLocation.HEAD,
    EquipmentSlot.SHOULDER: ArmorLocation.SHOULDERS,
    EquipmentSlot.TORSO: ArmorLocation.TORSO,
    EquipmentSlot.LEGS: ArmorLocation.LEGS,
    EquipmentSlot.FEET: ArmorLocation.FEET,
}


class ModifierField(StrEnum):
    """Monster modifiers that items can raise."""

    ATTACK = "attack_modifier"
    DEFENCE = "defence_modifier"
    FORTITUDE = "fortitude_modifier"
    INTELLECT = "intellect_modifier"
    SUPPORT = "support_modifier"
    BRAVERY = "bravery_modifier"
    WEAPON_SKILL = "weapon_skill_modifier"
    ARMOR_SKILL = "armor_skill_modifier"


MODIFIER_ALIASES: dict[str, ModifierField] = {
    "attack": ModifierField.ATTACK,
    "defence": ModifierField.DEFENCE,
    "defense": ModifierField.DEFENCE,
    "fortitude": ModifierField.FORTITUDE,
    "intellect": ModifierField.INTELLECT,
    "support": ModifierField.SUPPORT,
    "bravery": ModifierField.BRAVERY,
    "weapon skill": ModifierField.WEAPON_SKILL,
    "weaponskill": ModifierField.WEAPON_SKILL,
    "armor skill": ModifierField.ARMOR_SKILL,
    "armour skill": ModifierField.ARMOR_SKILL,
    "armorskill": ModifierField.ARMOR_SKILL,
    "armourskill": ModifierField.ARMOR_SKILL,
}


class AttributeModifier(BaseModel):
    """A global attribute bonus granted by an item."""

    attribute: str = ""
    amount: Any = 0


class EquipmentItem(BaseModel):
    """
    Item data needed to slot gear onto a monster.

    Attributes:
        id: Unique item identifier
        name: Display name
        type: Item category
        size: Hands needed for held items, None for worn gear
        armor_location: Covered location for armor, None otherwise
        ppv: Physical protection value
        mpv: Mental protection value
        global_attribute_modifiers: Attribute bonuses the item grants while equipped
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Unique item identifier")
    name: str = Field(..., description="Display name of the item")
    type: ItemType = Field(..., description="Item category")
    size: ItemSize | None = Field(default=None, description="Hands needed for held items")
    armor_location: ArmorLocation | None = Field(default=None, description="Armor location")
    ppv: int | None = Field(default=None, description="Physical protection value")
    mpv: int | None = Field(default=None, description="Mental protection value")
    global_attribute_modifiers: list[AttributeModifier] = Field(default_factory=list)


def map_modifier_key(attribute: str) -> ModifierField | None:
    """Map an item's attribute label (e.g. 'Armour Skill') to a monster modifier."""
    return MODIFIER_ALIASES.get(attribute.strip().lower())


def _modifier_amount(raw: Any) -> int | float | None:
    """Parse a bonus amount; fractions are kept, non-numeric values give None."""
    if raw is None:
        return 0
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, str) and not raw.strip():
        return 0
    try:
        amount = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(amount):
        return None
    return int(amount) if amount.is_integer() else amount


def highest_item_modifiers(
    items: Iterable[EquipmentItem | None],
) -> dict[ModifierField, int | float]:
    """Find the best bonus any single item grants to each modifier.

    Bonuses from several items do not stack; the highest one wins.

    Args:
        items: Equipped items, with None for empty slots

    Returns:
        Every ModifierField mapped to its highest bonus, 0 when none applies
    """
    highest: dict[ModifierField, int | float] = {}
    for item in items:
        if item is None:
            continue
        for modifier in item.global_attribute_modifiers:
            attribute = str(modifier.attribute or "").strip()
            if not attribute:
                continue
            amount = _modifier_amount(modifier.amount)
            if amount is None:
                continue
            field = map_modifier_key(attribute)
            if field is None:
                continue
            if field not in highest or amount > highest[field]:
                highest[field] = amount

    return {field: highest.get(field, 0) for field in ModifierField}


def protection_totals(items: Iterable[EquipmentItem | None]) -> tuple[int, int]:
    """Sum physical and mental protection over equipped armor and shields.

    Returns:
        (physical_protection, mental_protection)
    """
    physical = 0
    mental = 0
    for item in items:
        if item is None or item.type not in (ItemType.ARMOR, ItemType.SHIELD):
            continue
        physical += item.ppv or 0
        mental += item.mpv or 0
    return physical, mental


def is_two_handed(item: EquipmentItem | None) -> bool:
    return item is not None and item.size == ItemSize.TWO_HANDED


def is_valid_hand_item_for_slot(slot: EquipmentSlot, item: EquipmentItem | None) -> bool:
    """Check a weapon or shield fits a hand slot.

    Main hand takes one- or two-handed items, off hand one-handed only and
    the small slot only small items.
    """
    if item is None or item.type not in (ItemType.WEAPON, ItemType.SHIELD):
        return False
    if item.size is None:
        return False

    if slot == EquipmentSlot.MAIN_HAND:
        return item.size in (ItemSize.ONE_HANDED, ItemSize.TWO_HANDED)
    if slot == EquipmentSlot.OFF_HAND:
        return item.size == ItemSize.ONE_HANDED
    if slot == EquipmentSlot.SMALL:
        return item.size == ItemSize.SMALL
    return False


def is_valid_body_item_for_slot(slot: EquipmentSlot, item: EquipmentItem | None) -> bool:
    """Check an armor piece covers the location of a body slot."""
    if item is None or item.type != ItemType.ARMOR:
        return False
    expected = BODY_SLOT_LOCATIONS.get(slot)
    return expected is not None and item.armor_location == expected


def slotted_item_ids(monster: Any) -> dict[EquipmentSlot, str | None]:
    """Read the eight slot columns from a monster-like object."""
    return {slot: getattr(monster, slot.value, None) for slot in EquipmentSlot}


def resolve_equipped_items(
    slots: Mapping[EquipmentSlot, str | None],
    items_by_id: Mapping[str, EquipmentItem],
) -> list[EquipmentItem | None]:
    """Look up the items in each slot; unknown ids resolve to None."""
    return [items_by_id.get(item_id) if item_id else None for item_id in slots.values()]


def validate_loadout(
    slots: Mapping[EquipmentSlot, str | None],
    items_by_id: Mapping[str, EquipmentItem],
) -> None:
    """
    Validate a full equipment loadout.

    Raises:
        EquipmentError: If an item is unknown, sits in a slot it does not fit,
            or the off hand is used while the main hand holds a two-handed item
    """
    for slot, item_id in slots.items():
        if not item_id:
            continue
        item = items_by_id.get(item_id)
        if item is None:
            raise EquipmentError(f"Unknown item '{item_id}' in slot {slot.name.lower()}")

        valid = (
            is_valid_hand_item_for_slot(slot, item)
            if slot in HAND_SLOTS
            else is_valid_body_item_for_slot(slot, item)
        )
        if not valid:
            raise EquipmentError(
                f"Item '{item.name}' cannot be equipped in slot {slot.name.lower()}"
            )

    main_hand_id = slots.get(EquipmentSlot.MAIN_HAND)
    if main_hand_id and slots.get(EquipmentSlot.OFF_HAND):
        if is_two_handed(items_by_id.get(main_hand_id)):
            raise EquipmentError("Off hand must be empty while wielding a two-handed item")
