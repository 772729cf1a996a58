"""Printable monster stat sheets.

A sheet collects everything the table needs in play: attribute dice and
modifiers, skill dice, resilience pools and the defence profile. It works from
any object carrying the Monster columns, so stored rows and freshly validated
bestiary entries render the same way.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from summoning.game.monster.attributes import (
    CORE_ATTRIBUTE_ORDER,
    CoreAttribute,
    DieSize,
    die_label,
    numeric_value,
    weapon_skill_dice_count,
)
from summoning.game.monster.equipment import (
    EquipmentItem,
    ModifierField,
    highest_item_modifiers,
    protection_totals,
    resolve_equipped_items,
    slotted_item_ids,
)
from summoning.game.monster.resilience import (
    DefenceProfile,
    ResilienceValues,
    calculate_defence_profile,
    calculate_resilience,
    defence_lines,
)


@dataclass(frozen=True)
class AttributeRow:
    """One core attribute as shown on the sheet."""

    attribute: CoreAttribute
    die: DieSize | None
    label: str
    numeric_value: int
    resist_dice: int
    modifier: int | float


@dataclass(frozen=True)
class MonsterSheet:
    """All derived values for one monster."""

    name: str
    level: int
    tier: str
    legendary: bool
    attributes: list[AttributeRow]
    weapon_skill_dice: int
    weapon_skill_modifier: int | float
    armor_skill_modifier: int | float
    resilience: ResilienceValues
    physical_protection: int
    mental_protection: int
    defence: DefenceProfile
    tags: list[str] = field(default_factory=list)
    traits: list[str] = field(default_factory=list)
    attacks: list[str] = field(default_factory=list)
    powers: list[str] = field(default_factory=list)


def _tag_names(monster: Any) -> list[str]:
    return [tag if isinstance(tag, str) else tag.tag for tag in monster.tags]


def _trait_names(monster: Any) -> list[str]:
    names = []
    for trait in monster.traits:
        definition = getattr(trait, "definition", None)
        if definition is not None:
            names.append(definition.name)
        else:
            names.append(trait.name or trait.trait_definition_id)
    return names


def build_monster_sheet(
    monster: Any,
    items_by_id: Mapping[str, EquipmentItem] | None = None,
) -> MonsterSheet:
    """
    Derive a monster's sheet.

    When any equipment slot is filled, protection comes from the equipped
    armor and shields and item bonuses are added to the stored modifiers.
    Otherwise the monster's stored protection values are used.

    Args:
        monster: A Monster row or MonsterInput
        items_by_id: Forge items available to resolve equipment slots

    Returns:
        The MonsterSheet
    """
    items_by_id = items_by_id or {}
    slots = slotted_item_ids(monster)
    equipped = resolve_equipped_items(slots, items_by_id)
    item_modifiers = highest_item_modifiers(equipped)

    if any(slots.values()):
        physical_protection, mental_protection = protection_totals(equipped)
    else:
        physical_protection = monster.physical_protection
        mental_protection = monster.mental_protection

    rows = []
    for attribute in CORE_ATTRIBUTE_ORDER:
        die = getattr(monster, f"{attribute}_die")
        modifier_field = ModifierField(f"{attribute}_modifier")
        rows.append(
            AttributeRow(
                attribute=attribute,
                die=die,
                label=die_label(die),
                numeric_value=numeric_value(die),
                resist_dice=getattr(monster, f"{attribute}_resist_dice"),
                modifier=getattr(monster, modifier_field.value) + item_modifiers[modifier_field],
            )
        )

    resilience = calculate_resilience(
        monster.level,
        monster.tier,
        monster.legendary,
        monster.attack_die,
        monster.defence_die,
        monster.fortitude_die,
        monster.intellect_die,
        monster.support_die,
        monster.bravery_die,
    )
    defence = calculate_defence_profile(
        monster.level,
        monster.defence_die,
        monster.fortitude_die,
        monster.intellect_die,
        monster.support_die,
        monster.bravery_die,
        physical_protection,
        mental_protection,
    )

    return MonsterSheet(
        name=monster.name,
        level=monster.level,
        tier=monster.tier.value,
        legendary=monster.legendary,
        attributes=rows,
        weapon_skill_dice=weapon_skill_dice_count(monster.attack_die, monster.bravery_die),
        weapon_skill_modifier=(
            monster.weapon_skill_modifier + item_modifiers[ModifierField.WEAPON_SKILL]
        ),
        armor_skill_modifier=(
            monster.armor_skill_modifier + item_modifiers[ModifierField.ARMOR_SKILL]
        ),
        resilience=resilience,
        physical_protection=physical_protection,
        mental_protection=mental_protection,
        defence=defence,
        tags=_tag_names(monster),
        traits=_trait_names(monster),
        attacks=[attack.attack_name for attack in monster.attacks],
        powers=[power.name for power in monster.powers],
    )


def _signed(value: int | float) -> str:
    return f"+{value}" if value >= 0 else str(value)


def render_monster_sheet(sheet: MonsterSheet) -> list[str]:
    """Render a sheet as plain text lines for the print view."""
    title = f"{sheet.name} (Level {sheet.level} {sheet.tier.title()}"
    title += ", Legendary)" if sheet.legendary else ")"

    lines = [title, "=" * len(title)]
    if sheet.tags:
        lines.append("Tags: " + ", ".join(sheet.tags))

    lines.append(
        f"Physical Resilience: {sheet.resilience.physical_resilience_max}  "
        f"Mental Perseverance: {sheet.resilience.mental_perseverance_max}"
    )
    lines.append(f"PPV: {sheet.physical_protection}  MPV: {sheet.mental_protection}")
    lines.append("")

    for row in sheet.attributes:
        lines.append(
            f"{row.attribute.value.title():<10} {row.label:>4}  "
            f"resist {row.resist_dice}  mod {_signed(row.modifier)}"
        )
    lines.append("")

    lines.append(
        f"Weapon Skill: {sheet.weapon_skill_dice} dice ({_signed(sheet.weapon_skill_modifier)})"
    )
    lines.append(
        f"Armor Skill: {sheet.defence.armor_skill_dice} dice "
        f"({_signed(sheet.armor_skill_modifier)})"
    )
    lines.append(f"Dodge: {sheet.defence.dodge_value}")
    lines.extend(defence_lines(sheet.defence))

    if sheet.attacks:
        lines.append("")
        lines.append("Attacks: " + ", ".join(sheet.attacks))
    if sheet.traits:
        lines.append("Traits: " + ", ".join(sheet.traits))
    if sheet.powers:
        lines.append("Powers: " + ", ".join(sheet.powers))

    return lines
