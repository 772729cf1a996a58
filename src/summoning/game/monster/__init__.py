"""Monster rules: attribute dice and the values derived from them."""

from .attributes import (
    CORE_ATTRIBUTE_ORDER,
    DIE_SIZES,
    CoreAttribute,
    DieSize,
    armor_skill_dice_count,
    die_size_to_number,
    dodge_value,
    numeric_value,
    skill_dice_contribution,
    weapon_skill_dice_count,
    willpower_dice_count,
)

__all__ = [
    "CORE_ATTRIBUTE_ORDER",
    "DIE_SIZES",
    "CoreAttribute",
    "DieSize",
    "armor_skill_dice_count",
    "die_size_to_number",
    "dodge_value",
    "numeric_value",
    "skill_dice_contribution",
    "weapon_skill_dice_count",
    "willpower_dice_count",
]
