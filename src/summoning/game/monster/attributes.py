"""Core attribute dice and the combat values derived from them.

A monster's six core attributes are each rated with a die size. Everything in
this module is a pure function of those dice (plus level and physical weight
for dodge), and every function accepts ``None`` for an attribute that has not
been set yet. Unset attributes contribute zero instead of raising, so partially
filled monsters can still be previewed.
"""

import math
from enum import StrEnum


class DieSize(StrEnum):
    """Die sizes an attribute can be rated with."""

    D4 = "D4"
    D6 = "D6"
    D8 = "D8"
    D10 = "D10"
    D12 = "D12"


class CoreAttribute(StrEnum):
    """The six core monster attributes."""

    ATTACK = "attack"
    DEFENCE = "defence"
    FORTITUDE = "fortitude"
    INTELLECT = "intellect"
    SUPPORT = "support"
    BRAVERY = "bravery"


# Display order used on editor and print sheets
CORE_ATTRIBUTE_ORDER = list(CoreAttribute)

DIE_SIZES = list(DieSize)

_DIE_FACES: dict[DieSize, int] = {
    DieSize.D4: 4,
    DieSize.D6: 6,
    DieSize.D8: 8,
    DieSize.D10: 10,
    DieSize.D12: 12,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going toward positive infinity.

    Python's built-in ``round`` rounds half to even, which would turn 2.5 into 2.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return math.floor(value + 0.5)


def die_size_to_number(die: DieSize | None) -> int:
    """Return the face count of a die, or 0 when the attribute is unset."""
    if die is None:
        return 0
    return _DIE_FACES[die]


def numeric_value(die: DieSize | None) -> int:
    """Numeric value of a core attribute.

    The attribute value currently equals the die's face count. It is kept as
    its own entry point so rule changes to attribute values do not touch raw
    die handling.
    """
    return die_size_to_number(die)


def skill_dice_contribution(die: DieSize | None) -> int:
    """Skill dice an attribute adds: half its numeric value, rounded half-up.

    Examples:
        >>> skill_dice_contribution(DieSize.D6)
        3
        >>> skill_dice_contribution(None)
        0
    """
    numeric = die_size_to_number(die)
    if not numeric:
        return 0
    return round_half_up(numeric / 2)


def _skill_dice_count(first: DieSize | None, second: DieSize | None) -> int:
    # Ceiling here, unlike the half-up rounding of each contribution
    total = skill_dice_contribution(first) + skill_dice_contribution(second)
    return max(1, math.ceil(total / 2))


def weapon_skill_dice_count(attack_die: DieSize | None, bravery_die: DieSize | None) -> int:
    """Dice rolled for weapon attacks, from Attack and Bravery. Never below 1."""
    return _skill_dice_count(attack_die, bravery_die)


def armor_skill_dice_count(defence_die: DieSize | None, fortitude_die: DieSize | None) -> int:
    """Dice rolled for physical protection, from Defence and Fortitude. Never below 1."""
    return _skill_dice_count(defence_die, fortitude_die)


def willpower_dice_count(support_die: DieSize | None, bravery_die: DieSize | None) -> int:
    """Dice rolled for mental protection, from Support and Bravery. Never below 1."""
    return _skill_dice_count(support_die, bravery_die)


def dodge_value(
    defence_die: DieSize | None,
    intellect_die: DieSize | None,
    level: int,
    physical_weight: int,
) -> int:
    """Calculate a monster's dodge value.

    Args:
        defence_die: Defence attribute die, or None if unset
        intellect_die: Intellect attribute die, or None if unset
        level: Monster level
        physical_weight: Physical weight carried (total physical protection of gear)

    Returns:
        Defence + Intellect + level - physical weight. The result is not
        clamped and may be negative.

    Examples:
        >>> dodge_value(DieSize.D8, DieSize.D6, 3, 2)
        15
    """
    return numeric_value(defence_die) + numeric_value(intellect_die) + level - physical_weight


def die_label(die: DieSize | None) -> str:
    """Short display label for a die: ``d8`` for D8, ``-`` when unset."""
    if die is None:
        return "-"
    return "d" + die.value[1:]
