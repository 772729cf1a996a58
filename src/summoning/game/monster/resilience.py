"""Resilience pools and defence rolls derived from a monster's attributes."""

import math
from dataclasses import dataclass

from summoning.database.models.monster import MonsterTier
from summoning.game.monster.attributes import (
    DieSize,
    armor_skill_dice_count,
    dodge_value,
    numeric_value,
    round_half_up,
    willpower_dice_count,
)

TIER_MULTIPLIER: dict[MonsterTier, float] = {
    MonsterTier.MINION: 1,
    MonsterTier.SOLDIER: 1.5,
    MonsterTier.ELITE: 2,
    MonsterTier.BOSS: 3,
}

LEGENDARY_BONUS_BY_TIER: dict[MonsterTier, float] = {
    MonsterTier.MINION: 0.25,
    MonsterTier.SOLDIER: 0.5,
    MonsterTier.ELITE: 0.75,
    MonsterTier.BOSS: 1,
}

# Dodge and willpower values convert to dice at one die per six points
POINTS_PER_DEFENCE_DIE = 6


@dataclass(frozen=True)
class ResilienceValues:
    """Maximum physical resilience and mental perseverance."""

    physical_resilience_max: int
    mental_perseverance_max: int


@dataclass(frozen=True)
class DefenceProfile:
    """Dice and block values a monster uses when defending."""

    armor_skill_dice: int
    physical_block_per_success: int
    dodge_value: int
    dodge_dice: int
    willpower_dice: int
    mental_block_per_success: int


def calculate_resilience(
    level: int,
    tier: MonsterTier,
    legendary: bool,
    attack_die: DieSize | None,
    defence_die: DieSize | None,
    fortitude_die: DieSize | None,
    intellect_die: DieSize | None,
    support_die: DieSize | None,
    bravery_die: DieSize | None,
) -> ResilienceValues:
    """Calculate resilience maximums.

    Physical resilience grows from the physical attributes (Attack, Defence,
    Fortitude), mental perseverance from the mental ones (Intellect, Support,
    Bravery). Both start from the monster's level, are scaled by the tier
    multiplier, and legendary monsters add a tier-dependent share on top.

    Args:
        level: Monster level
        tier: Monster tier
        legendary: Whether the monster is legendary
        attack_die..bravery_die: Core attribute dice, None when unset

    Returns:
        ResilienceValues with both maximums, rounded half-up
    """
    multiplier = TIER_MULTIPLIER[tier]
    legendary_bonus = LEGENDARY_BONUS_BY_TIER[tier] if legendary else 0

    physical_base = (
        level
        + numeric_value(attack_die)
        + numeric_value(defence_die)
        + numeric_value(fortitude_die)
    )
    mental_base = (
        level
        + numeric_value(intellect_die)
        + numeric_value(support_die)
        + numeric_value(bravery_die)
    )

    return ResilienceValues(
        physical_resilience_max=round_half_up(
            physical_base * multiplier + physical_base * legendary_bonus
        ),
        mental_perseverance_max=round_half_up(
            mental_base * multiplier + mental_base * legendary_bonus
        ),
    )


def dodge_dice(dodge: int) -> int:
    """Dice rolled to dodge; negative dodge values roll nothing."""
    return max(0, math.ceil(dodge / POINTS_PER_DEFENCE_DIE))


def block_per_success(protection: int, dice: int) -> int:
    """Wounds blocked per defence success: ceil(protection / dice + dice)."""
    dice = max(1, dice)
    return math.ceil(protection / dice + dice)


def calculate_defence_profile(
    level: int,
    defence_die: DieSize | None,
    fortitude_die: DieSize | None,
    intellect_die: DieSize | None,
    support_die: DieSize | None,
    bravery_die: DieSize | None,
    physical_protection: int,
    mental_protection: int,
) -> DefenceProfile:
    """Build the defence profile shown on the monster sheet.

    The physical protection of worn gear doubles as the weight that slows the
    monster's dodge. The dodge value is floored at zero here, at render time.
    """
    armor_dice = armor_skill_dice_count(defence_die, fortitude_die)
    willpower = willpower_dice_count(support_die, bravery_die)
    dodge = max(0, dodge_value(defence_die, intellect_die, level, physical_protection))

    return DefenceProfile(
        armor_skill_dice=armor_dice,
        physical_block_per_success=block_per_success(physical_protection, armor_dice),
        dodge_value=dodge,
        dodge_dice=dodge_dice(dodge),
        willpower_dice=willpower,
        mental_block_per_success=block_per_success(mental_protection, willpower),
    )


def defence_lines(profile: DefenceProfile) -> list[str]:
    """Human-readable defence instructions for the print sheet."""
    return [
        f"Physical Protection: Roll {profile.armor_skill_dice} dice, "
        f"block {profile.physical_block_per_success} wounds per success.",
        f"Dodge: Roll {profile.dodge_dice} dice. If successes exceed the attacker's "
        "successes, take 0 damage. Otherwise take full damage.",
        f"Mental Protection: Roll {profile.willpower_dice} dice, "
        f"block {profile.mental_block_per_success} wounds per success.",
    ]
