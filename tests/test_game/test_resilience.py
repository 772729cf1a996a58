"""Tests for resilience pools and defence profiles."""

import pytest

from summoning.database.models import MonsterTier
from summoning.game.monster.attributes import DieSize
from summoning.game.monster.resilience import (
    DefenceProfile,
    block_per_success,
    calculate_defence_profile,
    calculate_resilience,
    defence_lines,
    dodge_dice,
)


class TestCalculateResilience:
    """Tests for physical resilience and mental perseverance maximums."""

    def test_elite(self):
        """Elite monsters double their base pools."""
        values = calculate_resilience(
            4,
            MonsterTier.ELITE,
            False,
            DieSize.D10,
            DieSize.D8,
            DieSize.D10,
            DieSize.D6,
            DieSize.D6,
            DieSize.D12,
        )
        assert values.physical_resilience_max == 64
        assert values.mental_perseverance_max == 56

    def test_legendary_elite(self):
        """Legendary elites add three quarters of the base on top."""
        values = calculate_resilience(
            4,
            MonsterTier.ELITE,
            True,
            DieSize.D10,
            DieSize.D8,
            DieSize.D10,
            DieSize.D6,
            DieSize.D6,
            DieSize.D12,
        )
        assert values.physical_resilience_max == 88
        assert values.mental_perseverance_max == 77

    def test_minion_uses_base(self):
        values = calculate_resilience(
            1, MonsterTier.MINION, False, DieSize.D4, DieSize.D6, DieSize.D4, None, None, None
        )
        assert values.physical_resilience_max == 15
        assert values.mental_perseverance_max == 1

    def test_soldier_rounds_half_up(self):
        """A base of 15 at x1.5 gives 22.5, which rounds to 23."""
        values = calculate_resilience(
            1, MonsterTier.SOLDIER, False, DieSize.D4, DieSize.D6, DieSize.D4, None, None, None
        )
        assert values.physical_resilience_max == 23

    def test_legendary_minion_rounds_half_up(self):
        """15 + 15 * 0.25 = 18.75 rounds to 19."""
        values = calculate_resilience(
            1, MonsterTier.MINION, True, DieSize.D4, DieSize.D6, DieSize.D4, None, None, None
        )
        assert values.physical_resilience_max == 19

    def test_unset_attributes_leave_level(self):
        """With no dice the pools come from level alone."""
        values = calculate_resilience(
            3, MonsterTier.BOSS, False, None, None, None, None, None, None
        )
        assert values.physical_resilience_max == 9
        assert values.mental_perseverance_max == 9

    @pytest.mark.parametrize(
        "tier,expected",
        [
            (MonsterTier.MINION, 10),
            (MonsterTier.SOLDIER, 15),
            (MonsterTier.ELITE, 20),
            (MonsterTier.BOSS, 30),
        ],
    )
    def test_tier_multipliers(self, tier, expected):
        values = calculate_resilience(10, tier, False, None, None, None, None, None, None)
        assert values.physical_resilience_max == expected

    @pytest.mark.parametrize(
        "tier,expected",
        [
            (MonsterTier.MINION, 13),
            (MonsterTier.SOLDIER, 20),
            (MonsterTier.ELITE, 28),
            (MonsterTier.BOSS, 40),
        ],
    )
    def test_legendary_bonus_by_tier(self, tier, expected):
        values = calculate_resilience(10, tier, True, None, None, None, None, None, None)
        assert values.physical_resilience_max == expected


class TestDodgeDice:
    """Tests for converting dodge value to dice."""

    def test_one_die_per_six_points(self):
        assert dodge_dice(1) == 1
        assert dodge_dice(6) == 1
        assert dodge_dice(7) == 2
        assert dodge_dice(12) == 2
        assert dodge_dice(15) == 3

    def test_zero_and_negative_roll_nothing(self):
        assert dodge_dice(0) == 0
        assert dodge_dice(-3) == 0
        assert dodge_dice(-12) == 0


class TestBlockPerSuccess:
    """Tests for wounds blocked per defence success."""

    def test_examples(self):
        assert block_per_success(4, 2) == 4
        assert block_per_success(5, 2) == 5
        assert block_per_success(3, 4) == 5

    def test_zero_dice_treated_as_one(self):
        assert block_per_success(0, 0) == 1
        assert block_per_success(2, 0) == 3


class TestDefenceProfile:
    """Tests for the combined defence profile."""

    def test_equipped_profile(self):
        """Gear protection is also the dodge weight."""
        profile = calculate_defence_profile(
            4,
            DieSize.D8,
            DieSize.D10,
            DieSize.D6,
            DieSize.D6,
            DieSize.D12,
            physical_protection=3,
            mental_protection=1,
        )
        assert profile == DefenceProfile(
            armor_skill_dice=5,
            physical_block_per_success=6,
            dodge_value=15,
            dodge_dice=3,
            willpower_dice=5,
            mental_block_per_success=6,
        )

    def test_heavy_gear_floors_dodge(self):
        """A negative dodge shows as zero with no dice."""
        profile = calculate_defence_profile(
            1, DieSize.D4, None, None, None, None, physical_protection=20, mental_protection=0
        )
        assert profile.dodge_value == 0
        assert profile.dodge_dice == 0

    def test_unset_attributes_still_roll(self):
        profile = calculate_defence_profile(1, None, None, None, None, None, 0, 0)
        assert profile.armor_skill_dice == 1
        assert profile.willpower_dice == 1
        assert profile.physical_block_per_success == 1
        assert profile.mental_block_per_success == 1


class TestDefenceLines:
    """Tests for the printed defence instructions."""

    def test_lines(self):
        profile = DefenceProfile(
            armor_skill_dice=5,
            physical_block_per_success=6,
            dodge_value=15,
            dodge_dice=3,
            willpower_dice=4,
            mental_block_per_success=2,
        )
        assert defence_lines(profile) == [
            "Physical Protection: Roll 5 dice, block 6 wounds per success.",
            "Dodge: Roll 3 dice. If successes exceed the attacker's successes, "
            "take 0 damage. Otherwise take full damage.",
            "Mental Protection: Roll 4 dice, block 2 wounds per success.",
        ]
