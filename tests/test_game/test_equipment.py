"""Tests for equipment slots, protection and item modifiers."""

import pytest

from summoning.game.monster.equipment import (
    ArmorLocation,
    AttributeModifier,
    EquipmentError,
    EquipmentItem,
    EquipmentSlot,
    ItemSize,
    ItemType,
    ModifierField,
    highest_item_modifiers,
    is_two_handed,
    is_valid_body_item_for_slot,
    is_valid_hand_item_for_slot,
    map_modifier_key,
    protection_totals,
    resolve_equipped_items,
    slotted_item_ids,
    validate_loadout,
)
from summoning.game.monster.validation import normalize_monster_input


def make_item(item_id, item_type, **kwargs):
    """Build an EquipmentItem with a name derived from its id."""
    name = item_id.replace("_", " ").title()
    return EquipmentItem(id=item_id, name=name, type=item_type, **kwargs)


@pytest.fixture
def items():
    """A small forge catalog keyed by id."""
    catalog = [
        make_item("dagger", ItemType.WEAPON, size=ItemSize.SMALL),
        make_item("sword", ItemType.WEAPON, size=ItemSize.ONE_HANDED),
        make_item("greataxe", ItemType.WEAPON, size=ItemSize.TWO_HANDED),
        make_item("buckler", ItemType.SHIELD, size=ItemSize.ONE_HANDED, ppv=1, mpv=0),
        make_item("helm", ItemType.ARMOR, armor_location=ArmorLocation.HEAD, ppv=2, mpv=1),
        make_item("cuirass", ItemType.ARMOR, armor_location=ArmorLocation.TORSO, ppv=4, mpv=2),
        make_item("charm", ItemType.ITEM, ppv=9, mpv=9),
    ]
    return {item.id: item for item in catalog}


def empty_slots():
    return {slot: None for slot in EquipmentSlot}


class TestModifierKeys:
    """Tests for mapping item attribute labels to monster modifiers."""

    def test_core_attributes(self):
        assert map_modifier_key("Attack") is ModifierField.ATTACK
        assert map_modifier_key("bravery") is ModifierField.BRAVERY

    def test_spelling_variants(self):
        assert map_modifier_key("Defense") is ModifierField.DEFENCE
        assert map_modifier_key("Armour Skill") is ModifierField.ARMOR_SKILL
        assert map_modifier_key("  weapon skill ") is ModifierField.WEAPON_SKILL

    def test_unknown(self):
        assert map_modifier_key("Charisma") is None


class TestHighestItemModifiers:
    """Tests for item attribute bonuses."""

    def test_highest_wins_not_sum(self):
        """Two items boosting the same attribute do not stack."""
        first = make_item(
            "ring",
            ItemType.ITEM,
            global_attribute_modifiers=[AttributeModifier(attribute="Attack", amount=1)],
        )
        second = make_item(
            "amulet",
            ItemType.ITEM,
            global_attribute_modifiers=[AttributeModifier(attribute="attack", amount=3)],
        )
        result = highest_item_modifiers([first, second])
        assert result[ModifierField.ATTACK] == 3

    def test_all_fields_present(self):
        """Fields without any bonus report zero."""
        result = highest_item_modifiers([])
        assert set(result) == set(ModifierField)
        assert all(amount == 0 for amount in result.values())

    def test_skips_empty_slots_and_bad_entries(self):
        item = make_item(
            "odd_relic",
            ItemType.ITEM,
            global_attribute_modifiers=[
                {"attribute": "", "amount": 5},
                {"attribute": "Support", "amount": "lots"},
                {"attribute": "Luck", "amount": 2},
                {"attribute": "Intellect", "amount": "2"},
            ],
        )
        result = highest_item_modifiers([None, item])
        assert result[ModifierField.SUPPORT] == 0
        assert result[ModifierField.INTELLECT] == 2

    def test_fractional_and_string_amounts(self):
        """Amounts parse like numbers; fractions are kept."""
        item = make_item(
            "runed_band",
            ItemType.ITEM,
            global_attribute_modifiers=[
                {"attribute": "Attack", "amount": 1.5},
                {"attribute": "Fortitude", "amount": "1.5"},
                {"attribute": "Support", "amount": "3"},
                {"attribute": "Bravery", "amount": "inf"},
            ],
        )
        result = highest_item_modifiers([item])
        assert result[ModifierField.ATTACK] == 1.5
        assert result[ModifierField.FORTITUDE] == 1.5
        assert result[ModifierField.SUPPORT] == 3
        assert isinstance(result[ModifierField.SUPPORT], int)
        assert result[ModifierField.BRAVERY] == 0

    def test_negative_bonus(self):
        """A lone penalty still applies."""
        item = make_item(
            "cursed_band",
            ItemType.ITEM,
            global_attribute_modifiers=[AttributeModifier(attribute="Defence", amount=-2)],
        )
        assert highest_item_modifiers([item])[ModifierField.DEFENCE] == -2


class TestProtectionTotals:
    """Tests for summing item protection."""

    def test_armor_and_shields_only(self, items):
        """Non-armor items never add protection."""
        equipped = [items["helm"], items["cuirass"], items["buckler"], items["charm"], None]
        assert protection_totals(equipped) == (7, 3)

    def test_nothing_equipped(self):
        assert protection_totals([None, None]) == (0, 0)


class TestSlotRules:
    """Tests for which items fit which slots."""

    def test_main_hand(self, items):
        assert is_valid_hand_item_for_slot(EquipmentSlot.MAIN_HAND, items["sword"])
        assert is_valid_hand_item_for_slot(EquipmentSlot.MAIN_HAND, items["greataxe"])
        assert not is_valid_hand_item_for_slot(EquipmentSlot.MAIN_HAND, items["dagger"])

    def test_off_hand(self, items):
        assert is_valid_hand_item_for_slot(EquipmentSlot.OFF_HAND, items["buckler"])
        assert not is_valid_hand_item_for_slot(EquipmentSlot.OFF_HAND, items["greataxe"])

    def test_small_slot(self, items):
        assert is_valid_hand_item_for_slot(EquipmentSlot.SMALL, items["dagger"])
        assert not is_valid_hand_item_for_slot(EquipmentSlot.SMALL, items["sword"])

    def test_hand_slots_reject_armor(self, items):
        assert not is_valid_hand_item_for_slot(EquipmentSlot.MAIN_HAND, items["helm"])
        assert not is_valid_hand_item_for_slot(EquipmentSlot.MAIN_HAND, None)

    def test_body_slots_match_location(self, items):
        assert is_valid_body_item_for_slot(EquipmentSlot.HEAD, items["helm"])
        assert is_valid_body_item_for_slot(EquipmentSlot.TORSO, items["cuirass"])
        assert not is_valid_body_item_for_slot(EquipmentSlot.FEET, items["helm"])
        assert not is_valid_body_item_for_slot(EquipmentSlot.HEAD, items["buckler"])

    def test_two_handed(self, items):
        assert is_two_handed(items["greataxe"])
        assert not is_two_handed(items["sword"])
        assert not is_two_handed(None)


class TestValidateLoadout:
    """Tests for whole-loadout validation."""

    def test_valid_loadout(self, items):
        slots = empty_slots()
        slots[EquipmentSlot.MAIN_HAND] = "sword"
        slots[EquipmentSlot.OFF_HAND] = "buckler"
        slots[EquipmentSlot.HEAD] = "helm"
        validate_loadout(slots, items)

    def test_empty_loadout(self, items):
        validate_loadout(empty_slots(), items)

    def test_unknown_item(self, items):
        slots = empty_slots()
        slots[EquipmentSlot.HEAD] = "crown"
        with pytest.raises(EquipmentError, match="Unknown item 'crown'"):
            validate_loadout(slots, items)

    def test_wrong_slot(self, items):
        slots = empty_slots()
        slots[EquipmentSlot.FEET] = "helm"
        with pytest.raises(EquipmentError, match="cannot be equipped in slot feet"):
            validate_loadout(slots, items)

    def test_two_handed_blocks_off_hand(self, items):
        slots = empty_slots()
        slots[EquipmentSlot.MAIN_HAND] = "greataxe"
        slots[EquipmentSlot.OFF_HAND] = "buckler"
        with pytest.raises(EquipmentError, match="two-handed"):
            validate_loadout(slots, items)


class TestSlotResolution:
    """Tests for reading and resolving slot columns."""

    def test_slotted_item_ids_from_input(self):
        monster = normalize_monster_input(
            {"name": "Knight", "tier": "SOLDIER", "head_item_id": "helm"}
        )
        slots = slotted_item_ids(monster)
        assert slots[EquipmentSlot.HEAD] == "helm"
        assert slots[EquipmentSlot.MAIN_HAND] is None
        assert len(slots) == 8

    def test_resolve_unknown_to_none(self, items):
        slots = empty_slots()
        slots[EquipmentSlot.HEAD] = "helm"
        slots[EquipmentSlot.TORSO] = "missing"
        resolved = resolve_equipped_items(slots, items)
        assert items["helm"] in resolved
        assert [item for item in resolved if item is not None] == [items["helm"]]
