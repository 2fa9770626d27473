"""Tests for derived stat computation."""

from neonsheet.game.character.classes import get_class_by_id
from neonsheet.game.character.stats import (
    ARMOR_PENALTY_AC,
    ARMOR_PENALTY_SPEED,
    compute_stats,
)
from neonsheet.game.world.item import ArmorSubtype, Item, ItemType


class TestBaseValues:
    """Test stats with nothing equipped."""

    def test_no_items_returns_base_values(self, make_character):
        """Test that an empty equipped set leaves every base value unchanged."""
        base = make_character()

        stats = compute_stats(base, [], get_class_by_id("solo"))

        assert stats.hp == 50
        assert stats.ac == 12
        assert stats.strength == 1
        assert stats.dexterity == 2
        assert stats.charisma == -1
        assert stats.speed == 30
        assert stats.initiative == 1
        assert stats.ic == 3
        assert stats.ic_used == 0
        assert stats.ic_remaining == 3
        assert stats.skill_mods == {}
        assert stats.armor_count == 0
        assert stats.weapon_count == 0
        assert stats.has_non_proficient_armor is False

    def test_missing_fields_use_fallbacks(self, make_character):
        """Test that records without speed, initiative or IC read as 30, 0 and 3."""
        base = make_character(speed=None, initiative_modifier=None, implant_capacity=None)

        stats = compute_stats(base, [])

        assert stats.speed == 30
        assert stats.initiative == 0
        assert stats.ic == 3
        assert stats.ic_remaining == 3

    def test_hp_is_built_from_max_hp(self, make_character, make_item):
        """Test that the hp stat adds modifiers to max HP, not current HP."""
        base = make_character(current_hp=5, max_hp=50)
        vest = make_item("life_vest", item_type=ItemType.ITEM, hp_mod=10)

        stats = compute_stats(base, [vest])

        assert stats.hp == 60


class TestModifierAccumulation:
    """Test summing modifiers across the equipped set."""

    def test_modifiers_sum_across_items(self, make_character, make_item):
        """Test that every modifier field is summed."""
        base = make_character()
        gloves = make_item("grip_gloves", str_mod=1, dex_mod=1, init_mod=1)
        visor = make_item("tac_visor", wis_mod=2, ac_mod=1, speed_mod=-5, ic_mod=1)

        stats = compute_stats(base, [gloves, visor], get_class_by_id("solo"))

        assert stats.strength == 2
        assert stats.dexterity == 3
        assert stats.wisdom == 2
        assert stats.ac == 13
        assert stats.speed == 25
        assert stats.initiative == 2
        assert stats.ic == 4

    def test_order_does_not_matter(self, make_character, make_item):
        """Test that reordering the equipped items gives identical stats."""
        base = make_character()
        items = [
            make_item("a", str_mod=2, skill_mods={"Hacking": 1}),
            make_item("b", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.HEAVY, ac_mod=4),
            make_item("c", item_type=ItemType.CYBERWARE, ic_cost=2, dex_mod=1),
            make_item("d", skill_mods={"Hacking": 2, "Stealth": -1}),
        ]
        class_def = get_class_by_id("icon")

        forward = compute_stats(base, items, class_def)
        backward = compute_stats(base, list(reversed(items)), class_def)

        assert forward == backward

    def test_recomputing_is_stable(self, make_character, make_item):
        """Test that computing twice from the same input gives equal results."""
        base = make_character()
        items = [make_item("a", ac_mod=1), make_item("b", con_mod=2)]

        assert compute_stats(base, items) == compute_stats(base, items)

    def test_skill_mods_aggregate_by_name(self, make_character, make_item):
        """Test that skill bonuses for the same skill are summed."""
        base = make_character()
        items = [
            make_item("deck", skill_mods={"Hacking": 2}),
            make_item("implant", skill_mods={"Hacking": 1, "Stealth": 1}),
        ]

        stats = compute_stats(base, items)

        assert stats.skill_mods == {"Hacking": 3, "Stealth": 1}

    def test_none_modifiers_read_as_zero(self, make_character):
        """Test that items with missing modifier values contribute nothing."""
        base = make_character()
        item = Item(id="old_item", name="Old Item", str_mod=None, ac_mod=None, skill_mods=None)

        stats = compute_stats(base, [item])

        assert stats.strength == base.strength
        assert stats.ac == base.ac
        assert stats.skill_mods == {}


class TestArmorProficiency:
    """Test the non-proficient armor penalty."""

    def test_proficient_armor_has_no_penalty(self, make_character, make_item):
        """Test that armor the class is trained in is free of penalty."""
        base = make_character()
        plate = make_item("plate", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.HEAVY, ac_mod=4)

        stats = compute_stats(base, [plate], get_class_by_id("solo"))

        assert stats.has_non_proficient_armor is False
        assert stats.ac == 16
        assert stats.speed == 30

    def test_non_proficient_armor_penalty(self, make_character, make_item):
        """Test that armor outside the class proficiencies costs AC and speed."""
        base = make_character(class_id="icon")
        plate = make_item("plate", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.HEAVY, ac_mod=4)

        stats = compute_stats(base, [plate], get_class_by_id("icon"))

        assert stats.has_non_proficient_armor is True
        assert stats.ac == 12 + 4 + ARMOR_PENALTY_AC
        assert stats.speed == 30 + ARMOR_PENALTY_SPEED

    def test_penalty_applies_once(self, make_character, make_item):
        """Test that several non-proficient pieces still give a single penalty."""
        base = make_character(class_id="icon")
        plate = make_item("plate", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.HEAVY)
        shield = make_item("shield", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.SHIELD)

        stats = compute_stats(base, [plate, shield], get_class_by_id("icon"))

        assert stats.armor_count == 2
        assert stats.ac == 12 - 2
        assert stats.speed == 20

    def test_removing_armor_lifts_penalty(self, make_character, make_item):
        """Test that the penalty follows the equipped set with no lingering state."""
        base = make_character(class_id="icon")
        plate = make_item("plate", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.HEAVY)
        class_def = get_class_by_id("icon")

        assert compute_stats(base, [plate], class_def).has_non_proficient_armor is True
        stats = compute_stats(base, [], class_def)

        assert stats.has_non_proficient_armor is False
        assert stats.ac == 12
        assert stats.speed == 30

    def test_unknown_class_allows_clothes_and_light(self, make_character, make_item):
        """Test that with no class definition only clothes and light armor are proficient."""
        base = make_character(class_id="no_such_class")
        jacket = make_item("jacket", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.LIGHT)
        vest = make_item("vest", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.MEDIUM)

        assert compute_stats(base, [jacket], None).has_non_proficient_armor is False
        assert compute_stats(base, [vest], None).has_non_proficient_armor is True

    def test_armor_without_subtype_has_no_penalty(self, make_character, make_item):
        """Test that armor missing a subtype is never treated as non-proficient."""
        base = make_character(class_id="icon")
        mystery = make_item("mystery_armor", item_type=ItemType.ARMOR, ac_mod=2)

        stats = compute_stats(base, [mystery], get_class_by_id("icon"))

        assert stats.has_non_proficient_armor is False
        assert stats.ac == 14

    def test_class_without_clothes_proficiency(self, make_character, make_item):
        """Test that clothes are penalized for a class that does not list them."""
        base = make_character(class_id="bruiser")
        coat = make_item("coat", item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.CLOTHES)

        stats = compute_stats(base, [coat], get_class_by_id("bruiser"))

        assert stats.has_non_proficient_armor is True


class TestImplantCapacity:
    """Test implant capacity accounting."""

    def test_only_cyberware_uses_capacity(self, make_character, make_item):
        """Test that ic_cost counts for cyberware only."""
        base = make_character(implant_capacity=4)
        arm = make_item("cyber_arm", item_type=ItemType.CYBERWARE, ic_cost=2)
        odd_rifle = make_item("odd_rifle", item_type=ItemType.WEAPON, ic_cost=5)

        stats = compute_stats(base, [arm, odd_rifle])

        assert stats.ic_used == 2
        assert stats.ic_remaining == 2
        assert stats.weapon_count == 1

    def test_ic_mod_raises_capacity(self, make_character, make_item):
        """Test that equipped ic_mod items raise total capacity."""
        base = make_character(implant_capacity=3)
        booster = make_item("neural_booster", ic_mod=2)
        eyes = make_item("cyber_eyes", item_type=ItemType.CYBERWARE, ic_cost=4)

        stats = compute_stats(base, [booster, eyes])

        assert stats.ic == 5
        assert stats.ic_used == 4
        assert stats.ic_remaining == stats.ic - stats.ic_used

    def test_remaining_can_go_negative(self, make_character, make_item):
        """Test that losing capacity below what is installed is reported, not hidden."""
        base = make_character(implant_capacity=3)
        eyes = make_item("cyber_eyes", item_type=ItemType.CYBERWARE, ic_cost=3)
        faulty = make_item("faulty_chip", ic_mod=-1)

        stats = compute_stats(base, [eyes, faulty])

        assert stats.ic_remaining == -1
