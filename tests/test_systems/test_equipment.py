"""Tests for equip-time constraints."""

import pytest

from neonsheet.exceptions import ActionsLockedError
from neonsheet.game.character.stats import compute_stats
from neonsheet.game.systems.equipment import (
    ActionLock,
    EquipDecision,
    RejectionReason,
    authorize_equip_toggle,
    can_equip,
)
from neonsheet.game.world.item import ArmorSubtype, ItemType


@pytest.fixture
def armor(make_item):
    """Factory for light armor pieces."""
    return lambda item_id: make_item(item_id, item_type=ItemType.ARMOR, armor_subtype=ArmorSubtype.LIGHT)


@pytest.fixture
def weapon(make_item):
    """Factory for melee weapons."""
    return lambda item_id: make_item(item_id, item_type=ItemType.WEAPON, weapon_subtype="melee")


class TestArmorSlot:
    """Test the single armor slot."""

    def test_first_armor_allowed(self, make_character, armor):
        """Test equipping armor with none worn."""
        stats = compute_stats(make_character(), [])

        assert can_equip(armor("jacket"), stats).allowed is True

    def test_second_armor_rejected(self, make_character, armor):
        """Test that a second armor piece is refused."""
        stats = compute_stats(make_character(), [armor("jacket")])

        decision = can_equip(armor("vest"), stats)

        assert decision.allowed is False
        assert decision.reason == RejectionReason.ARMOR_SLOT_FULL
        assert "1 armor" in decision.message


class TestWeaponSlots:
    """Test the three weapon slots."""

    def test_third_weapon_allowed(self, make_character, weapon):
        """Test that two equipped weapons leave room for a third."""
        stats = compute_stats(make_character(), [weapon("knife"), weapon("bat")])

        assert can_equip(weapon("machete"), stats).allowed is True

    def test_fourth_weapon_rejected(self, make_character, weapon):
        """Test that a fourth weapon is refused."""
        stats = compute_stats(make_character(), [weapon("knife"), weapon("bat"), weapon("machete")])

        decision = can_equip(weapon("katana"), stats)

        assert decision.allowed is False
        assert decision.reason == RejectionReason.WEAPON_SLOTS_FULL
        assert decision.available == 0

    def test_armor_does_not_use_weapon_slots(self, make_character, weapon, armor):
        """Test that slot counts are tracked per type."""
        stats = compute_stats(make_character(), [weapon("knife"), weapon("bat"), weapon("machete")])

        assert can_equip(armor("jacket"), stats).allowed is True


class TestImplantCapacity:
    """Test implant capacity checks for cyberware."""

    def test_cyberware_within_capacity(self, make_character, make_item):
        """Test cyberware that fits exactly."""
        stats = compute_stats(make_character(implant_capacity=3), [])
        eyes = make_item("cyber_eyes", item_type=ItemType.CYBERWARE, ic_cost=3)

        assert can_equip(eyes, stats).allowed is True

    def test_cyberware_over_capacity(self, make_character, make_item):
        """Test the implant capacity rejection and its numbers."""
        installed = make_item("reflex_chip", item_type=ItemType.CYBERWARE, ic_cost=1)
        stats = compute_stats(make_character(implant_capacity=3), [installed])
        arm = make_item("cyber_arm", item_type=ItemType.CYBERWARE, ic_cost=3)

        decision = can_equip(arm, stats)

        assert decision.allowed is False
        assert decision.reason == RejectionReason.INSUFFICIENT_IMPLANT_CAPACITY
        assert decision.required == 3
        assert decision.available == 2
        assert decision.message == (
            "Not enough Implant Capacity. This cyberware requires 3 IC, "
            "but you only have 2 IC remaining."
        )

    def test_capacity_includes_ic_mod(self, make_character, make_item):
        """Test that equipped ic_mod raises what cyberware may use."""
        booster = make_item("neural_booster", ic_mod=2)
        stats = compute_stats(make_character(implant_capacity=3), [booster])
        arm = make_item("cyber_arm", item_type=ItemType.CYBERWARE, ic_cost=5)

        assert can_equip(arm, stats).allowed is True

    def test_non_cyberware_ignores_capacity(self, make_character, make_item):
        """Test that ic_cost on other types is not checked."""
        stats = compute_stats(make_character(implant_capacity=0), [])
        odd = make_item("odd_hat", ic_cost=10)

        assert can_equip(odd, stats).allowed is True


class TestToggle:
    """Test authorizing equip toggles."""

    def test_unequip_always_allowed(self, make_character, armor):
        """Test that unequipping never hits a slot rule."""
        jacket = armor("jacket")
        stats = compute_stats(make_character(), [jacket, armor("vest")])

        decision = authorize_equip_toggle(jacket, True, stats)

        assert decision == EquipDecision.accept()

    def test_equip_goes_through_rules(self, make_character, armor):
        """Test that equipping applies the slot rules."""
        stats = compute_stats(make_character(), [armor("jacket")])

        decision = authorize_equip_toggle(armor("vest"), False, stats)

        assert decision.reason == RejectionReason.ARMOR_SLOT_FULL

    def test_locked_refuses_equip_and_unequip(self, make_character, armor):
        """Test that a locked lock refuses both directions."""
        stats = compute_stats(make_character(), [])
        lock = ActionLock(locked=True, reason="Cutscene")

        with pytest.raises(ActionsLockedError, match="Cutscene"):
            authorize_equip_toggle(armor("jacket"), False, stats, lock)
        with pytest.raises(ActionsLockedError):
            authorize_equip_toggle(armor("jacket"), True, stats, lock)

    def test_default_lock_message(self):
        """Test the message when no reason is given."""
        with pytest.raises(ActionsLockedError, match="DM has locked player actions"):
            ActionLock(locked=True).ensure_unlocked()
