"""Tests for ability aggregation and charges."""

import pytest

from neonsheet.exceptions import NoChargesRemainingError
from neonsheet.game.character.abilities import (
    Ability,
    AbilityDef,
    AbilitySource,
    CharacterAbility,
    ChargeType,
    ItemAbilityGrant,
    RestType,
    aggregate_abilities,
    can_use_ability,
    charge_label,
    class_feature_ability,
    restore_charges,
    spend_charge,
)
from neonsheet.game.character.classes import ClassFeature


@pytest.fixture
def dash():
    """Character ability with short-rest charges."""
    return CharacterAbility(
        id="grant-1",
        ability=AbilityDef(
            id="dash",
            name="Dash",
            ability_type="bonus_action",
            charge_type=ChargeType.SHORT_REST,
            max_charges=2,
            charges_per_rest=1,
        ),
        current_charges=1,
    )


@pytest.fixture
def overdrive():
    """Class feature with one charge."""
    return ClassFeature(name="OVERDRIVE", description="Hit harder.", type="BONUS", charges=1)


def _ability(charge_type: ChargeType, current: int | None, max_charges: int | None = 3, per_rest: int | None = None):
    return Ability(
        id="test",
        name="Test",
        charge_type=charge_type,
        max_charges=max_charges,
        charges_per_rest=per_rest,
        current_charges=current,
        source=AbilitySource.CHARACTER,
    )


class TestClassFeatureAbility:
    """Test converting class features into abilities."""

    def test_feature_with_charges(self, overdrive):
        """Test the derived id and uses-type charges."""
        ability = class_feature_ability(overdrive)

        assert ability.id == "class_feature_OVERDRIVE"
        assert ability.source == AbilitySource.CLASS
        assert ability.charge_type == ChargeType.USES
        assert ability.max_charges == 1
        assert ability.current_charges == 1
        assert ability.ability_type == "BONUS"

    def test_feature_without_charges(self):
        """Test that a feature with no charges is infinite."""
        ability = class_feature_ability(ClassFeature(name="ALWAYS ON"))

        assert ability.charge_type == ChargeType.INFINITE
        assert ability.max_charges is None
        assert ability.charges_per_rest is None
        assert ability.current_charges is None


class TestAggregateAbilities:
    """Test merging abilities from all sources."""

    def test_merge_order(self, dash, overdrive):
        """Test character abilities first, then class features, then item abilities."""
        item_grant = ItemAbilityGrant(
            item={"id": "shock_gloves", "name": "Shock Gloves", "item_type": "weapon"},
            abilities=[AbilityDef(id="zap", name="Zap", ability_type="action")],
            requires_equipped=True,
            equipped=True,
        )

        merged = aggregate_abilities([dash], [overdrive], [item_grant])

        assert [ability.id for ability in merged] == ["dash", "class_feature_OVERDRIVE", "zap"]
        assert [ability.source for ability in merged] == [
            AbilitySource.CHARACTER,
            AbilitySource.CLASS,
            AbilitySource.ITEM,
        ]
        assert merged[0].current_charges == 1
        assert merged[0].grant_id == "grant-1"
        assert merged[2].item_name == "Shock Gloves"

    def test_unequipped_item_abilities_skipped(self):
        """Test that abilities needing an equipped item are left out while it is not."""
        grant = ItemAbilityGrant(
            item={"id": "shock_gloves", "name": "Shock Gloves"},
            abilities=[AbilityDef(id="zap", name="Zap")],
            requires_equipped=True,
            equipped=False,
        )

        assert aggregate_abilities([], [], [grant]) == []

    def test_carried_item_abilities_included(self):
        """Test that abilities not requiring equip are included for carried items."""
        grant = ItemAbilityGrant(
            item={"id": "lucky_coin", "name": "Lucky Coin"},
            abilities=[AbilityDef(id="reroll", name="Reroll")],
            requires_equipped=False,
            equipped=False,
        )

        merged = aggregate_abilities([], [], [grant])

        assert [ability.id for ability in merged] == ["reroll"]

    def test_no_deduplication(self, overdrive):
        """Test that the same ability from two sources appears twice."""
        merged = aggregate_abilities([], [overdrive, overdrive], [])

        assert len(merged) == 2

    def test_empty(self):
        """Test no sources gives no abilities."""
        assert aggregate_abilities([], [], []) == []


class TestCharges:
    """Test spending and restoring charges."""

    def test_infinite_always_usable(self):
        """Test that infinite abilities never run out."""
        ability = _ability(ChargeType.INFINITE, None, max_charges=None)

        assert can_use_ability(ability) is True
        assert spend_charge(ability) == ability

    def test_spend_charge(self):
        """Test that spending decrements current charges."""
        ability = _ability(ChargeType.LONG_REST, 2)

        assert spend_charge(ability).current_charges == 1

    def test_spend_with_no_charges(self):
        """Test that an empty ability cannot be used."""
        ability = _ability(ChargeType.USES, 0)

        assert can_use_ability(ability) is False
        with pytest.raises(NoChargesRemainingError):
            spend_charge(ability)

    def test_short_rest_recovers_on_any_rest(self):
        """Test that short-rest abilities recover on short and long rests."""
        ability = _ability(ChargeType.SHORT_REST, 0, max_charges=3, per_rest=2)

        assert restore_charges(ability, RestType.SHORT_REST) == 2
        assert restore_charges(ability, RestType.LONG_REST) == 2

    def test_long_rest_needs_long_rest(self):
        """Test that long-rest abilities ignore short rests."""
        ability = _ability(ChargeType.LONG_REST, 1, max_charges=3)

        assert restore_charges(ability, RestType.SHORT_REST) == 1
        assert restore_charges(ability, RestType.LONG_REST) == 3

    def test_restore_capped_at_max(self):
        """Test that restoring never exceeds max charges."""
        ability = _ability(ChargeType.SHORT_REST, 2, max_charges=3, per_rest=2)

        assert restore_charges(ability, RestType.SHORT_REST) == 3

    def test_uses_never_recover(self):
        """Test that uses-type abilities keep their count through rests."""
        ability = _ability(ChargeType.USES, 0, max_charges=3)

        assert restore_charges(ability, RestType.LONG_REST) == 0

    @pytest.mark.parametrize(
        ("charge_type", "max_charges", "expected"),
        [
            (ChargeType.INFINITE, None, "Unlimited"),
            (ChargeType.SHORT_REST, 2, "2 / Short Rest"),
            (ChargeType.LONG_REST, 1, "1 / Long Rest"),
            (ChargeType.USES, 3, "3 Uses"),
            ("mystery", 1, "Unknown"),
        ],
    )
    def test_charge_label(self, charge_type, max_charges, expected):
        """Test display labels for each charge type."""
        assert charge_label(charge_type, max_charges) == expected
