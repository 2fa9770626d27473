"""Abilities from every source, merged into one chargeable list.

Three sources feed a character's ability list: abilities granted directly to
the character, the class features snapshotted into the character record, and
abilities attached to items. Class features have no persisted id, so theirs is
built from the feature name.
"""

from enum import StrEnum
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field

from neonsheet.exceptions import NoChargesRemainingError
from neonsheet.game.character.classes import ClassFeature
from neonsheet.game.world.item import Item

logger = structlog.get_logger(__name__)

CLASS_FEATURE_ID_PREFIX = "class_feature_"


class ChargeType(StrEnum):
    """How an ability's charges are spent and recovered."""

    INFINITE = "infinite"
    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"
    USES = "uses"


class RestType(StrEnum):
    """Kinds of rest that restore charges."""

    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"


class AbilitySource(StrEnum):
    """Where an aggregated ability came from."""

    CHARACTER = "character"
    CLASS = "class"
    ITEM = "item"


class AbilityDef(BaseModel):
    """
    Ability definition from the ability catalog.

    Attributes:
        id: Ability identifier
        ability_type: action, bonus_action, reaction, passive or utility
        charge_type: infinite, short_rest, long_rest or uses
        max_charges: Charge ceiling, None for infinite abilities
        charges_per_rest: Charges restored per qualifying rest
        effects: Effect descriptions
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    description: str = ""
    ability_type: str = "passive"
    charge_type: ChargeType = ChargeType.INFINITE
    max_charges: int | None = None
    charges_per_rest: int | None = None
    effects: list[str] = Field(default_factory=list)
    damage_dice: str | None = None
    damage_type: str | None = None
    range_feet: int | None = None
    area_of_effect: str | None = None
    duration: str | None = None


class Ability(AbilityDef):
    """An ability as shown on a character sheet, tagged with its source."""

    source: AbilitySource
    current_charges: int | None = None
    item_name: str | None = None
    grant_id: UUID | str | None = Field(
        default=None, description="Persisted grant id for character abilities"
    )


class CharacterAbility(BaseModel):
    """An ability granted directly to a character, with its persisted charge count."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID | str
    ability: AbilityDef
    current_charges: int = 0


class ItemAbilityGrant(BaseModel):
    """Abilities attached to one inventory item."""

    model_config = ConfigDict(frozen=True)

    item: Item
    abilities: list[AbilityDef] = Field(default_factory=list)
    requires_equipped: bool = True
    equipped: bool = True


def class_feature_ability(feature: ClassFeature) -> Ability:
    """
    Convert a snapshotted class feature into an ability.

    The id is derived from the feature name so it is stable across reloads.
    Features with charges are ``uses`` abilities starting full; the rest are
    infinite.
    """
    charges = feature.charges or None
    return Ability(
        id=f"{CLASS_FEATURE_ID_PREFIX}{feature.name}",
        name=feature.name,
        description=feature.description,
        ability_type=feature.type or "passive",
        charge_type=ChargeType.USES if charges else ChargeType.INFINITE,
        max_charges=charges,
        charges_per_rest=charges,
        effects=list(feature.effects),
        damage_dice=feature.damage_dice,
        damage_type=feature.damage_type,
        range_feet=feature.range_feet,
        area_of_effect=feature.area_of_effect,
        duration=feature.duration,
        current_charges=charges,
        source=AbilitySource.CLASS,
    )


def character_ability(granted: CharacterAbility) -> Ability:
    """Tag a directly granted ability with its source and persisted charges."""
    return Ability(
        **granted.ability.model_dump(),
        source=AbilitySource.CHARACTER,
        current_charges=granted.current_charges,
        grant_id=granted.id,
    )


def aggregate_abilities(
    character_abilities: list[CharacterAbility],
    class_features: list[ClassFeature],
    item_grants: list[ItemAbilityGrant],
) -> list[Ability]:
    """
    Merge abilities from all three sources.

    Order is character abilities, then class features, then item abilities,
    each group in input order. Nothing is de-duplicated. An item ability that
    requires its item to be equipped is only included while it is.

    Args:
        character_abilities: Abilities granted directly to the character
        class_features: Class features from the character record
        item_grants: Abilities attached to the character's items

    Returns:
        The merged ability list
    """
    merged: list[Ability] = [character_ability(granted) for granted in character_abilities]
    merged.extend(class_feature_ability(feature) for feature in class_features)

    for grant in item_grants:
        if grant.requires_equipped and not grant.equipped:
            continue
        for ability in grant.abilities:
            merged.append(
                Ability(
                    **ability.model_dump(),
                    source=AbilitySource.ITEM,
                    item_name=grant.item.name,
                )
            )

    return merged


def can_use_ability(ability: Ability) -> bool:
    """Check whether an ability has a charge to spend (infinite abilities always do)."""
    if ability.charge_type == ChargeType.INFINITE:
        return True
    return (ability.current_charges or 0) > 0


def spend_charge(ability: Ability) -> Ability:
    """
    Use an ability once.

    Returns:
        The ability with one fewer charge; infinite abilities come back unchanged

    Raises:
        NoChargesRemainingError: If the ability has no charges left
    """
    if not can_use_ability(ability):
        raise NoChargesRemainingError(ability.name)

    if ability.charge_type == ChargeType.INFINITE:
        return ability

    remaining = (ability.current_charges or 0) - 1
    logger.debug("ability_charge_spent", ability=ability.name, remaining=remaining)
    return ability.model_copy(update={"current_charges": remaining})


def restore_charges(ability: Ability, rest_type: RestType) -> int:
    """
    Work out an ability's charge count after a rest.

    Short-rest abilities recover on any rest, long-rest abilities only on a
    long rest, and ``uses`` abilities never recover. A recovery adds
    ``charges_per_rest`` (or ``max_charges`` when unset), capped at
    ``max_charges``.

    Returns:
        The new current charge count
    """
    current = ability.current_charges or 0

    if ability.charge_type == ChargeType.INFINITE:
        return ability.max_charges or current

    if ability.charge_type == ChargeType.USES:
        return current

    if ability.charge_type == ChargeType.LONG_REST and rest_type != RestType.LONG_REST:
        return current

    recovered = ability.charges_per_rest or ability.max_charges or 0
    restored = current + recovered
    if ability.max_charges is not None:
        restored = min(restored, ability.max_charges)
    return restored


def charge_label(charge_type: ChargeType | str, max_charges: int | None) -> str:
    """
    Format an ability's charge rule for display.

    Examples:
        >>> charge_label("infinite", None)
        'Unlimited'
        >>> charge_label("short_rest", 2)
        '2 / Short Rest'
    """
    charges = max_charges or 1
    if charge_type == ChargeType.INFINITE:
        return "Unlimited"
    if charge_type == ChargeType.SHORT_REST:
        return f"{charges} / Short Rest"
    if charge_type == ChargeType.LONG_REST:
        return f"{charges} / Long Rest"
    if charge_type == ChargeType.USES:
        return f"{charges} Uses"
    return "Unknown"
