"""Permanent effects of consuming an item.

Consuming is irreversible: the returned character delta is written straight
into the base record. Callers are expected to confirm with the player first.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from neonsheet.exceptions import ItemNotConsumableError
from neonsheet.game.character.proficiency import format_modifier
from neonsheet.game.character.records import (
    ABILITY_MOD_FIELDS,
    DEFAULT_IMPLANT_CAPACITY,
    DEFAULT_INITIATIVE,
    DEFAULT_SPEED,
)
from neonsheet.game.character.skills import skill_field
from neonsheet.game.systems.equipment import UNLOCKED, ActionLock
from neonsheet.game.world.item import HpModType

if TYPE_CHECKING:
    from neonsheet.game.character.records import CharacterBase
    from neonsheet.game.world.item import Item

logger = structlog.get_logger(__name__)

# Effect summary labels, in display order
_EFFECT_LABELS = (
    ("str_mod", "STR"),
    ("dex_mod", "DEX"),
    ("con_mod", "CON"),
    ("wis_mod", "WIS"),
    ("int_mod", "INT"),
    ("cha_mod", "CHA"),
)


@dataclass(frozen=True)
class InventoryDelta:
    """Change to the consumed inventory entry: a new quantity, or deletion."""

    quantity: int | None = None
    deleted: bool = False

    @classmethod
    def after_use(cls, current_quantity: int) -> "InventoryDelta":
        """Decrement a stack, or delete the entry when the last one is used."""
        if current_quantity > 1:
            return cls(quantity=current_quantity - 1)
        return cls(deleted=True)


@dataclass(frozen=True)
class ConsumptionResult:
    """Record changes produced by consuming one item."""

    character_delta: dict[str, Any] = field(default_factory=dict)
    inventory_delta: InventoryDelta = field(default_factory=InventoryDelta)


def resolve_consumption(
    base: "CharacterBase",
    item: "Item",
    current_quantity: int,
    lock: ActionLock = UNLOCKED,
) -> ConsumptionResult:
    """
    Work out what consuming an item does to the character and the inventory.

    Abilities, AC, speed, initiative and implant capacity are all raised by the
    item's modifiers (missing speed, initiative and IC read as 30, 0 and 3).
    A ``heal`` HP modifier raises current HP up to max HP; a ``max_hp``
    modifier raises both max and current HP by the full amount. Skill
    modifiers are added to the matching skill fields.

    Args:
        base: The consuming character's base record
        item: The item being consumed
        current_quantity: Quantity on the inventory entry before use
        lock: Player action lock

    Returns:
        ConsumptionResult with the character delta and the inventory delta

    Raises:
        ActionsLockedError: If player actions are locked
        ItemNotConsumableError: If the item is not consumable
        UnknownSkillError: If the item modifies a skill that does not exist
    """
    lock.ensure_unlocked()

    if not item.is_consumable:
        raise ItemNotConsumableError(item.name)

    delta: dict[str, Any] = {}

    for attr, mod_field in ABILITY_MOD_FIELDS.items():
        delta[attr.value] = getattr(base, attr.value) + getattr(item, mod_field)

    delta["ac"] = base.ac + item.ac_mod
    delta["speed"] = (base.speed or DEFAULT_SPEED) + item.speed_mod
    delta["initiative_modifier"] = (base.initiative_modifier or DEFAULT_INITIATIVE) + item.init_mod
    delta["implant_capacity"] = (base.implant_capacity or DEFAULT_IMPLANT_CAPACITY) + item.ic_mod

    if item.hp_mod:
        if item.hp_mod_type == HpModType.MAX_HP:
            delta["max_hp"] = base.max_hp + item.hp_mod
            delta["current_hp"] = base.current_hp + item.hp_mod
        else:
            delta["current_hp"] = min(base.current_hp + item.hp_mod, base.max_hp)

    for skill_name, bonus in item.skill_mods.items():
        if not bonus:
            continue
        field_name = skill_field(skill_name)
        delta[field_name] = getattr(base, field_name) + bonus

    result = ConsumptionResult(
        character_delta=delta,
        inventory_delta=InventoryDelta.after_use(current_quantity),
    )

    logger.info(
        "item_consumed",
        character_id=str(base.id) if base.id is not None else None,
        item_id=item.id,
        fields=sorted(delta),
        entry_deleted=result.inventory_delta.deleted,
    )

    return result


def describe_effects(item: "Item") -> list[str]:
    """
    Summarize what consuming an item applies, for confirmation messages.

    Returns:
        Effect strings such as ``["STR +1", "Max HP +50", "Persuasion +1"]``
    """
    effects: list[str] = []

    for mod_field, label in _EFFECT_LABELS:
        value = getattr(item, mod_field)
        if value:
            effects.append(f"{label} {format_modifier(value)}")

    if item.hp_mod:
        hp_label = "Max HP" if item.hp_mod_type == HpModType.MAX_HP else "HP healed"
        effects.append(f"{hp_label} {format_modifier(item.hp_mod)}")

    for mod_field, label in (("ac_mod", "AC"), ("speed_mod", "Speed"), ("init_mod", "Init"), ("ic_mod", "IC")):
        value = getattr(item, mod_field)
        if value:
            effects.append(f"{label} {format_modifier(value)}")

    for skill_name, bonus in item.skill_mods.items():
        if bonus:
            effects.append(f"{skill_name} {format_modifier(bonus)}")

    return effects
