"""Derived character stats: base record plus everything currently equipped.

``compute_stats`` is always run over the complete equipped set. There is no
incremental path; any change to the base record or to what is equipped means
recomputing from scratch. Accumulation is a plain sum, so the order of the
equipped items never matters.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from neonsheet.game.character.records import (
    ABILITY_MOD_FIELDS,
    DEFAULT_IMPLANT_CAPACITY,
    DEFAULT_INITIATIVE,
    DEFAULT_SPEED,
    AttributeName,
)
from neonsheet.game.world.item import ArmorSubtype

if TYPE_CHECKING:
    from neonsheet.game.character.classes import ClassDefinition
    from neonsheet.game.character.records import CharacterBase
    from neonsheet.game.world.item import Item

logger = structlog.get_logger(__name__)

# Non-proficient armor penalty, applied once no matter how many pieces
ARMOR_PENALTY_AC = -2
ARMOR_PENALTY_SPEED = -10

# Armor a character of unknown class may wear without penalty
DEFAULT_ARMOR_PROFICIENCIES: tuple[ArmorSubtype, ...] = (ArmorSubtype.CLOTHES, ArmorSubtype.LIGHT)


@dataclass(frozen=True)
class ComputedStats:
    """
    Final numbers used at the table. Never persisted.

    Invariants:
        ic_remaining == ic - ic_used
        ic == base implant capacity + sum of equipped ic_mod
    """

    hp: int
    ac: int
    strength: int
    dexterity: int
    constitution: int
    wisdom: int
    intelligence: int
    charisma: int
    speed: int
    initiative: int
    ic: int  # Implant capacity
    skill_mods: dict[str, int] = field(default_factory=dict)
    has_non_proficient_armor: bool = False
    armor_count: int = 0
    weapon_count: int = 0
    ic_used: int = 0
    ic_remaining: int = 0

    def ability(self, name: AttributeName | str) -> int:
        """Get a final ability value by name."""
        return getattr(self, AttributeName(name).value)


def compute_stats(
    base: "CharacterBase",
    equipped: list["Item"],
    class_def: "ClassDefinition | None" = None,
) -> ComputedStats:
    """
    Fold a base record and its equipped items into final stats.

    Args:
        base: The character's persisted base record
        equipped: Definitions of every currently-equipped item
        class_def: The character's class, used for armor proficiencies. When
            None (unknown class) only clothes and light armor are proficient.

    Returns:
        ComputedStats with modifier totals, slot counts and implant usage
    """
    armor_proficiencies = (
        set(class_def.armor_proficiencies) if class_def is not None else set(DEFAULT_ARMOR_PROFICIENCIES)
    )

    ability_mods = {attr: 0 for attr in AttributeName}
    hp_mod = 0
    ac_mod = 0
    speed_mod = 0
    init_mod = 0
    ic_mod = 0
    skill_mods: dict[str, int] = {}

    has_non_proficient_armor = False
    armor_count = 0
    weapon_count = 0
    ic_used = 0

    for item in equipped:
        if item.is_armor:
            armor_count += 1
            if item.armor_subtype is not None and item.armor_subtype not in armor_proficiencies:
                has_non_proficient_armor = True
        elif item.is_weapon:
            weapon_count += 1
        elif item.is_cyberware:
            ic_used += item.ic_cost

        for attr, mod_field in ABILITY_MOD_FIELDS.items():
            ability_mods[attr] += getattr(item, mod_field)
        hp_mod += item.hp_mod
        ac_mod += item.ac_mod
        speed_mod += item.speed_mod
        init_mod += item.init_mod
        ic_mod += item.ic_mod

        for skill, bonus in item.skill_mods.items():
            skill_mods[skill] = skill_mods.get(skill, 0) + bonus

    if has_non_proficient_armor:
        ac_mod += ARMOR_PENALTY_AC
        speed_mod += ARMOR_PENALTY_SPEED

    ic = (base.implant_capacity or DEFAULT_IMPLANT_CAPACITY) + ic_mod

    stats = ComputedStats(
        hp=base.max_hp + hp_mod,
        ac=base.ac + ac_mod,
        strength=base.strength + ability_mods[AttributeName.STRENGTH],
        dexterity=base.dexterity + ability_mods[AttributeName.DEXTERITY],
        constitution=base.constitution + ability_mods[AttributeName.CONSTITUTION],
        wisdom=base.wisdom + ability_mods[AttributeName.WISDOM],
        intelligence=base.intelligence + ability_mods[AttributeName.INTELLIGENCE],
        charisma=base.charisma + ability_mods[AttributeName.CHARISMA],
        speed=(base.speed or DEFAULT_SPEED) + speed_mod,
        initiative=(base.initiative_modifier or DEFAULT_INITIATIVE) + init_mod,
        ic=ic,
        skill_mods=skill_mods,
        has_non_proficient_armor=has_non_proficient_armor,
        armor_count=armor_count,
        weapon_count=weapon_count,
        ic_used=ic_used,
        ic_remaining=ic - ic_used,
    )

    logger.debug(
        "stats_computed",
        character_id=str(base.id) if base.id is not None else None,
        equipped=len(equipped),
        armor_penalty=has_non_proficient_armor,
        ic_remaining=stats.ic_remaining,
    )

    return stats
