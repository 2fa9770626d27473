"""New characters built from a class definition."""

import re
from typing import Any

import structlog

from neonsheet.game.character.classes import ClassDefinition
from neonsheet.game.character.proficiency import weapon_rank_field
from neonsheet.game.character.records import ABILITY_ABBREVIATIONS, CharacterBase
from neonsheet.game.character.skills import skill_field
from neonsheet.game.world.item import Item, ItemType, WeaponCategory

logger = structlog.get_logger(__name__)

PRIMARY_STAT_BONUS = 2
SECONDARY_STAT_BONUS = 1
STARTING_WEAPON_RANK = 1


def tool_item_id(tool_name: str) -> str:
    """Build a catalog id for a starting tool (e.g., "Driver Rig" -> "tool_driver_rig")."""
    return "tool_" + re.sub(r"[^a-z0-9]+", "_", tool_name.lower()).strip("_")


def build_character(class_def: ClassDefinition, name: str, **extra: Any) -> CharacterBase:
    """
    Create a fresh character record for a class.

    Abilities start at 0; the class's primary ability gets +2 and its
    secondary +1. Class skill bonuses go into the matching skill fields, and
    each weapon category the class is trained in starts at rank 1. Class
    features are copied, so later catalog edits do not reach this character.

    Args:
        class_def: The chosen class
        name: Character name
        **extra: Additional record fields (e.g., ``id``)

    Returns:
        The new CharacterBase

    Raises:
        UnknownSkillError: If the class lists a skill outside the skill table
    """
    abilities = {attr.value: 0 for attr in ABILITY_ABBREVIATIONS.values()}
    abilities[ABILITY_ABBREVIATIONS[class_def.stat_bonuses.primary.upper()].value] += PRIMARY_STAT_BONUS
    abilities[ABILITY_ABBREVIATIONS[class_def.stat_bonuses.secondary.upper()].value] += SECONDARY_STAT_BONUS

    skills = {skill_field(skill): bonus for skill, bonus in class_def.skill_bonuses.items()}

    weapon_ranks = {
        weapon_rank_field(category): STARTING_WEAPON_RANK if category in class_def.weapon_proficiencies else 0
        for category in WeaponCategory
    }

    character = CharacterBase(
        name=name.strip(),
        class_id=class_def.id,
        level=1,
        current_hp=class_def.hp,
        max_hp=class_def.hp,
        ac=class_def.ac,
        cdd=class_def.cdd,
        speed=class_def.speed,
        initiative_modifier=class_def.initiative_modifier,
        implant_capacity=class_def.implant_capacity,
        save_proficiencies=list(class_def.saves),
        tools=[tool.name for tool in class_def.tools],
        class_features=[feature.model_copy(deep=True) for feature in class_def.class_features],
        **abilities,
        **skills,
        **weapon_ranks,
        **extra,
    )

    logger.info("character_built", name=character.name, class_id=class_def.id)
    return character


def starting_kit(class_def: ClassDefinition) -> list[Item]:
    """Get the starting tool items for a class."""
    return [
        Item(
            id=tool_item_id(tool.name),
            name=tool.name,
            description=tool.description,
            item_type=ItemType.ITEM,
            rarity="Common",
            price=0,
            is_consumable=False,
            is_equippable=True,
            stack_size=1,
        )
        for tool in class_def.tools
    ]
