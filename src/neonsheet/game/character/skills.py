"""Skill table for Neonsheet characters.

The 18 skills are fixed. Each display name maps to exactly one record field
(``skill_<lower_snake_name>``) and one governing ability. The tables are written
out in full so that a renamed skill and its field can never drift apart.
"""

from typing import TYPE_CHECKING

from neonsheet.exceptions import UnknownSkillError

if TYPE_CHECKING:
    from neonsheet.game.character.records import CharacterBase
    from neonsheet.game.character.stats import ComputedStats

SKILL_FIELD_PREFIX = "skill_"

# Display name -> character record field
SKILL_FIELDS: dict[str, str] = {
    "Acrobatics": "skill_acrobatics",
    "Animal Handling": "skill_animal_handling",
    "Athletics": "skill_athletics",
    "Biology": "skill_biology",
    "Deception": "skill_deception",
    "Hacking": "skill_hacking",
    "History": "skill_history",
    "Insight": "skill_insight",
    "Intimidation": "skill_intimidation",
    "Investigation": "skill_investigation",
    "Medicine": "skill_medicine",
    "Nature": "skill_nature",
    "Perception": "skill_perception",
    "Performance": "skill_performance",
    "Persuasion": "skill_persuasion",
    "Sleight of Hand": "skill_sleight_of_hand",
    "Stealth": "skill_stealth",
    "Survival": "skill_survival",
}

# Display name -> governing ability field
SKILL_ABILITIES: dict[str, str] = {
    "Acrobatics": "dexterity",
    "Animal Handling": "wisdom",
    "Athletics": "strength",
    "Biology": "intelligence",
    "Deception": "charisma",
    "Hacking": "intelligence",
    "History": "intelligence",
    "Insight": "wisdom",
    "Intimidation": "charisma",
    "Investigation": "intelligence",
    "Medicine": "wisdom",
    "Nature": "intelligence",
    "Perception": "wisdom",
    "Performance": "charisma",
    "Persuasion": "charisma",
    "Sleight of Hand": "dexterity",
    "Stealth": "dexterity",
    "Survival": "wisdom",
}

SKILLS: tuple[str, ...] = tuple(SKILL_FIELDS)


def skill_field(skill_name: str) -> str:
    """
    Get the character record field for a skill display name.

    Args:
        skill_name: Skill display name (e.g., "Sleight of Hand")

    Returns:
        Record field name (e.g., "skill_sleight_of_hand")

    Raises:
        UnknownSkillError: If the name is not one of the 18 skills
    """
    try:
        return SKILL_FIELDS[skill_name]
    except KeyError:
        raise UnknownSkillError(skill_name) from None


def derive_skill_field(skill_name: str) -> str:
    """Build a field name the way record keys are formed: lower-case, spaces to underscores."""
    return SKILL_FIELD_PREFIX + skill_name.lower().replace(" ", "_")


def skill_total(
    skill_name: str,
    character: "CharacterBase",
    stats: "ComputedStats | None" = None,
) -> int:
    """
    Calculate the full bonus for a skill check.

    Args:
        skill_name: Skill display name
        character: Base character record
        stats: Computed stats; when given, the equipped ability values and
            equipped skill bonuses are used instead of the base record alone

    Returns:
        Ability value + proficiency bonus (+ equipped skill bonus)
    """
    field = skill_field(skill_name)
    ability = SKILL_ABILITIES[skill_name]
    proficiency = getattr(character, field)

    if stats is None:
        return getattr(character, ability) + proficiency

    return getattr(stats, ability) + proficiency + stats.skill_mods.get(skill_name, 0)
