"""Persisted character record as consumed by the rules engine.

Ability scores are stored as direct modifiers (0, +1, +2). Characters created
before the switch stored them as 10 + modifier; see ``normalize_ability_score``.
"""

from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from neonsheet.game.character.classes import ClassFeature
from neonsheet.game.character.skills import SKILL_FIELDS
from neonsheet.game.world.item import WeaponCategory

# Fallbacks for records that predate these fields
DEFAULT_SPEED = 30
DEFAULT_INITIATIVE = 0
DEFAULT_IMPLANT_CAPACITY = 3

# Stored scores at or above this value are read as the old 10-centered format
LEGACY_SCORE_THRESHOLD = 8
LEGACY_SCORE_OFFSET = 10


class AttributeName(StrEnum):
    """Core character abilities."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    WISDOM = "wisdom"
    INTELLIGENCE = "intelligence"
    CHARISMA = "charisma"


ATTRIBUTE_NAMES = [attr.value for attr in AttributeName]

# Ability abbreviation (as used by class data and saves) -> record field
ABILITY_ABBREVIATIONS: dict[str, AttributeName] = {
    "STR": AttributeName.STRENGTH,
    "DEX": AttributeName.DEXTERITY,
    "CON": AttributeName.CONSTITUTION,
    "WIS": AttributeName.WISDOM,
    "INT": AttributeName.INTELLIGENCE,
    "CHA": AttributeName.CHARISMA,
}

# Ability -> item modifier field
ABILITY_MOD_FIELDS: dict[AttributeName, str] = {
    AttributeName.STRENGTH: "str_mod",
    AttributeName.DEXTERITY: "dex_mod",
    AttributeName.CONSTITUTION: "con_mod",
    AttributeName.WISDOM: "wis_mod",
    AttributeName.INTELLIGENCE: "int_mod",
    AttributeName.CHARISMA: "cha_mod",
}

_ZERO_DEFAULT_FIELDS = (
    "current_hp",
    "max_hp",
    "ac",
    *ATTRIBUTE_NAMES,
    *SKILL_FIELDS.values(),
    *(f"weapon_rank_{category.value}" for category in WeaponCategory),
    "usd",
)


class CharacterBase(BaseModel):
    """
    A character's persisted base record.

    Numeric fields missing from older records read as 0. ``speed``,
    ``initiative_modifier`` and ``implant_capacity`` stay None when absent so
    that callers can apply their documented fallbacks.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID | str | None = None
    name: str = ""
    class_id: str = Field(default="", description="ClassCatalog id")
    level: int = 1

    current_hp: int = 0
    max_hp: int = 0
    ac: int = 0
    cdd: str = Field(default="d6", description="Combat damage die")

    strength: int = 0
    dexterity: int = 0
    constitution: int = 0
    wisdom: int = 0
    intelligence: int = 0
    charisma: int = 0

    speed: int | None = None
    initiative_modifier: int | None = None
    implant_capacity: int | None = None

    skill_acrobatics: int = 0
    skill_animal_handling: int = 0
    skill_athletics: int = 0
    skill_biology: int = 0
    skill_deception: int = 0
    skill_hacking: int = 0
    skill_history: int = 0
    skill_insight: int = 0
    skill_intimidation: int = 0
    skill_investigation: int = 0
    skill_medicine: int = 0
    skill_nature: int = 0
    skill_perception: int = 0
    skill_performance: int = 0
    skill_persuasion: int = 0
    skill_sleight_of_hand: int = 0
    skill_stealth: int = 0
    skill_survival: int = 0

    save_proficiencies: list[str] = Field(default_factory=list)

    weapon_rank_unarmed: int = Field(default=0, ge=0, le=5)
    weapon_rank_melee: int = Field(default=0, ge=0, le=5)
    weapon_rank_sidearms: int = Field(default=0, ge=0, le=5)
    weapon_rank_longarms: int = Field(default=0, ge=0, le=5)
    weapon_rank_heavy: int = Field(default=0, ge=0, le=5)

    usd: int = Field(default=0, description="Currency balance")
    tools: list[str] = Field(default_factory=list)
    class_features: list[ClassFeature] = Field(default_factory=list)

    @field_validator(*_ZERO_DEFAULT_FIELDS, mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("save_proficiencies", "tools", "class_features", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def ability(self, name: AttributeName | str) -> int:
        """Get a stored ability value by name."""
        return getattr(self, AttributeName(name).value)


def normalize_ability_score(value: int) -> int:
    """
    Convert a stored ability score to a modifier.

    Old records stored 10 + modifier (10 = +0, 12 = +2). Values of 8 or more are
    treated as that format. A genuine modifier of +8 or higher cannot be told
    apart from a legacy score, so this is only safe until records are migrated.

    Examples:
        >>> normalize_ability_score(2)
        2
        >>> normalize_ability_score(12)
        2
        >>> normalize_ability_score(8)
        -2
    """
    if value >= LEGACY_SCORE_THRESHOLD:
        return value - LEGACY_SCORE_OFFSET
    return value


def legacy_score_updates(character: CharacterBase) -> dict[str, int]:
    """Get the ability fields of a record that look legacy-encoded, with their modifiers."""
    updates: dict[str, int] = {}
    for name in ATTRIBUTE_NAMES:
        stored = getattr(character, name)
        normalized = normalize_ability_score(stored)
        if normalized != stored:
            updates[name] = normalized
    return updates


def normalize_character(character: CharacterBase) -> CharacterBase:
    """Return the record with any legacy-encoded ability scores converted to modifiers."""
    updates = legacy_score_updates(character)
    if not updates:
        return character
    return character.model_copy(update=updates)
