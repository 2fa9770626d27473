"""Character rules - classes, records, skills, derived stats and abilities."""

from .abilities import (
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
    restore_charges,
    spend_charge,
)
from .classes import ClassCatalog, ClassDefinition, ClassFeature, get_class_by_id, get_class_catalog
from .creation import build_character, starting_kit
from .proficiency import format_modifier, format_to_hit, weapon_to_hit_modifier
from .records import (
    ATTRIBUTE_NAMES,
    AttributeName,
    CharacterBase,
    normalize_ability_score,
    normalize_character,
)
from .skills import SKILL_ABILITIES, SKILL_FIELDS, SKILLS, skill_field, skill_total
from .stats import ComputedStats, compute_stats

__all__ = [
    "Ability",
    "AbilityDef",
    "AbilitySource",
    "CharacterAbility",
    "ChargeType",
    "ItemAbilityGrant",
    "RestType",
    "aggregate_abilities",
    "can_use_ability",
    "charge_label",
    "restore_charges",
    "spend_charge",
    "ClassCatalog",
    "ClassDefinition",
    "ClassFeature",
    "get_class_by_id",
    "get_class_catalog",
    "build_character",
    "starting_kit",
    "format_modifier",
    "format_to_hit",
    "weapon_to_hit_modifier",
    "ATTRIBUTE_NAMES",
    "AttributeName",
    "CharacterBase",
    "normalize_ability_score",
    "normalize_character",
    "SKILL_ABILITIES",
    "SKILL_FIELDS",
    "SKILLS",
    "skill_field",
    "skill_total",
    "ComputedStats",
    "compute_stats",
]
