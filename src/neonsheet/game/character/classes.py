"""
Class catalog for Neonsheet.

Handles loading and validating character class definitions from YAML. The
catalog is static reference data: base stats, proficiencies, skills, saves,
starting tools and class features for each class.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from neonsheet.config import get_settings
from neonsheet.exceptions import ClassLoadError, ClassValidationError
from neonsheet.game.world.item import ArmorSubtype, WeaponCategory

logger = structlog.get_logger(__name__)


class ClassFeature(BaseModel):
    """
    A class feature as granted at character creation.

    Attributes:
        name: Feature name (e.g., "OVERDRIVE")
        description: Rules text
        type: Activation label (ACTION, BONUS, ON HIT, HIT/STEALTH, passive)
        charges: Number of uses, None for always-on features
        effects: Short effect summaries
    """

    name: str = Field(..., description="Feature name")
    description: str = Field(default="", description="Rules text")
    type: str = Field(default="passive", description="Activation label")
    charges: int | None = Field(default=None, description="Charge count, None if unlimited")
    effects: list[str] = Field(default_factory=list, description="Effect summaries")
    damage_dice: str | None = None
    damage_type: str | None = None
    range_feet: int | None = None
    area_of_effect: str | None = None
    duration: str | None = None


class StatBonuses(BaseModel):
    """Ability bonuses granted at creation: +2 primary, +1 secondary."""

    primary: str = Field(..., description="Ability abbreviation receiving +2")
    secondary: str = Field(..., description="Ability abbreviation receiving +1")


class StartingTool(BaseModel):
    """A tool every member of a class starts with."""

    name: str
    description: str = ""


class ClassDefinition(BaseModel):
    """
    Character class loaded from the catalog YAML.

    Attributes:
        id: Unique class identifier (e.g., "bruiser")
        name: Display name (e.g., "BRUISER")
        hp: Starting max HP
        ac: Starting armor class
        cdd: Combat damage die label (e.g., "d12")
        speed: Base movement speed in feet
        initiative_modifier: Bonus to initiative rolls
        implant_capacity: Cyberware implant capacity
        armor_proficiencies: Armor categories worn without penalty
        weapon_proficiencies: Weapon categories trained at rank 1
    """

    id: str = Field(..., description="Unique class identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Flavor text")
    hp: int = Field(..., ge=1, description="Starting max HP")
    ac: int = Field(..., description="Starting armor class")
    cdd: str = Field(..., description="Combat damage die")
    speed: int = Field(default=30, description="Base speed in feet")
    initiative_modifier: int = Field(default=0, description="Initiative bonus")
    implant_capacity: int = Field(default=3, ge=0, description="Implant capacity")
    armor_proficiencies: list[ArmorSubtype] = Field(default_factory=list)
    weapon_proficiencies: list[WeaponCategory] = Field(default_factory=list)
    stat_bonuses: StatBonuses
    skills: list[str] = Field(default_factory=list, description="Proficient skills")
    skill_bonuses: dict[str, int] = Field(default_factory=dict)
    saves: list[str] = Field(default_factory=list, description="Save proficiencies")
    tools: list[StartingTool] = Field(default_factory=list)
    class_features: list[ClassFeature] = Field(default_factory=list)


def load_yaml_file(file_path: Path) -> list[dict[str, Any]]:
    """
    Load a YAML file containing class definitions.

    Args:
        file_path: Path to the YAML file

    Returns:
        List of class dictionaries

    Raises:
        ClassLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ClassLoadError(f"YAML parsing error in {file_path}: {e}") from e
    except FileNotFoundError as e:
        raise ClassLoadError(f"File not found: {file_path}") from e

    if not data:
        raise ClassLoadError(f"Empty YAML file: {file_path}")

    if "classes" not in data:
        raise ClassLoadError(f"Missing 'classes' key in {file_path}")

    classes = data["classes"]
    if not isinstance(classes, list):
        raise ClassLoadError(f"'classes' must be a list in {file_path}")

    return classes


class ClassCatalog:
    """Read-only lookup of class definitions by id."""

    def __init__(self, classes: list[ClassDefinition]) -> None:
        self._classes: dict[str, ClassDefinition] = {}
        for class_def in classes:
            if class_def.id in self._classes:
                raise ClassValidationError(f"Duplicate class id: '{class_def.id}'")
            self._classes[class_def.id] = class_def

    @classmethod
    def from_yaml(cls, file_path: Path) -> "ClassCatalog":
        """
        Build a catalog from a YAML file.

        Raises:
            ClassLoadError: If the file cannot be read
            ClassValidationError: If any class definition is invalid
        """
        definitions: list[ClassDefinition] = []
        for class_data in load_yaml_file(file_path):
            try:
                definitions.append(ClassDefinition.model_validate(class_data))
            except ValidationError as e:
                class_id = class_data.get("id", "unknown") if isinstance(class_data, dict) else "unknown"
                raise ClassValidationError(
                    f"Class '{class_id}' in {file_path} is invalid: {e}"
                ) from e

        catalog = cls(definitions)
        logger.info("class_catalog_loaded", file=str(file_path), classes=len(catalog))
        return catalog

    def get(self, class_id: str) -> ClassDefinition | None:
        """Get a class definition by id, or None if unknown."""
        return self._classes.get(class_id)

    def all(self) -> list[ClassDefinition]:
        """Get all class definitions in catalog order."""
        return list(self._classes.values())

    def __contains__(self, class_id: object) -> bool:
        return class_id in self._classes

    def __len__(self) -> int:
        return len(self._classes)


@lru_cache
def get_class_catalog() -> ClassCatalog:
    """Get the cached class catalog configured in settings."""
    return ClassCatalog.from_yaml(get_settings().class_catalog_path)


def get_class_by_id(class_id: str) -> ClassDefinition | None:
    """Look up a class definition in the configured catalog."""
    return get_class_catalog().get(class_id)
