"""Item definitions and inventory entries as seen by the rules engine."""

from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemType(StrEnum):
    """Types of items available in the game."""

    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    CYBERWARE = "cyberware"
    ITEM = "item"
    MISSION_ITEM = "mission_item"


class ArmorSubtype(StrEnum):
    """Armor categories used for proficiency checks."""

    CLOTHES = "clothes"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    SHIELD = "shield"


class WeaponCategory(StrEnum):
    """Weapon categories; also the categories a character holds proficiency ranks in."""

    UNARMED = "unarmed"
    MELEE = "melee"
    SIDEARMS = "sidearms"
    LONGARMS = "longarms"
    HEAVY = "heavy"


class HpModType(StrEnum):
    """How a consumable's HP modifier is applied."""

    HEAL = "heal"  # Restore current HP, capped at max
    MAX_HP = "max_hp"  # Permanently raise max HP (and current HP with it)


# Numeric modifier fields that default to 0 when missing from older records
MODIFIER_FIELDS = (
    "ic_cost",
    "str_mod",
    "dex_mod",
    "con_mod",
    "wis_mod",
    "int_mod",
    "cha_mod",
    "hp_mod",
    "ac_mod",
    "speed_mod",
    "init_mod",
    "ic_mod",
)


class Item(BaseModel):
    """
    Static catalog definition of an item.

    Attributes:
        id: Item identifier
        name: Display name
        item_type: weapon, armor, consumable, cyberware, item or mission_item
        armor_subtype: Armor category (armor only)
        weapon_subtype: Weapon category (weapons only)
        ic_cost: Implant capacity consumed while equipped (cyberware only)
        hp_mod_type: Whether a consumed HP modifier heals or raises max HP
        skill_mods: Skill display name -> bonus
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., description="Item identifier")
    name: str = Field(..., description="Display name of the item")
    description: str | None = Field(default=None, description="Item description")
    item_type: ItemType = Field(default=ItemType.ITEM, description="Item type")
    rarity: str = Field(default="Common", description="Rarity label")
    price: int = Field(default=0, description="Shop price in USD")

    armor_subtype: ArmorSubtype | None = Field(default=None, description="Armor category")
    weapon_subtype: WeaponCategory | None = Field(default=None, description="Weapon category")
    ic_cost: int = Field(default=0, description="Implant capacity cost")

    str_mod: int = 0
    dex_mod: int = 0
    con_mod: int = 0
    wis_mod: int = 0
    int_mod: int = 0
    cha_mod: int = 0
    hp_mod: int = 0
    hp_mod_type: HpModType = HpModType.HEAL
    ac_mod: int = 0
    speed_mod: int = 0
    init_mod: int = 0
    ic_mod: int = 0

    skill_mods: dict[str, int] = Field(default_factory=dict, description="Skill bonuses")

    is_consumable: bool = False
    is_equippable: bool = False
    stack_size: int = 1

    @field_validator(*MODIFIER_FIELDS, mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("skill_mods", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("hp_mod_type", mode="before")
    @classmethod
    def _default_heal(cls, value: Any) -> Any:
        return HpModType.HEAL if value is None else value

    @property
    def is_armor(self) -> bool:
        """Check if item is armor."""
        return self.item_type == ItemType.ARMOR

    @property
    def is_weapon(self) -> bool:
        """Check if item is a weapon."""
        return self.item_type == ItemType.WEAPON

    @property
    def is_cyberware(self) -> bool:
        """Check if item is cyberware."""
        return self.item_type == ItemType.CYBERWARE


class InventoryEntry(BaseModel):
    """An item held by exactly one character."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID | str
    character_id: UUID | str
    item: Item
    quantity: int = Field(default=1, ge=0)
    is_equipped: bool = False


def equipped_items(entries: list[InventoryEntry]) -> list[Item]:
    """Get the item definitions of all equipped entries, in inventory order."""
    return [entry.item for entry in entries if entry.is_equipped]


def inventory_value(entries: list[InventoryEntry]) -> int:
    """Calculate total value of an inventory (price x quantity per entry)."""
    return sum(entry.item.price * entry.quantity for entry in entries)


def group_inventory_by_type(entries: list[InventoryEntry]) -> dict[ItemType, list[InventoryEntry]]:
    """
    Group inventory entries by item type.

    Returns:
        Mapping of item type to entries, in first-seen type order
    """
    groups: dict[ItemType, list[InventoryEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.item.item_type, []).append(entry)
    return groups
