"""World data - item definitions and inventories."""

from .item import (
    ArmorSubtype,
    HpModType,
    InventoryEntry,
    Item,
    ItemType,
    WeaponCategory,
    equipped_items,
    group_inventory_by_type,
    inventory_value,
)

__all__ = [
    "Item",
    "InventoryEntry",
    "ItemType",
    "ArmorSubtype",
    "WeaponCategory",
    "HpModType",
    "equipped_items",
    "inventory_value",
    "group_inventory_by_type",
]
