"""Item catalog and inventory models."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from neonsheet.game.world.item import ArmorSubtype, HpModType, ItemType, WeaponCategory

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .character import Character


def _modifier_column(comment: str) -> Mapped[int]:
    return mapped_column(Integer, nullable=False, default=0, server_default="0", comment=comment)


class ItemTemplate(Base, TimestampMixin):
    """
    Static item definition.

    Shared by every inventory entry that holds the item. Column names match
    the fields of ``neonsheet.game.world.item.Item`` so rows validate into it
    directly.
    """

    __tablename__ = "item_templates"

    id: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Unique item identifier (e.g., 'stim_pack')",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name of the item",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Detailed description of the item",
    )

    item_type: Mapped[ItemType] = mapped_column(
        Enum(ItemType),
        nullable=False,
        default=ItemType.ITEM,
        comment="Type of item (weapon, armor, consumable, cyberware, etc.)",
    )

    rarity: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default="Common",
        server_default="Common",
        comment="Rarity label",
    )

    price: Mapped[int] = _modifier_column("Shop price in USD")

    armor_subtype: Mapped[ArmorSubtype | None] = mapped_column(
        Enum(ArmorSubtype),
        nullable=True,
        comment="Armor category used for proficiency checks",
    )

    weapon_subtype: Mapped[WeaponCategory | None] = mapped_column(
        Enum(WeaponCategory),
        nullable=True,
        comment="Weapon category",
    )

    ic_cost: Mapped[int] = _modifier_column("Implant capacity used while equipped")

    # Modifiers, applied while equipped or permanently when consumed
    str_mod: Mapped[int] = _modifier_column("Strength modifier")
    dex_mod: Mapped[int] = _modifier_column("Dexterity modifier")
    con_mod: Mapped[int] = _modifier_column("Constitution modifier")
    wis_mod: Mapped[int] = _modifier_column("Wisdom modifier")
    int_mod: Mapped[int] = _modifier_column("Intelligence modifier")
    cha_mod: Mapped[int] = _modifier_column("Charisma modifier")
    hp_mod: Mapped[int] = _modifier_column("Hit point modifier")

    hp_mod_type: Mapped[HpModType | None] = mapped_column(
        Enum(HpModType),
        nullable=True,
        default=HpModType.HEAL,
        comment="How a consumed HP modifier applies (heal or max_hp)",
    )

    ac_mod: Mapped[int] = _modifier_column("Armor class modifier")
    speed_mod: Mapped[int] = _modifier_column("Speed modifier")
    init_mod: Mapped[int] = _modifier_column("Initiative modifier")
    ic_mod: Mapped[int] = _modifier_column("Implant capacity modifier")

    skill_mods: Mapped[dict[str, int] | None] = mapped_column(
        JSON,
        default=dict,
        comment="Skill display name to bonus (e.g., {'Hacking': 2})",
    )

    is_consumable: Mapped[bool] = mapped_column(
        nullable=False,
        default=False,
        server_default="0",
        comment="Whether the item can be consumed",
    )

    is_equippable: Mapped[bool] = mapped_column(
        nullable=False,
        default=False,
        server_default="0",
        comment="Whether the item can be equipped",
    )

    stack_size: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Maximum stack size",
    )

    def __repr__(self) -> str:
        """String representation of ItemTemplate."""
        return f"<ItemTemplate(id='{self.id}', name='{self.name}', type={self.item_type.value})>"


class ItemInstance(Base, TimestampMixin):
    """
    Inventory entry: a quantity of one item held by one character.

    Only rows with ``is_equipped`` set contribute to derived stats.
    """

    __tablename__ = "item_instances"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique inventory entry identifier",
    )

    character_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("characters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to owning character",
    )

    item_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("item_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to item template",
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Number of items in this entry",
    )

    is_equipped: Mapped[bool] = mapped_column(
        nullable=False,
        default=False,
        server_default="0",
        comment="Whether the entry is currently equipped",
    )

    # Relationships
    item: Mapped["ItemTemplate"] = relationship(
        "ItemTemplate",
        lazy="joined",
        innerjoin=True,
    )

    character: Mapped["Character"] = relationship(
        "Character",
        back_populates="inventory",
    )

    def __repr__(self) -> str:
        """String representation of ItemInstance."""
        return (
            f"<ItemInstance(id={self.id}, item='{self.item_id}', "
            f"character={self.character_id}, quantity={self.quantity}, equipped={self.is_equipped})>"
        )
