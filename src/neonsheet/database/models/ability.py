"""Ability catalog and the tables that grant abilities to characters and items."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from neonsheet.game.character.abilities import ChargeType

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .character import Character


class AbilityTemplate(Base, TimestampMixin):
    """
    Ability definition from the ability catalog.

    Column names match ``neonsheet.game.character.abilities.AbilityDef``.
    """

    __tablename__ = "abilities"

    id: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Unique ability identifier (e.g., 'overclock')",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name of the ability",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="What the ability does",
    )

    ability_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default="passive",
        comment="action, bonus_action, reaction, passive or utility",
    )

    charge_type: Mapped[ChargeType] = mapped_column(
        Enum(ChargeType),
        nullable=False,
        default=ChargeType.INFINITE,
        comment="How charges are spent and recovered",
    )

    max_charges: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Charge ceiling (null for infinite abilities)",
    )

    charges_per_rest: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Charges restored per qualifying rest",
    )

    effects: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Effect descriptions",
    )

    damage_dice: Mapped[str | None] = mapped_column(String(20), nullable=True, comment="Damage dice (e.g., '2d6')")
    damage_type: Mapped[str | None] = mapped_column(String(30), nullable=True, comment="Damage type")
    range_feet: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="Range in feet")
    area_of_effect: Mapped[str | None] = mapped_column(String(60), nullable=True, comment="Area of effect")
    duration: Mapped[str | None] = mapped_column(String(60), nullable=True, comment="Effect duration")

    def __repr__(self) -> str:
        """String representation of AbilityTemplate."""
        return f"<AbilityTemplate(id='{self.id}', name='{self.name}', charges={self.charge_type.value})>"


class CharacterAbilityGrant(Base, TimestampMixin):
    """An ability granted directly to a character, with its remaining charges."""

    __tablename__ = "character_abilities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique grant identifier",
    )

    character_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("characters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to character",
    )

    ability_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("abilities.id", ondelete="CASCADE"),
        nullable=False,
        comment="Foreign key to ability",
    )

    current_charges: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="Charges left until the next qualifying rest",
    )

    # Relationships
    ability: Mapped["AbilityTemplate"] = relationship(
        "AbilityTemplate",
        lazy="joined",
        innerjoin=True,
    )

    character: Mapped["Character"] = relationship(
        "Character",
        back_populates="abilities",
    )

    def __repr__(self) -> str:
        """String representation of CharacterAbilityGrant."""
        return (
            f"<CharacterAbilityGrant(id={self.id}, ability='{self.ability_id}', "
            f"charges={self.current_charges})>"
        )


class ItemAbilityLink(Base, TimestampMixin):
    """
    An ability attached to an item, available to whoever holds it.

    An item's abilities are listed by ``position``, then in the order they
    were attached.
    """

    __tablename__ = "item_abilities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique link identifier",
    )

    item_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("item_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to item template",
    )

    ability_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("abilities.id", ondelete="CASCADE"),
        nullable=False,
        comment="Foreign key to ability",
    )

    requires_equipped: Mapped[bool] = mapped_column(
        nullable=False,
        default=True,
        server_default="1",
        comment="Whether the item must be equipped for the ability to be available",
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="Display position among the item's abilities",
    )

    # Relationships
    ability: Mapped["AbilityTemplate"] = relationship(
        "AbilityTemplate",
        lazy="joined",
        innerjoin=True,
    )

    def __repr__(self) -> str:
        """String representation of ItemAbilityLink."""
        return f"<ItemAbilityLink(item='{self.item_id}', ability='{self.ability_id}')>"
