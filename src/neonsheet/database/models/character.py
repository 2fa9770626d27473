"""Character model: the persisted base record of a player character."""

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .ability import CharacterAbilityGrant
    from .item import ItemInstance


def _score_column(comment: str) -> Mapped[int]:
    return mapped_column(Integer, nullable=False, default=0, server_default="0", comment=comment)


class Character(Base, TimestampMixin):
    """
    Player character base record.

    Holds only base values. Equipped item modifiers are never folded into these
    columns; derived stats are recomputed from this row plus the equipped
    inventory every time they are needed.
    """

    __tablename__ = "characters"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique character identifier",
    )

    name: Mapped[str] = mapped_column(
        String(60),
        nullable=False,
        index=True,
        comment="Character name",
    )

    class_id: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
        comment="Class catalog identifier (e.g., 'bruiser')",
    )

    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Character level",
    )

    # Vitals
    current_hp: Mapped[int] = _score_column("Current hit points")
    max_hp: Mapped[int] = _score_column("Maximum hit points")
    ac: Mapped[int] = _score_column("Base armor class")
    cdd: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="d6",
        server_default="d6",
        comment="Combat damage die",
    )

    # Abilities, stored as modifiers
    strength: Mapped[int] = _score_column("Strength modifier")
    dexterity: Mapped[int] = _score_column("Dexterity modifier")
    constitution: Mapped[int] = _score_column("Constitution modifier")
    wisdom: Mapped[int] = _score_column("Wisdom modifier")
    intelligence: Mapped[int] = _score_column("Intelligence modifier")
    charisma: Mapped[int] = _score_column("Charisma modifier")

    # Null on records created before these columns existed
    speed: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Base speed in feet (null reads as 30)",
    )

    initiative_modifier: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Base initiative modifier (null reads as 0)",
    )

    implant_capacity: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Base implant capacity (null reads as 3)",
    )

    # Skill proficiency bonuses
    skill_acrobatics: Mapped[int] = _score_column("Acrobatics bonus")
    skill_animal_handling: Mapped[int] = _score_column("Animal Handling bonus")
    skill_athletics: Mapped[int] = _score_column("Athletics bonus")
    skill_biology: Mapped[int] = _score_column("Biology bonus")
    skill_deception: Mapped[int] = _score_column("Deception bonus")
    skill_hacking: Mapped[int] = _score_column("Hacking bonus")
    skill_history: Mapped[int] = _score_column("History bonus")
    skill_insight: Mapped[int] = _score_column("Insight bonus")
    skill_intimidation: Mapped[int] = _score_column("Intimidation bonus")
    skill_investigation: Mapped[int] = _score_column("Investigation bonus")
    skill_medicine: Mapped[int] = _score_column("Medicine bonus")
    skill_nature: Mapped[int] = _score_column("Nature bonus")
    skill_perception: Mapped[int] = _score_column("Perception bonus")
    skill_performance: Mapped[int] = _score_column("Performance bonus")
    skill_persuasion: Mapped[int] = _score_column("Persuasion bonus")
    skill_sleight_of_hand: Mapped[int] = _score_column("Sleight of Hand bonus")
    skill_stealth: Mapped[int] = _score_column("Stealth bonus")
    skill_survival: Mapped[int] = _score_column("Survival bonus")

    save_proficiencies: Mapped[list[str] | None] = mapped_column(
        JSON,
        default=list,
        comment="Proficient saving throws as ability abbreviations",
    )

    # Weapon proficiency ranks (0-5)
    weapon_rank_unarmed: Mapped[int] = _score_column("Unarmed weapon rank")
    weapon_rank_melee: Mapped[int] = _score_column("Melee weapon rank")
    weapon_rank_sidearms: Mapped[int] = _score_column("Sidearms weapon rank")
    weapon_rank_longarms: Mapped[int] = _score_column("Longarms weapon rank")
    weapon_rank_heavy: Mapped[int] = _score_column("Heavy weapon rank")

    usd: Mapped[int] = _score_column("Currency balance")

    tools: Mapped[list[str] | None] = mapped_column(
        JSON,
        default=list,
        comment="Names of tools the character is trained with",
    )

    # Copied from the class catalog at creation time
    class_features: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON,
        default=list,
        comment="Snapshot of class features",
    )

    # False on rows that may still hold 10-centered legacy scores
    scores_normalized: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="0",
        comment="Ability scores are known to be stored as modifiers",
    )

    # Relationships
    inventory: Mapped[list["ItemInstance"]] = relationship(
        "ItemInstance",
        back_populates="character",
        cascade="all, delete-orphan",
    )

    abilities: Mapped[list["CharacterAbilityGrant"]] = relationship(
        "CharacterAbilityGrant",
        back_populates="character",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation of Character."""
        return f"<Character(id={self.id}, name='{self.name}', class='{self.class_id}')>"
