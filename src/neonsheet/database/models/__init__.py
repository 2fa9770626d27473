"""SQLAlchemy models for Neonsheet."""

from neonsheet.database.models.ability import AbilityTemplate, CharacterAbilityGrant, ItemAbilityLink
from neonsheet.database.models.base import Base, TimestampMixin
from neonsheet.database.models.character import Character
from neonsheet.database.models.flag import PLAYERS_LOCKED_FLAG, GameFlag
from neonsheet.database.models.item import ItemInstance, ItemTemplate

__all__ = [
    "Base",
    "TimestampMixin",
    "Character",
    "ItemTemplate",
    "ItemInstance",
    "AbilityTemplate",
    "CharacterAbilityGrant",
    "ItemAbilityLink",
    "GameFlag",
    "PLAYERS_LOCKED_FLAG",
]
