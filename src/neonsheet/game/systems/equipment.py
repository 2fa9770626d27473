"""Equip-time constraints: armor slot, weapon slots and implant capacity.

Rejections are ordinary outcomes and come back as data. The player action
lock is passed in explicitly by the caller; a locked lock refuses equipping,
unequipping and consuming before any slot rule is looked at.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from neonsheet.exceptions import ActionsLockedError

if TYPE_CHECKING:
    from neonsheet.game.character.stats import ComputedStats
    from neonsheet.game.world.item import Item

logger = structlog.get_logger(__name__)

MAX_EQUIPPED_ARMOR = 1
MAX_EQUIPPED_WEAPONS = 3


class RejectionReason(StrEnum):
    """Why an equip was refused."""

    ARMOR_SLOT_FULL = "armor_slot_full"
    WEAPON_SLOTS_FULL = "weapon_slots_full"
    INSUFFICIENT_IMPLANT_CAPACITY = "insufficient_implant_capacity"


@dataclass(frozen=True)
class ActionLock:
    """The DM's player-action lock as read from the game flags."""

    locked: bool = False
    reason: str | None = None

    def ensure_unlocked(self) -> None:
        """
        Refuse the action if players are locked.

        Raises:
            ActionsLockedError: If the lock is engaged
        """
        if self.locked:
            raise ActionsLockedError(self.reason)


UNLOCKED = ActionLock()


@dataclass(frozen=True)
class EquipDecision:
    """
    Result of an equip check.

    Attributes:
        allowed: Whether the transition may go ahead
        reason: Which constraint refused it, if any
        required: What the item needs (slots or IC)
        available: What the character has left
    """

    allowed: bool
    reason: RejectionReason | None = None
    required: int = 0
    available: int = 0

    @classmethod
    def accept(cls) -> "EquipDecision":
        """Create an accepting decision."""
        return cls(allowed=True)

    @classmethod
    def reject(cls, reason: RejectionReason, required: int, available: int) -> "EquipDecision":
        """Create a rejecting decision."""
        return cls(allowed=False, reason=reason, required=required, available=available)

    @property
    def message(self) -> str:
        """Player-facing explanation of the decision."""
        if self.reason == RejectionReason.ARMOR_SLOT_FULL:
            return (
                f"You can only equip {MAX_EQUIPPED_ARMOR} armor at a time. "
                "Unequip your current armor first."
            )
        if self.reason == RejectionReason.WEAPON_SLOTS_FULL:
            return (
                f"You can only equip {MAX_EQUIPPED_WEAPONS} weapons at a time. "
                "Unequip a weapon first."
            )
        if self.reason == RejectionReason.INSUFFICIENT_IMPLANT_CAPACITY:
            return (
                f"Not enough Implant Capacity. This cyberware requires {self.required} IC, "
                f"but you only have {self.available} IC remaining."
            )
        return "OK"


def can_equip(item: "Item", stats: "ComputedStats") -> EquipDecision:
    """
    Check whether an unequipped item may be equipped.

    Rules are checked in order and the first failure wins:
    one armor, three weapons, then implant capacity for cyberware. Other item
    types are never constrained.

    Args:
        item: The item being equipped
        stats: Stats computed from everything currently equipped

    Returns:
        EquipDecision (allowed, or rejected with the constraint and numbers)
    """
    if item.is_armor and stats.armor_count >= MAX_EQUIPPED_ARMOR:
        return EquipDecision.reject(
            RejectionReason.ARMOR_SLOT_FULL,
            required=1,
            available=MAX_EQUIPPED_ARMOR - stats.armor_count,
        )

    if item.is_weapon and stats.weapon_count >= MAX_EQUIPPED_WEAPONS:
        return EquipDecision.reject(
            RejectionReason.WEAPON_SLOTS_FULL,
            required=1,
            available=MAX_EQUIPPED_WEAPONS - stats.weapon_count,
        )

    if item.is_cyberware and item.ic_cost > stats.ic_remaining:
        return EquipDecision.reject(
            RejectionReason.INSUFFICIENT_IMPLANT_CAPACITY,
            required=item.ic_cost,
            available=stats.ic_remaining,
        )

    return EquipDecision.accept()


def authorize_equip_toggle(
    item: "Item",
    currently_equipped: bool,
    stats: "ComputedStats",
    lock: ActionLock = UNLOCKED,
) -> EquipDecision:
    """
    Authorize flipping an inventory entry's equipped flag.

    Unequipping is always allowed; equipping goes through ``can_equip``.

    Raises:
        ActionsLockedError: If player actions are locked
    """
    lock.ensure_unlocked()

    if currently_equipped:
        return EquipDecision.accept()

    decision = can_equip(item, stats)
    if not decision.allowed:
        logger.info(
            "item_equip_rejected",
            item_id=item.id,
            reason=decision.reason.value if decision.reason else None,
            required=decision.required,
            available=decision.available,
        )
    return decision
