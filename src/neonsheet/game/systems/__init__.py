"""Game systems - equipping, consuming and the persisted character sheet flows."""

from .consumption import ConsumptionResult, InventoryDelta, describe_effects, resolve_consumption
from .equipment import (
    MAX_EQUIPPED_ARMOR,
    MAX_EQUIPPED_WEAPONS,
    UNLOCKED,
    ActionLock,
    EquipDecision,
    RejectionReason,
    authorize_equip_toggle,
    can_equip,
)

__all__ = [
    "ActionLock",
    "UNLOCKED",
    "EquipDecision",
    "RejectionReason",
    "MAX_EQUIPPED_ARMOR",
    "MAX_EQUIPPED_WEAPONS",
    "can_equip",
    "authorize_equip_toggle",
    "ConsumptionResult",
    "InventoryDelta",
    "resolve_consumption",
    "describe_effects",
]
