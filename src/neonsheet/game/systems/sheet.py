"""
Character sheet flows backed by the database.

Each flow takes the caller's session and does all of its reads and writes in
it, so wrapping a call in ``get_session()`` makes it one transaction. Mutating
flows check the player action lock first, then load a fresh snapshot with the
character's rows locked, recompute stats from scratch, hand the snapshot to the
pure rules in ``neonsheet.game`` and write the resulting deltas back.
"""

import uuid
from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from neonsheet.config import get_settings
from neonsheet.database.models import (
    PLAYERS_LOCKED_FLAG,
    AbilityTemplate,
    Character,
    CharacterAbilityGrant,
    GameFlag,
    ItemAbilityLink,
    ItemInstance,
    ItemTemplate,
)
from neonsheet.exceptions import (
    AbilityNotFoundError,
    CharacterNotFoundError,
    InventoryEntryNotFoundError,
    UnknownClassError,
)
from neonsheet.game.character.abilities import (
    Ability,
    AbilityDef,
    CharacterAbility,
    ItemAbilityGrant,
    RestType,
    aggregate_abilities,
    character_ability,
    restore_charges,
    spend_charge,
)
from neonsheet.game.character.classes import ClassDefinition, get_class_catalog
from neonsheet.game.character.creation import build_character, starting_kit
from neonsheet.game.character.records import CharacterBase, legacy_score_updates, normalize_character
from neonsheet.game.character.stats import ComputedStats, compute_stats
from neonsheet.game.systems.consumption import ConsumptionResult, resolve_consumption
from neonsheet.game.systems.equipment import ActionLock, EquipDecision, authorize_equip_toggle
from neonsheet.game.world.item import InventoryEntry, Item, equipped_items

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SheetSnapshot:
    """A character's base record and inventory as loaded, with stats computed from them."""

    character: CharacterBase
    inventory: list[InventoryEntry]
    class_def: ClassDefinition | None
    stats: ComputedStats

    def entry(self, entry_id: UUID) -> InventoryEntry:
        """
        Find an inventory entry by id.

        Raises:
            InventoryEntryNotFoundError: If the character holds no such entry
        """
        for entry in self.inventory:
            if entry.id == entry_id:
                return entry
        raise InventoryEntryNotFoundError(
            f"Inventory entry {entry_id} not found for character {self.character.id}"
        )


async def _get_character_row(
    session: AsyncSession, character_id: UUID, for_update: bool = False
) -> Character:
    stmt = select(Character).where(Character.id == character_id)
    if for_update:
        stmt = stmt.with_for_update()

    result = await session.execute(stmt)
    character = result.scalar_one_or_none()
    if character is None:
        raise CharacterNotFoundError(f"Character {character_id} not found")
    return character


async def _get_inventory_rows(
    session: AsyncSession, character_id: UUID, for_update: bool = False
) -> list[ItemInstance]:
    stmt = (
        select(ItemInstance)
        .where(ItemInstance.character_id == character_id)
        .order_by(ItemInstance.created_at, ItemInstance.id)
    )
    if for_update:
        stmt = stmt.with_for_update()

    result = await session.execute(stmt)
    return list(result.scalars().all())


def _to_base_record(character: Character) -> CharacterBase:
    base = CharacterBase.model_validate(character)
    if get_settings().legacy_score_detection and not character.scores_normalized:
        base = normalize_character(base)
    return base


async def load_snapshot(
    session: AsyncSession, character_id: UUID, for_update: bool = False
) -> SheetSnapshot:
    """
    Load a character and their inventory and compute their stats.

    Args:
        session: Database session
        character_id: Character's UUID
        for_update: Lock the character and inventory rows until the transaction ends

    Returns:
        SheetSnapshot with freshly computed stats

    Raises:
        CharacterNotFoundError: If the character does not exist
    """
    character_row = await _get_character_row(session, character_id, for_update)
    inventory_rows = await _get_inventory_rows(session, character_id, for_update)

    base = _to_base_record(character_row)
    inventory = [
        InventoryEntry(
            id=row.id,
            character_id=row.character_id,
            item=Item.model_validate(row.item),
            quantity=row.quantity,
            is_equipped=row.is_equipped,
        )
        for row in inventory_rows
    ]

    class_def = get_class_catalog().get(base.class_id)
    if class_def is None:
        logger.warning("character_class_unknown", character_id=str(character_id), class_id=base.class_id)

    stats = compute_stats(base, equipped_items(inventory), class_def)
    return SheetSnapshot(character=base, inventory=inventory, class_def=class_def, stats=stats)


async def get_action_lock(session: AsyncSession) -> ActionLock:
    """Read the DM's player action lock (unlocked when the flag was never set)."""
    flag = await session.get(GameFlag, PLAYERS_LOCKED_FLAG)
    if flag is None or not flag.value:
        return ActionLock()
    return ActionLock(locked=bool(flag.value.get("locked")), reason=flag.value.get("reason"))


async def set_action_lock(session: AsyncSession, locked: bool, reason: str | None = None) -> ActionLock:
    """
    Lock or unlock player actions.

    Args:
        session: Database session
        locked: Whether players are locked
        reason: Shown to players whose actions are refused

    Returns:
        The new lock state
    """
    value = {"locked": locked, "reason": reason if locked else None}

    flag = await session.get(GameFlag, PLAYERS_LOCKED_FLAG)
    if flag is None:
        session.add(GameFlag(key=PLAYERS_LOCKED_FLAG, value=value))
    else:
        flag.value = value
    await session.flush()

    logger.info("player_action_lock_set", locked=locked, reason=reason)
    return ActionLock(locked=locked, reason=value["reason"])


async def toggle_equip(session: AsyncSession, character_id: UUID, entry_id: UUID) -> EquipDecision:
    """
    Equip an unequipped inventory entry, or unequip an equipped one.

    Returns:
        The decision; the entry is only changed when it allows the toggle

    Raises:
        ActionsLockedError: If player actions are locked
        CharacterNotFoundError: If the character does not exist
        InventoryEntryNotFoundError: If the character holds no such entry
    """
    lock = await get_action_lock(session)
    lock.ensure_unlocked()

    snapshot = await load_snapshot(session, character_id, for_update=True)
    entry = snapshot.entry(entry_id)

    decision = authorize_equip_toggle(entry.item, entry.is_equipped, snapshot.stats, lock)
    if not decision.allowed:
        return decision

    row = await session.get(ItemInstance, entry_id)
    row.is_equipped = not entry.is_equipped
    await session.flush()

    logger.info(
        "item_equip_toggled",
        character_id=str(character_id),
        item_id=entry.item.id,
        equipped=row.is_equipped,
    )
    return decision


async def consume_item(session: AsyncSession, character_id: UUID, entry_id: UUID) -> ConsumptionResult:
    """
    Consume one item from an inventory entry, permanently applying its effects.

    The character delta and the inventory delta are written in the caller's
    transaction.

    Raises:
        ActionsLockedError: If player actions are locked
        CharacterNotFoundError: If the character does not exist
        InventoryEntryNotFoundError: If the character holds no such entry
        ItemNotConsumableError: If the item is not consumable
    """
    lock = await get_action_lock(session)
    lock.ensure_unlocked()

    snapshot = await load_snapshot(session, character_id, for_update=True)
    entry = snapshot.entry(entry_id)

    result = resolve_consumption(snapshot.character, entry.item, entry.quantity, lock)

    character_row = await session.get(Character, character_id)
    for field_name, value in result.character_delta.items():
        setattr(character_row, field_name, value)
    # The delta carries all six abilities as modifiers
    character_row.scores_normalized = True

    entry_row = await session.get(ItemInstance, entry_id)
    if result.inventory_delta.deleted:
        await session.delete(entry_row)
    else:
        entry_row.quantity = result.inventory_delta.quantity

    await session.flush()
    return result


async def _character_grants(
    session: AsyncSession, character_id: UUID, for_update: bool = False
) -> list[CharacterAbilityGrant]:
    stmt = (
        select(CharacterAbilityGrant)
        .where(CharacterAbilityGrant.character_id == character_id)
        .order_by(CharacterAbilityGrant.created_at, CharacterAbilityGrant.id)
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_abilities(session: AsyncSession, character_id: UUID) -> list[Ability]:
    """
    Get every ability available to a character.

    Character grants come first, then class features, then abilities of items
    in the inventory (equipped ones only, unless the item grants it regardless).

    Raises:
        CharacterNotFoundError: If the character does not exist
    """
    snapshot = await load_snapshot(session, character_id)
    grants = await _character_grants(session, character_id)

    item_ids = {entry.item.id for entry in snapshot.inventory}
    links_by_item: dict[str, list[ItemAbilityLink]] = {}
    if item_ids:
        result = await session.execute(
            select(ItemAbilityLink)
            .where(ItemAbilityLink.item_id.in_(item_ids))
            .order_by(
                ItemAbilityLink.item_id,
                ItemAbilityLink.position,
                ItemAbilityLink.created_at,
                ItemAbilityLink.id,
            )
        )
        for link in result.scalars().all():
            links_by_item.setdefault(link.item_id, []).append(link)

    item_grants = [
        ItemAbilityGrant(
            item=entry.item,
            abilities=[AbilityDef.model_validate(link.ability)],
            requires_equipped=link.requires_equipped,
            equipped=entry.is_equipped,
        )
        for entry in snapshot.inventory
        for link in links_by_item.get(entry.item.id, [])
    ]

    return aggregate_abilities(
        [CharacterAbility.model_validate(grant) for grant in grants],
        snapshot.character.class_features,
        item_grants,
    )


async def grant_ability(session: AsyncSession, character_id: UUID, ability_id: str) -> Ability:
    """
    Give a character an ability from the ability catalog, with full charges.

    Raises:
        CharacterNotFoundError: If the character does not exist
        AbilityNotFoundError: If the ability is not in the catalog
    """
    await _get_character_row(session, character_id)

    template = await session.get(AbilityTemplate, ability_id)
    if template is None:
        raise AbilityNotFoundError(f"Ability '{ability_id}' not found")

    grant = CharacterAbilityGrant(
        id=uuid.uuid4(),
        character_id=character_id,
        ability_id=ability_id,
        current_charges=template.max_charges or 0,
        ability=template,
    )
    session.add(grant)
    await session.flush()

    logger.info("ability_granted", character_id=str(character_id), ability_id=ability_id)
    return character_ability(CharacterAbility.model_validate(grant))


async def use_ability(session: AsyncSession, character_id: UUID, grant_id: UUID) -> Ability:
    """
    Spend one charge of an ability granted to the character.

    Returns:
        The ability with its remaining charges

    Raises:
        ActionsLockedError: If player actions are locked
        AbilityNotFoundError: If the character has no such grant
        NoChargesRemainingError: If the ability has no charges left
    """
    lock = await get_action_lock(session)
    lock.ensure_unlocked()

    result = await session.execute(
        select(CharacterAbilityGrant)
        .where(
            CharacterAbilityGrant.id == grant_id,
            CharacterAbilityGrant.character_id == character_id,
        )
        .with_for_update()
    )
    grant = result.scalar_one_or_none()
    if grant is None:
        raise AbilityNotFoundError(f"Ability grant {grant_id} not found for character {character_id}")

    used = spend_charge(character_ability(CharacterAbility.model_validate(grant)))
    if used.current_charges is not None:
        grant.current_charges = used.current_charges
    await session.flush()

    logger.info(
        "ability_used",
        character_id=str(character_id),
        ability_id=grant.ability_id,
        remaining=used.current_charges,
    )
    return used


async def take_rest(session: AsyncSession, character_id: UUID, rest_type: RestType) -> list[Ability]:
    """
    Restore charges of the character's granted abilities after a rest.

    Returns:
        The character's granted abilities with their new charge counts

    Raises:
        ActionsLockedError: If player actions are locked
        CharacterNotFoundError: If the character does not exist
    """
    rest_type = RestType(rest_type)
    lock = await get_action_lock(session)
    lock.ensure_unlocked()

    await _get_character_row(session, character_id, for_update=True)
    grants = await _character_grants(session, character_id, for_update=True)

    restored: list[Ability] = []
    for grant in grants:
        ability = character_ability(CharacterAbility.model_validate(grant))
        charges = restore_charges(ability, rest_type)
        grant.current_charges = charges
        restored.append(ability.model_copy(update={"current_charges": charges}))
    await session.flush()

    logger.info("character_rested", character_id=str(character_id), rest_type=rest_type.value)
    return restored


async def create_character(
    session: AsyncSession, class_id: str, name: str, usd: int = 0
) -> CharacterBase:
    """
    Create a character of a class, with its starting tools in the inventory.

    Args:
        session: Database session
        class_id: Class catalog id
        name: Character name
        usd: Starting currency

    Returns:
        The new character's base record

    Raises:
        UnknownClassError: If the class id is not in the catalog
    """
    class_def = get_class_catalog().get(class_id)
    if class_def is None:
        raise UnknownClassError(class_id)

    base = build_character(class_def, name, id=uuid.uuid4(), usd=usd)
    session.add(Character(**base.model_dump(), scores_normalized=True))

    for item in starting_kit(class_def):
        template = await session.get(ItemTemplate, item.id)
        if template is None:
            template = ItemTemplate(**item.model_dump())
            session.add(template)
        session.add(ItemInstance(character_id=base.id, item=template, quantity=1, is_equipped=False))

    await session.flush()

    logger.info("character_created", character_id=str(base.id), name=base.name, class_id=class_id)
    return base


async def migrate_legacy_ability_scores(session: AsyncSession) -> int:
    """
    Rewrite legacy 10-centered ability scores as modifiers.

    After this has run against every record, ``legacy_score_detection`` can be
    switched off.

    Rows already marked ``scores_normalized`` are left alone; every other row
    is rewritten where needed and then marked.

    Returns:
        Number of characters whose scores changed
    """
    result = await session.execute(
        select(Character).where(Character.scores_normalized.is_(False)).with_for_update()
    )

    migrated = 0
    for character in result.scalars().all():
        updates = legacy_score_updates(CharacterBase.model_validate(character))
        character.scores_normalized = True
        if not updates:
            continue
        for field_name, value in updates.items():
            setattr(character, field_name, value)
        migrated += 1
        logger.info("legacy_scores_migrated", character_id=str(character.id), fields=sorted(updates))

    await session.flush()
    return migrated
