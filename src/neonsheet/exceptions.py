"""Exception hierarchy for Neonsheet."""


class NeonsheetError(Exception):
    """Base class for all Neonsheet errors."""

    pass


class ItemNotConsumableError(NeonsheetError):
    """Raised when a caller tries to consume an item that is not consumable."""

    def __init__(self, item_name: str) -> None:
        super().__init__(f"Item '{item_name}' is not consumable")
        self.item_name = item_name


class UnknownSkillError(NeonsheetError, ValueError):
    """Raised when a skill name is not one of the 18 known skills."""

    def __init__(self, skill_name: str) -> None:
        super().__init__(f"Unknown skill: '{skill_name}'")
        self.skill_name = skill_name


class ActionsLockedError(NeonsheetError):
    """Raised when a player action is attempted while actions are locked."""

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(f"Actions locked: {reason or 'DM has locked player actions'}")
        self.reason = reason


class NoChargesRemainingError(NeonsheetError):
    """Raised when an ability with no charges left is used."""

    def __init__(self, ability_name: str) -> None:
        super().__init__(f"No charges remaining for '{ability_name}'")
        self.ability_name = ability_name


class ClassLoadError(NeonsheetError):
    """Raised when there's an error loading class catalog data."""

    pass


class ClassValidationError(NeonsheetError):
    """Raised when a class definition fails validation."""

    pass


class CharacterNotFoundError(NeonsheetError, LookupError):
    """Raised when a character record does not exist."""

    pass


class InventoryEntryNotFoundError(NeonsheetError, LookupError):
    """Raised when an inventory entry does not exist or belongs to another character."""

    pass


class UnknownClassError(NeonsheetError, LookupError):
    """Raised when a class id is not in the class catalog."""

    def __init__(self, class_id: str) -> None:
        super().__init__(f"Unknown class: '{class_id}'")
        self.class_id = class_id


class AbilityNotFoundError(NeonsheetError, LookupError):
    """Raised when a character has no such ability grant."""

    pass
