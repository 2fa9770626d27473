"""Weapon proficiency ranks and modifier formatting."""

from neonsheet.game.world.item import WeaponCategory

MIN_WEAPON_RANK = 0
MAX_WEAPON_RANK = 5

# To-hit penalty for a weapon category the character has no training in
UNTRAINED_TO_HIT = -2


def weapon_rank_field(category: WeaponCategory | str) -> str:
    """Get the character record field holding the rank for a weapon category."""
    return f"weapon_rank_{WeaponCategory(category).value}"


def weapon_to_hit_modifier(rank: int) -> int:
    """
    Convert a weapon proficiency rank to a to-hit modifier.

    Ranks outside 0-5 are clamped into range.

    Args:
        rank: Proficiency rank (0-5)

    Returns:
        -2 at rank 0 (not proficient), otherwise rank - 1

    Examples:
        >>> weapon_to_hit_modifier(0)
        -2
        >>> weapon_to_hit_modifier(1)
        0
        >>> weapon_to_hit_modifier(5)
        4
    """
    rank = max(MIN_WEAPON_RANK, min(MAX_WEAPON_RANK, rank))
    if rank == 0:
        return UNTRAINED_TO_HIT
    return rank - 1


def format_modifier(modifier: int) -> str:
    """Format a modifier with an explicit sign (``+2``, ``0`` shows as ``+0``, ``-1``)."""
    return f"+{modifier}" if modifier >= 0 else f"{modifier}"


def format_to_hit(rank: int) -> str:
    """Format the to-hit modifier for a weapon rank."""
    return format_modifier(weapon_to_hit_modifier(rank))
