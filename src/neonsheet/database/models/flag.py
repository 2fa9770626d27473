"""Global game flags shared by every character."""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

PLAYERS_LOCKED_FLAG = "players_locked"


class GameFlag(Base, TimestampMixin):
    """Key/value flag set by the DM (e.g., ``players_locked``)."""

    __tablename__ = "game_flags"

    key: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Flag name",
    )

    value: Mapped[dict[str, Any] | None] = mapped_column(
        JSON,
        default=None,
        comment="Flag payload",
    )

    def __repr__(self) -> str:
        """String representation of GameFlag."""
        return f"<GameFlag(key='{self.key}', value={self.value})>"
