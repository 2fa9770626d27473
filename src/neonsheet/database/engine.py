"""
Database engine and unit-of-work sessions for Neonsheet.

One process-wide async engine is built lazily from ``Settings.database_url``.
Callers open a unit of work with ``get_session()``; the sheet flows in
``neonsheet.game.systems.sheet`` only flush, so the unit of work decides
whether their writes land.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from neonsheet.config import get_settings

from .models import Base

logger = structlog.get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the folder holding a file-backed SQLite database."""
    db_path = database_url.split("///")[-1]
    if not db_path or db_path.startswith(":memory:"):
        return
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement so inventory and grants cascade with their character."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine() -> AsyncEngine:
    """Return the shared async engine, building it on first use."""
    global _engine

    if _engine is None:
        settings = get_settings()
        sqlite = _is_sqlite(settings.database_url)
        if sqlite:
            _ensure_sqlite_directory(settings.database_url)

        _engine = create_async_engine(settings.database_url, echo=settings.debug)
        if sqlite:
            _enable_sqlite_foreign_keys(_engine)

        logger.debug(
            "database_engine_created",
            url=_engine.url.render_as_string(hide_password=True),
            sqlite=sqlite,
        )

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory bound to ``get_engine()``."""
    global _async_session_factory

    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )

    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Open one unit of work against the character database.

    A sheet flow called inside the block stages its writes; leaving the block
    normally commits all of them, and any exception rolls every one back.
    This is what keeps a consumable's character delta and its inventory delta
    from landing separately.

    Yields:
        A session scoped to the unit of work

    Example:
        async with get_session() as session:
            await set_action_lock(session, locked=False)
            decision = await toggle_equip(session, character_id, entry_id)
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.debug("unit_of_work_rolled_back")
            raise


async def init_db() -> None:
    """Create any missing tables."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_initialized", tables=sorted(Base.metadata.tables))


async def close_db() -> None:
    """Dispose of the shared engine; the next ``get_engine()`` builds a new one."""
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
