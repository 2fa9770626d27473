"""Shared fixtures for all tests."""

import os

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from neonsheet.database.models import Base
from neonsheet.game.character.records import CharacterBase
from neonsheet.game.world.item import Item, ItemType


# Set the test database URL before anything caches settings, so that
# get_session() never touches a real database file
@pytest.fixture(scope="session", autouse=True)
def use_test_database(tmp_path_factory):
    """Force all tests to use a temporary database."""
    test_db_dir = tmp_path_factory.mktemp("neonsheet_test")
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_dir / 'test_neonsheet.db'}"

    import neonsheet.database.engine as engine_module

    engine_module._engine = None
    engine_module._async_session_factory = None

    from neonsheet.config import get_settings

    get_settings.cache_clear()

    yield

    engine_module._engine = None
    engine_module._async_session_factory = None


@pytest.fixture
async def db_session():
    """Create a test database session with in-memory SQLite."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def make_item():
    """Factory for catalog items; keyword arguments override the defaults."""

    def _make_item(item_id: str = "test_item", **overrides) -> Item:
        fields = {
            "id": item_id,
            "name": item_id.replace("_", " ").title(),
            "item_type": ItemType.ITEM,
        }
        fields.update(overrides)
        return Item(**fields)

    return _make_item


@pytest.fixture
def make_character():
    """Factory for base character records with plain starting numbers."""

    def _make_character(**overrides) -> CharacterBase:
        fields = {
            "name": "Vex",
            "class_id": "solo",
            "current_hp": 40,
            "max_hp": 50,
            "ac": 12,
            "strength": 1,
            "dexterity": 2,
            "constitution": 0,
            "wisdom": 0,
            "intelligence": 1,
            "charisma": -1,
            "speed": 30,
            "initiative_modifier": 1,
            "implant_capacity": 3,
        }
        fields.update(overrides)
        return CharacterBase(**fields)

    return _make_character
