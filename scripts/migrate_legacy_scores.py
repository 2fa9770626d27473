#!/usr/bin/env python3
"""
Rewrite legacy 10-centered ability scores as modifiers.

Run once against the configured database (DATABASE_URL). Afterwards set
NEONSHEET_LEGACY_SCORE_DETECTION=false so that genuine modifiers of +8 or
more are no longer mistaken for old scores.
"""

import asyncio

from neonsheet.database import close_db, get_session, init_db
from neonsheet.game.systems.sheet import migrate_legacy_ability_scores
from neonsheet.logging_config import configure_logging


async def main() -> None:
    """Migrate every character record in one transaction."""
    configure_logging()
    await init_db()

    print("=" * 70)
    print("Neonsheet - Legacy Ability Score Migration")
    print("=" * 70)

    try:
        async with get_session() as session:
            migrated = await migrate_legacy_ability_scores(session)
    finally:
        await close_db()

    print(f"\nMigrated {migrated} character(s).")


if __name__ == "__main__":
    asyncio.run(main())
