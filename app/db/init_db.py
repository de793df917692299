"""
Create the timetable tables and seed the singleton school settings row.

Usage:
  python -m app.db.init_db

Safe to re-run: existing tables and an existing settings row are left untouched.
"""
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

# Import models so they are registered on Base.metadata
from app.core.models import SETTINGS_ID, SchoolSettings  # noqa: F401
from app.db.session import AsyncSessionLocal, Base, engine

logger = logging.getLogger(__name__)


async def create_tables(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_default_settings(db: AsyncSession) -> bool:
    """Insert the ``default`` settings row if missing. Returns True when a row was created."""
    result = await db.execute(select(SchoolSettings.id).where(SchoolSettings.id == SETTINGS_ID))
    if result.scalar_one_or_none() is not None:
        return False
    db.add(SchoolSettings(id=SETTINGS_ID))
    await db.commit()
    logger.info("Seeded default school settings")
    return True


async def init_db(bind: AsyncEngine = engine) -> None:
    await create_tables(bind)
    async with AsyncSessionLocal(bind=bind) as db:
        try:
            await seed_default_settings(db)
        except Exception:
            await db.rollback()
            raise


async def main() -> None:
    await init_db()
    print("Tables created; default school settings present.")


if __name__ == "__main__":
    asyncio.run(main())
