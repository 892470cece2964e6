"""Script to initialize the database without running migrations."""

import asyncio

from sqlalchemy import text

from app.database import DATABASE_URL, engine
from app.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    async with engine.begin() as conn:
        if DATABASE_URL.startswith("postgresql"):
            # Enable pgcrypto extension
            await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))

        # Create all tables
        await conn.run_sync(metadata.create_all)

    await engine.dispose()
    print(f"✓ Database initialized successfully! ({len(metadata.tables)} tables)")


if __name__ == "__main__":
    asyncio.run(init_db())
