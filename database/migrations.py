"""Database initialization and migrations."""

import logging
from pathlib import Path
from typing import Optional

import aiosqlite

import config
from database.models import (
    CREATE_HIGH_SCORES_TABLE,
    CREATE_LEADERBOARD_ENTRIES_TABLE,
    CREATE_SESSIONS_TABLE,
    CREATE_INDEXES
)

logger = logging.getLogger(__name__)


async def initialize_database(db_path: Optional[str] = None):
    """Initialize database with all tables."""
    db_path = db_path or config.DATABASE_PATH

    # Create data directory if it doesn't exist
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        await db.execute(CREATE_HIGH_SCORES_TABLE)
        await db.execute(CREATE_LEADERBOARD_ENTRIES_TABLE)
        await db.execute(CREATE_SESSIONS_TABLE)

        for index_sql in CREATE_INDEXES:
            await db.execute(index_sql)

        await db.commit()
        logger.info("Database initialized at %s", db_path)
