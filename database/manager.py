"""Database operations manager."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

import aiosqlite

import config
from game.errors import NetworkError, StorageError
from game.ranking import LeaderboardEntry, validate_submission
from game.session import SessionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighScore:
    """A player's personal best."""
    score: int
    name: str


class DatabaseManager:
    """Manages all database operations."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or config.DATABASE_PATH

    def _connect(self) -> aiosqlite.Connection:
        """Open a database connection (use with ``async with``)."""
        return aiosqlite.connect(self.db_path)

    # High score operations
    async def get_high_score(self, user_id: str) -> Optional[HighScore]:
        """Get a player's saved personal best."""
        async with self._connect() as db:
            async with db.execute(
                "SELECT score, player_name FROM high_scores WHERE user_id = ?",
                (user_id,)
            ) as cursor:
                row = await cursor.fetchone()
                if not row:
                    return None
                return HighScore(score=row[0], name=row[1])

    async def save_high_score(self, user_id: str, player_name: str, score: int):
        """Save a personal best; lower scores never replace a higher one."""
        try:
            async with self._connect() as db:
                await db.execute(
                    """
                    INSERT INTO high_scores (user_id, player_name, score, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(user_id) DO UPDATE SET
                        player_name = excluded.player_name,
                        score = excluded.score,
                        updated_at = excluded.updated_at
                    WHERE excluded.score >= high_scores.score
                    """,
                    (user_id, player_name, score, datetime.now(timezone.utc).isoformat())
                )
                await db.commit()
        except aiosqlite.Error as exc:
            logger.error("Error saving high score for %s: %s", user_id, exc)
            raise StorageError("Failed to save your personal best.") from exc

    # Session operations
    async def record_session(
        self,
        state: SessionState,
        user_id: str,
        server_id: str,
        channel_id: str,
        started_at: datetime
    ):
        """Record a finished game."""
        async with self._connect() as db:
            await db.execute(
                """
                INSERT OR REPLACE INTO sessions
                (session_id, user_id, server_id, channel_id, difficulty,
                 final_threshold, start_word, total_score, total_attempts,
                 successful_attempts, started_at, ended_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    state.session_id, user_id, server_id, channel_id,
                    state.difficulty.name if state.difficulty else None,
                    state.threshold, state.start_word, state.score,
                    len(state.history), state.successful_attempts,
                    started_at.isoformat(), datetime.now(timezone.utc).isoformat()
                )
            )
            await db.commit()

    async def get_player_stats(self, user_id: str) -> Optional[Dict]:
        """Get a player's game totals."""
        async with self._connect() as db:
            async with db.execute(
                """
                SELECT COUNT(*),
                       COALESCE(MAX(total_score), 0),
                       COALESCE(SUM(successful_attempts), 0),
                       COALESCE(MAX(successful_attempts), 0),
                       MAX(ended_at)
                FROM sessions
                WHERE user_id = ?
                """,
                (user_id,)
            ) as cursor:
                row = await cursor.fetchone()
                if not row or row[0] == 0:
                    return None
                return {
                    'games_played': row[0],
                    'best_game_score': row[1],
                    'total_links': row[2],
                    'longest_chain': row[3],
                    'last_played': row[4],
                }

    # Leaderboard operations
    async def get_leaderboard(self, limit: int = config.LEADERBOARD_SIZE) -> List[LeaderboardEntry]:
        """Get top leaderboard entries; earlier entries win ties."""
        async with self._connect() as db:
            async with db.execute(
                """
                SELECT name, score FROM leaderboard_entries
                ORDER BY score DESC, entry_id ASC
                LIMIT ?
                """,
                (limit,)
            ) as cursor:
                return [LeaderboardEntry(row[0], row[1]) async for row in cursor]

    async def add_leaderboard_entry(self, name: str, score: int):
        """Append a score to the leaderboard."""
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO leaderboard_entries (name, score, created_at) VALUES (?, ?, ?)",
                (name, score, datetime.now(timezone.utc).isoformat())
            )
            await db.commit()


class SqliteLeaderboardStore:
    """Leaderboard kept in the local database."""

    def __init__(self, manager: DatabaseManager):
        self.manager = manager

    async def fetch_top(self) -> List[LeaderboardEntry]:
        try:
            return await self.manager.get_leaderboard()
        except aiosqlite.Error as exc:
            logger.error("Error reading leaderboard: %s", exc)
            raise NetworkError("Failed to load the leaderboard. Please try again later.") from exc

    async def submit(self, name: str, score: int):
        name = validate_submission(name, score)
        try:
            await self.manager.add_leaderboard_entry(name, score)
        except aiosqlite.Error as exc:
            logger.error("Error saving leaderboard entry: %s", exc)
            raise NetworkError("Failed to submit your score. Please try again.") from exc


# Global database manager instance
db_manager = DatabaseManager()
