"""Remote leaderboard backed by a JSON web app endpoint."""

import asyncio
import json
import logging
from typing import List, Optional

import requests

import config
from game.errors import NetworkError
from game.ranking import LeaderboardEntry, validate_submission

logger = logging.getLogger(__name__)


def parse_entries(rows) -> List[LeaderboardEntry]:
    """Convert raw ``{name, score}`` rows into entries, highest score first."""
    entries = []
    for row in rows or []:
        try:
            entries.append(LeaderboardEntry(str(row['name']), int(row['score'])))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed leaderboard row: %r", row)
    entries.sort(key=lambda entry: entry.score, reverse=True)
    return entries


class RemoteLeaderboardStore:
    """
    Leaderboard served by a web app.

    GET returns ``{"leaderboard": [{"name": ..., "score": ...}, ...]}``.
    POST takes ``{"name": ..., "score": ...}`` as a text/plain body and
    answers ``{"status": "success"}`` or ``{"status": ..., "message": ...}``.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: float = config.LEADERBOARD_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.url = url or config.LEADERBOARD_URL
        self.timeout = timeout
        self.session = session or requests.Session()

    def _fetch_top_sync(self) -> List[LeaderboardEntry]:
        try:
            response = self.session.get(self.url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error fetching leaderboard: %s", exc)
            raise NetworkError("Failed to load the leaderboard. Please try again later.") from exc

        if not isinstance(data, dict):
            raise NetworkError("The leaderboard returned an unexpected response.")
        return parse_entries(data.get('leaderboard'))[:config.LEADERBOARD_SIZE]

    def _submit_sync(self, name: str, score: int):
        try:
            response = self.session.post(
                self.url,
                data=json.dumps({'name': name, 'score': score}),
                headers={'Content-Type': 'text/plain;charset=utf-8'},
                timeout=self.timeout
            )
            response.raise_for_status()
            result = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error submitting score: %s", exc)
            raise NetworkError("Failed to submit your score. Please try again.") from exc

        if not isinstance(result, dict) or result.get('status') != 'success':
            message = result.get('message') if isinstance(result, dict) else None
            logger.error("Leaderboard rejected submission: %r", result)
            raise NetworkError(message or "The leaderboard rejected the score submission.")

    async def fetch_top(self) -> List[LeaderboardEntry]:
        """Fetch the top leaderboard entries, highest first."""
        if not self.url:
            logger.warning("LEADERBOARD_URL is not configured; leaderboard is empty")
            return []
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch_top_sync)

    async def submit(self, name: str, score: int):
        """Append a score to the leaderboard."""
        name = validate_submission(name, score)
        if not self.url:
            raise NetworkError("The leaderboard is not configured; cannot submit scores.")
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._submit_sync, name, score)


def create_leaderboard_store(manager=None):
    """Use the remote leaderboard when a URL is configured, else the local database."""
    if config.LEADERBOARD_URL:
        return RemoteLeaderboardStore()

    from database.manager import SqliteLeaderboardStore, db_manager
    return SqliteLeaderboardStore(manager or db_manager)
