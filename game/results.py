"""Post-game summary: personal best, leaderboard placement and chain drift."""

import logging
from typing import List, Optional

from game.errors import InvalidStateError, NetworkError, OracleError, StorageError
from game.ranking import LeaderboardEntry, calculate_rank, validate_submission
from game.session import SessionState
from utils.text_parsing import normalize_word

logger = logging.getLogger(__name__)


class GameOverReport:
    """
    Everything shown once a player is eliminated.

    Until the player registers a new record, the rank shown is the one their
    previously saved best holds on the current leaderboard. After a successful
    registration the leaderboard is re-fetched and the rank recomputed for the
    new score.
    """

    def __init__(self, state: SessionState, user_id: str, oracle, leaderboard_store, high_scores):
        if not state.is_over:
            raise InvalidStateError("The game is not over yet.")
        self.state = state
        self.user_id = user_id
        self.oracle = oracle
        self.leaderboard_store = leaderboard_store
        self.high_scores = high_scores

        self.leaderboard: List[LeaderboardEntry] = []
        self.leaderboard_error: Optional[str] = None
        self.best_score = 0
        self.best_name: Optional[str] = None
        self.rank: Optional[int] = None
        self.is_new_high_score = False
        self.submitted = False
        self.final_similarity: Optional[float] = None

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def can_register(self) -> bool:
        return self.is_new_high_score and not self.submitted

    async def load(self) -> 'GameOverReport':
        """Load the personal best, leaderboard and final chain similarity."""
        saved = await self.high_scores.get_high_score(self.user_id)
        if saved:
            self.best_score = saved.score
            self.best_name = saved.name
        self.is_new_high_score = self.score > self.best_score

        await self.refresh_leaderboard(self.best_score)
        self.final_similarity = await self._final_similarity()
        return self

    async def refresh_leaderboard(self, score_to_rank: int):
        """Re-fetch the leaderboard and place the given score on it."""
        self.leaderboard_error = None
        try:
            self.leaderboard = await self.leaderboard_store.fetch_top()
        except NetworkError as exc:
            self.leaderboard = []
            self.leaderboard_error = exc.message
            self.rank = None
            return
        self.rank = calculate_rank(score_to_rank, self.leaderboard)

    async def _final_similarity(self) -> Optional[float]:
        """Similarity between the first word and the last word successfully chained."""
        if not self.state.history:
            return None

        first_word = self.state.start_word
        last_word = self.state.last_chained_word
        if normalize_word(first_word) == normalize_word(last_word):
            return 1.0

        try:
            return await self.oracle.similarity(first_word, last_word)
        except OracleError as exc:
            logger.warning("Could not calculate final similarity: %s", exc)
            return None

    async def register(self, name: str):
        """
        Submit a new personal best to the leaderboard and save it locally.

        Raises:
            ValidationError: The name is blank or too long
            NetworkError: The leaderboard could not be updated
            InvalidStateError: This score is not a new record, or was already submitted
        """
        if not self.can_register:
            raise InvalidStateError("There is no new high score to register.")

        name = validate_submission(name, self.score)
        await self.leaderboard_store.submit(name, self.score)
        self.submitted = True
        self.best_score = self.score
        self.best_name = name

        try:
            await self.high_scores.save_high_score(self.user_id, name, self.score)
        except StorageError as exc:
            logger.error("Score %d was submitted but the personal best was not saved: %s", self.score, exc)

        await self.refresh_leaderboard(self.score)


async def build_game_over_report(
    state: SessionState,
    user_id: str,
    oracle,
    leaderboard_store,
    high_scores
) -> GameOverReport:
    """Create and load a report for a finished session."""
    report = GameOverReport(state, user_id, oracle, leaderboard_store, high_scores)
    return await report.load()

