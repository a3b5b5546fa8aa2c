"""Manages active game sessions."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from game.engine import GameEngine
from game.results import GameOverReport


@dataclass
class PlayerSession:
    """A player's game in one channel, with the engine driving it."""
    channel_id: str
    server_id: str
    player_id: str
    player_name: str
    engine: GameEngine

    # Filled in once the game is over
    report: Optional[GameOverReport] = None
    recorded: bool = False

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def state(self):
        return self.engine.state


class SessionManager:
    """Manages active word chain sessions."""

    def __init__(self, engine_factory: Optional[Callable[[], GameEngine]] = None):
        self._engine_factory = engine_factory
        # Dictionary mapping (user_id, channel_id) to session
        self._sessions: Dict[Tuple[str, str], PlayerSession] = {}

    def set_engine_factory(self, engine_factory: Callable[[], GameEngine]):
        self._engine_factory = engine_factory

    def create_session(
        self,
        channel_id: str,
        server_id: str,
        player_id: str,
        player_name: str
    ) -> PlayerSession:
        """Create a new session, replacing any previous one for this player and channel."""
        if self._engine_factory is None:
            raise RuntimeError("SessionManager has no engine factory configured")

        self.end_session(player_id, channel_id)

        session = PlayerSession(
            channel_id=channel_id,
            server_id=server_id,
            player_id=player_id,
            player_name=player_name,
            engine=self._engine_factory()
        )
        self._sessions[(player_id, channel_id)] = session
        return session

    def get_session(self, user_id: str, channel_id: str) -> Optional[PlayerSession]:
        """Get the session for a user in a channel."""
        return self._sessions.get((user_id, channel_id))

    def end_session(self, user_id: str, channel_id: str) -> Optional[PlayerSession]:
        """End a session; any oracle call it still has outstanding is discarded."""
        session = self._sessions.pop((user_id, channel_id), None)
        if session:
            session.engine.restart()
        return session

    def end_if_current(self, session: PlayerSession) -> bool:
        """End the given session only if it is still the one registered for its key."""
        if self.get_session(session.player_id, session.channel_id) is not session:
            return False
        self.end_session(session.player_id, session.channel_id)
        return True

    def is_active(self, user_id: str, channel_id: str) -> bool:
        """Check if a user has a game in progress."""
        session = self.get_session(user_id, channel_id)
        return session is not None and session.state.is_playing


# Global session manager instance
session_manager = SessionManager()
