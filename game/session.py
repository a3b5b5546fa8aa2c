"""Game session data structures."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

import config
from utils.text_parsing import normalize_word


class Phase(str, Enum):
    """Lifecycle phase of a session."""
    SELECTING_DIFFICULTY = 'selecting_difficulty'
    PLAYING = 'playing'
    GAME_OVER = 'game_over'


@dataclass(frozen=True)
class Difficulty:
    """Similarity bar and score multiplier chosen for a whole session."""
    name: str
    threshold: float
    multiplier: float

    def __post_init__(self):
        if not 0 < self.threshold <= 1:
            raise ValueError(f"Difficulty threshold must be in (0, 1], got {self.threshold}")
        if self.multiplier <= 0:
            raise ValueError(f"Difficulty multiplier must be positive, got {self.multiplier}")

    @classmethod
    def preset(cls, key: str) -> 'Difficulty':
        """Build one of the configured difficulty presets."""
        try:
            settings = config.DIFFICULTIES[key.lower()]
        except KeyError:
            raise ValueError(f"Unknown difficulty: {key}") from None
        return cls(settings['name'], settings['threshold'], settings['multiplier'])

    @classmethod
    def custom(cls, percent: int) -> 'Difficulty':
        """Build a custom difficulty from a 1-100 percentage threshold."""
        if not 0 < percent <= 100:
            raise ValueError(f"Custom threshold must be between 1 and 100, got {percent}")
        return cls(config.CUSTOM_DIFFICULTY_NAME, percent / 100, config.CUSTOM_DIFFICULTY_MULTIPLIER)


@dataclass(frozen=True)
class Attempt:
    """One resolved round: a scored submission or a timeout."""
    previous_word: str
    new_word: str
    similarity: float
    success: bool
    required_threshold: float
    points: int
    timed_out: bool = False


def _new_session_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of one game. Transitions return a new instance."""
    session_id: str = field(default_factory=_new_session_id)
    phase: Phase = Phase.SELECTING_DIFFICULTY
    difficulty: Optional[Difficulty] = None

    # Current state
    threshold: float = 0.0
    score: int = 0
    start_word: str = ''
    current_word: str = ''
    lives: int = config.MAX_LIVES
    time_remaining: int = config.ROUND_TIME_SECONDS

    # Resolved rounds, oldest first
    history: Tuple[Attempt, ...] = ()

    # Candidate whose similarity is being computed
    pending_word: Optional[str] = None

    @property
    def in_flight(self) -> bool:
        return self.pending_word is not None

    @property
    def is_playing(self) -> bool:
        return self.phase == Phase.PLAYING

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    @property
    def used_words(self) -> FrozenSet[str]:
        """Normalized start word plus every submitted word (timeouts excluded)."""
        words = {normalize_word(a.new_word) for a in self.history if not a.timed_out}
        if self.start_word:
            words.add(normalize_word(self.start_word))
        return frozenset(words)

    @property
    def successful_attempts(self) -> int:
        return sum(1 for a in self.history if a.success)

    @property
    def last_chained_word(self) -> str:
        """The most recent successfully chained word, or the start word."""
        for attempt in reversed(self.history):
            if attempt.success:
                return attempt.new_word
        return self.start_word
