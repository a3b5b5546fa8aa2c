"""Leaderboard placement for a finished game's score."""

from dataclasses import dataclass
from typing import Optional, Sequence

import config
from game.errors import ValidationError


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int


def validate_submission(name: str, score: int) -> str:
    """Check a leaderboard submission and return the trimmed name."""
    name = (name or '').strip()
    if not name:
        raise ValidationError("Please enter a name.")
    if len(name) > config.MAX_NAME_LENGTH:
        raise ValidationError(f"Names can be at most {config.MAX_NAME_LENGTH} characters.")
    if not isinstance(score, int) or isinstance(score, bool) or score < 0:
        raise ValidationError("Scores must be non-negative whole numbers.")
    return name


def calculate_rank(
    candidate_score: int,
    leaderboard: Sequence[LeaderboardEntry],
    capacity: int = config.LEADERBOARD_SIZE
) -> Optional[int]:
    """
    Work out where a score would place on the leaderboard.

    The leaderboard must be ordered by score, highest first. A score equal to
    an existing entry takes that entry's rank rather than the one after it.

    Args:
        candidate_score: Score to place
        leaderboard: Current top entries
        capacity: Number of visible leaderboard slots

    Returns:
        1-based rank, or None if the score is zero or would not be visible
    """
    if candidate_score <= 0:
        return None

    for index, entry in enumerate(leaderboard):
        if candidate_score >= entry.score:
            return index + 1

    if len(leaderboard) < capacity:
        return len(leaderboard) + 1

    return None
