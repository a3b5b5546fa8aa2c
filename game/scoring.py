"""Scoring calculations for word chain attempts."""

import math

import config


def round_half_away(value: float) -> int:
    """Round to the nearest integer, with halves rounded away from zero."""
    rounded = math.floor(abs(value) + 0.5)
    return int(rounded if value >= 0 else -rounded)


def calculate_points(
    similarity: float,
    threshold: float,
    round_number: int,
    multiplier: float
) -> int:
    """
    Calculate points for a successful link in the chain.

    Args:
        similarity: Similarity reported by the oracle (>= threshold)
        threshold: Similarity required for this round
        round_number: 1-based index of this success within the session
        multiplier: Difficulty multiplier

    Returns:
        Points as integer
    """
    # Margin over the bar, in ten-thousandths
    base_points = round_half_away((similarity - threshold) * config.BASE_POINTS_SCALE)

    # Longer chains earn a growing bonus
    bonus_points = round_half_away(base_points * round_number * config.ROUND_BONUS_RATE)

    return round_half_away((base_points + bonus_points) * multiplier)


def apply_penalty(score: int) -> int:
    """Deduct the failure penalty without letting the score go negative."""
    return max(0, score - config.FAILURE_PENALTY)


def is_successful_attempt(similarity: float, threshold: float) -> bool:
    """Check if a similarity meets the current threshold."""
    return similarity >= threshold
