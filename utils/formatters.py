"""Text formatting helpers."""

import config


def format_score(score: int) -> str:
    """Format score with commas."""
    return f"{score:,}"


def format_points(points: int) -> str:
    """Format a points change with an explicit sign."""
    return f"+{points:,}" if points > 0 else f"{points:,}"


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format percentage."""
    return f"{value:.{decimals}f}%"


def format_similarity(similarity: float) -> str:
    """Format a similarity score as a percentage; negatives show as 0%."""
    return format_percentage(max(0.0, similarity) * 100, 2)


def format_threshold(threshold: float) -> str:
    return format_percentage(threshold * 100, 0)


def format_lives(lives: int) -> str:
    """Render remaining lives as hearts."""
    lives = max(0, min(lives, config.MAX_LIVES))
    return "❤️" * lives + "🖤" * (config.MAX_LIVES - lives)


def truncate_text(text: str, max_length: int = 50, suffix: str = "...") -> str:
    """Truncate text to max length."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
