"""Discord embed builders for bot responses."""

import discord
from typing import Dict, List, Optional

import config
from game.ranking import LeaderboardEntry
from game.results import GameOverReport
from game.session import Attempt, SessionState
from utils.formatters import (
    format_lives,
    format_points,
    format_score,
    format_similarity,
    format_threshold,
    truncate_text
)

MEDALS = ["👑", "🥈", "🥉"]


def _add_status_fields(embed: discord.Embed, state: SessionState):
    embed.add_field(name="Score", value=format_score(state.score), inline=True)
    embed.add_field(name="Lives", value=format_lives(state.lives), inline=True)
    embed.add_field(name="Required Similarity", value=format_threshold(state.threshold), inline=True)


def create_session_started_embed(state: SessionState, player_name: str) -> discord.Embed:
    """Create embed for a new game."""
    embed = discord.Embed(
        title="🔗 Cosine Chain Started!",
        description=f"{player_name}, reply with a word related to:\n# {state.current_word}",
        color=discord.Color.green()
    )
    embed.add_field(name="Difficulty", value=state.difficulty.name, inline=True)
    embed.add_field(
        name="Multiplier",
        value=f"x{state.difficulty.multiplier:g}",
        inline=True
    )
    embed.add_field(name="Lives", value=format_lives(state.lives), inline=True)
    embed.add_field(
        name="How to play",
        value=(
            "• `/chain_word <word>` - Submit a related word\n"
            "• Each success raises the bar by 1%\n"
            f"• A miss or timeout costs a life and {format_score(config.FAILURE_PENALTY)} points"
        ),
        inline=False
    )
    embed.set_footer(text=f"You have {config.ROUND_TIME_SECONDS} seconds per word.")
    return embed


def create_round_result_embed(attempt: Attempt, state: SessionState) -> discord.Embed:
    """Create embed for a scored word."""
    if attempt.success:
        embed = discord.Embed(
            title="✅ Linked!",
            description=f"**{attempt.previous_word}** → **{attempt.new_word}**",
            color=discord.Color.green()
        )
    else:
        embed = discord.Embed(
            title="❌ Not close enough!",
            description=f"**{attempt.previous_word}** ↛ **{attempt.new_word}**",
            color=discord.Color.red()
        )

    embed.add_field(name="Similarity", value=format_similarity(attempt.similarity), inline=True)
    embed.add_field(name="Needed", value=format_threshold(attempt.required_threshold), inline=True)
    embed.add_field(name="Points", value=format_points(attempt.points), inline=True)
    _add_status_fields(embed, state)

    if state.is_over:
        embed.set_footer(text="Out of lives! Game over.")
    elif attempt.success:
        embed.set_footer(text=f"Next word: {state.current_word}")
    else:
        embed.set_footer(text=f"Lives left: {state.lives}. Try another word for {state.current_word}.")
    return embed


def create_timeout_embed(attempt: Attempt, state: SessionState) -> discord.Embed:
    """Create embed for a round that ran out of time."""
    embed = discord.Embed(
        title="⏰ Time's up!",
        description=f"No word for **{attempt.previous_word}** in time.",
        color=discord.Color.orange()
    )
    embed.add_field(name="Points", value=format_points(attempt.points), inline=True)
    _add_status_fields(embed, state)

    if state.is_over:
        embed.set_footer(text="Out of lives! Game over.")
    else:
        embed.set_footer(text=f"Lives left: {state.lives}. The clock has been reset.")
    return embed


def create_status_embed(state: SessionState) -> discord.Embed:
    """Create embed for the current game status."""
    embed = discord.Embed(
        title="🔗 Current Chain",
        description=f"# {state.current_word}",
        color=discord.Color.blue()
    )
    _add_status_fields(embed, state)
    embed.add_field(name="Time Left", value=f"{state.time_remaining}s", inline=True)
    embed.add_field(name="Links", value=str(state.successful_attempts), inline=True)
    if state.in_flight:
        embed.set_footer(text=f"Scoring '{state.pending_word}'...")
    return embed


def _format_history(history) -> str:
    lines = []
    for attempt in history:
        icon = "✅" if attempt.success else "❌"
        points = f" ({format_points(attempt.points)})" if attempt.points != 0 else ""
        if attempt.timed_out:
            lines.append(f"{icon} {attempt.previous_word} → {attempt.new_word}{points}")
        else:
            lines.append(
                f"{icon} {attempt.previous_word} → {attempt.new_word} "
                f"{format_similarity(attempt.similarity)}{points}"
            )
    return "\n".join(lines)


def _format_leaderboard(entries: List[LeaderboardEntry]) -> str:
    lines = []
    for i, entry in enumerate(entries, 1):
        medal = MEDALS[i - 1] if i <= len(MEDALS) else f"{i}."
        lines.append(f"{medal} **{entry.name}** - {format_score(entry.score)} pts")
    return "\n".join(lines)


def create_game_over_embed(report: GameOverReport) -> discord.Embed:
    """Create embed for the end of a game."""
    state = report.state
    embed = discord.Embed(
        title="💀 Game Over",
        description=f"Final score: **{format_score(report.score)}** points",
        color=discord.Color.dark_red()
    )

    # Leaderboard
    if report.leaderboard_error:
        leaderboard_text = report.leaderboard_error
    elif report.leaderboard:
        leaderboard_text = _format_leaderboard(report.leaderboard)
    else:
        leaderboard_text = "No scores yet. Be the first!"
    embed.add_field(name="🏆 Leaderboard", value=leaderboard_text, inline=False)

    # Personal best
    if report.best_score > 0:
        best_text = f"{format_score(report.best_score)} points"
        if report.rank:
            best_text += f" (rank #{report.rank})"
        else:
            best_text += " (outside the top ranks)"
    else:
        best_text = "No record yet."
    embed.add_field(name="Your Best", value=best_text, inline=True)

    if report.can_register:
        embed.add_field(
            name="🎉 New Record!",
            value=f"Use `/chain_register <name>` (max {config.MAX_NAME_LENGTH} characters) to save it.",
            inline=False
        )
    elif report.submitted:
        embed.add_field(name="🎉 Record Saved", value="Your score has been registered.", inline=False)

    # Chain drift between the first and last linked words
    if report.final_similarity is not None:
        embed.add_field(
            name="Start ↔ Finish",
            value=(
                f"{state.start_word} ↔ {state.last_chained_word}: "
                f"{format_similarity(report.final_similarity)}"
            ),
            inline=False
        )

    if state.history:
        embed.add_field(
            name=f"📝 History ({len(state.history)})",
            value=truncate_text(_format_history(state.history), 1024),
            inline=False
        )

    embed.set_footer(text="Use /chain_restart to play again!")
    return embed


def create_leaderboard_embed(
    entries: List[LeaderboardEntry],
    rank: Optional[int] = None
) -> discord.Embed:
    """Create embed for the leaderboard."""
    embed = discord.Embed(
        title="🏆 Leaderboard",
        description=_format_leaderboard(entries) or "No scores yet. Be the first!",
        color=discord.Color.gold()
    )
    if rank:
        embed.set_footer(text=f"Your best would place #{rank}")
    else:
        embed.set_footer(text="Play to get on the leaderboard!")
    return embed


def create_best_embed(
    player_name: str,
    best_score: int,
    stats: Optional[Dict] = None
) -> discord.Embed:
    """Create embed for a player's personal best and totals."""
    embed = discord.Embed(
        title=f"📊 {player_name}'s Record",
        color=discord.Color.blue()
    )
    embed.add_field(name="Best Score", value=f"{format_score(best_score)} points", inline=False)

    if stats:
        embed.add_field(
            name="Totals",
            value=(
                f"**Games Played:** {stats['games_played']}\n"
                f"**Words Linked:** {stats['total_links']}\n"
                f"**Longest Chain:** {stats['longest_chain']}"
            ),
            inline=False
        )
        embed.set_footer(text=f"Last played: {stats.get('last_played') or 'Never'}")
    return embed
