"""Game commands for the word chain bot."""

import logging
from typing import Optional

import aiosqlite
import discord
from discord import app_commands
from discord.ext import commands

from clients.gemini import GeminiOracle
from clients.leaderboard import create_leaderboard_store
from database.manager import db_manager
from game.engine import GameEngine
from game.errors import GameError
from game.results import build_game_over_report
from game.session import Difficulty
from game.session_manager import PlayerSession, session_manager
from game.transitions import Transition
from utils.embeds import (
    create_game_over_embed,
    create_round_result_embed,
    create_session_started_embed,
    create_status_embed,
    create_timeout_embed
)

logger = logging.getLogger(__name__)


def build_difficulty(difficulty: str, custom_threshold: Optional[int]) -> Difficulty:
    """Resolve the slash command choice into a Difficulty."""
    if difficulty == "custom":
        if custom_threshold is None:
            raise ValueError("Pick a custom threshold between 1 and 100.")
        return Difficulty.custom(custom_threshold)
    return Difficulty.preset(difficulty)


class GameCommands(commands.Cog):
    """Game commands for word chain sessions."""

    def __init__(self, bot: commands.Bot, oracle=None, leaderboard_store=None, high_scores=None):
        self.bot = bot
        self.oracle = oracle or GeminiOracle()
        self.leaderboard_store = leaderboard_store or create_leaderboard_store()
        self.high_scores = high_scores or db_manager
        session_manager.set_engine_factory(lambda: GameEngine(self.oracle))

    def _timer_listener(self, session: PlayerSession, channel):
        """Announce timeouts, which arrive from the timer rather than a command."""
        async def on_transition(result: Transition):
            attempt = result.attempt
            if not attempt or not attempt.timed_out:
                return
            embed = create_timeout_embed(attempt, result.state)
            await channel.send(content=f"<@{session.player_id}>", embed=embed)
            if result.state.is_over:
                await self.finish_game(session, channel)
        return on_transition

    async def finish_game(self, session: PlayerSession, channel):
        """Build the game over report, record the game and post the summary."""
        if session.report is not None:
            return

        session.report = await build_game_over_report(
            session.state,
            session.player_id,
            self.oracle,
            self.leaderboard_store,
            self.high_scores
        )

        if not session.recorded:
            try:
                await self.high_scores.record_session(
                    session.state,
                    session.player_id,
                    session.server_id,
                    session.channel_id,
                    session.started_at
                )
                session.recorded = True
            except aiosqlite.Error as exc:
                logger.error("Failed to record session %s: %s", session.state.session_id, exc)

        await channel.send(content=f"<@{session.player_id}>", embed=create_game_over_embed(session.report))

    @app_commands.command(name="chain_start", description="Start a new word chain game")
    @app_commands.describe(
        difficulty="Difficulty level",
        custom_threshold="Starting similarity (1-100) for the Custom difficulty"
    )
    @app_commands.choices(difficulty=[
        app_commands.Choice(name="Easy (25%)", value="easy"),
        app_commands.Choice(name="Normal (50%)", value="normal"),
        app_commands.Choice(name="Hard (75%)", value="hard"),
        app_commands.Choice(name="Custom", value="custom")
    ])
    async def start(
        self,
        interaction: discord.Interaction,
        difficulty: str = "normal",
        custom_threshold: Optional[app_commands.Range[int, 1, 100]] = None
    ):
        """Start a new word chain game."""
        user_id = str(interaction.user.id)
        channel_id = str(interaction.channel_id)

        if session_manager.is_active(user_id, channel_id):
            await interaction.response.send_message("❌ You already have a game in progress here! Use `/chain_restart` to quit it.", ephemeral=True)
            return

        try:
            chosen = build_difficulty(difficulty, custom_threshold)
        except ValueError as exc:
            await interaction.response.send_message(f"❌ {exc}", ephemeral=True)
            return

        await interaction.response.defer(thinking=True)

        session = session_manager.create_session(
            channel_id=channel_id,
            server_id=str(interaction.guild.id) if interaction.guild else "DM",
            player_id=user_id,
            player_name=interaction.user.display_name
        )
        session.engine.add_listener(self._timer_listener(session, interaction.channel))

        try:
            await session.engine.start_session(chosen)
        except GameError as exc:
            session_manager.end_if_current(session)
            await interaction.followup.send(f"❌ {exc.message}", ephemeral=True)
            return

        embed = create_session_started_embed(session.state, interaction.user.display_name)
        await interaction.followup.send(embed=embed)

    @app_commands.command(name="chain_word", description="Submit a word related to the current word")
    @app_commands.describe(word="Your word")
    async def word(self, interaction: discord.Interaction, word: str):
        """Submit a word for the current round."""
        session = session_manager.get_session(str(interaction.user.id), str(interaction.channel_id))

        if not session or not session.state.is_playing:
            await interaction.response.send_message("❌ You don't have a game in progress! Start one with `/chain_start`.", ephemeral=True)
            return
        if session.state.in_flight:
            await interaction.response.send_message("⏳ Still scoring your last word, hang on!", ephemeral=True)
            return

        await interaction.response.defer(thinking=True)

        try:
            result = await session.engine.submit_word(word)
        except GameError as exc:
            await interaction.followup.send(f"❌ {exc.message}", ephemeral=True)
            return

        embed = create_round_result_embed(result.attempt, result.state)
        await interaction.followup.send(embed=embed)

        if result.state.is_over:
            await self.finish_game(session, interaction.channel)

    @app_commands.command(name="chain_status", description="Show your current game")
    async def status(self, interaction: discord.Interaction):
        """Show the current word, score, lives and timer."""
        session = session_manager.get_session(str(interaction.user.id), str(interaction.channel_id))

        if not session or not session.state.is_playing:
            await interaction.response.send_message("❌ You don't have a game in progress!", ephemeral=True)
            return

        await interaction.response.send_message(embed=create_status_embed(session.state), ephemeral=True)

    @app_commands.command(name="chain_restart", description="End your game so you can pick a new difficulty")
    async def restart(self, interaction: discord.Interaction):
        """Discard the current game."""
        session = session_manager.end_session(str(interaction.user.id), str(interaction.channel_id))

        if not session:
            await interaction.response.send_message("❌ You don't have a game to restart!", ephemeral=True)
            return

        await interaction.response.send_message("🔄 Game cleared. Use `/chain_start` to pick a difficulty!", ephemeral=True)


async def setup(bot: commands.Bot):
    """Load the cog."""
    await bot.add_cog(GameCommands(bot))
