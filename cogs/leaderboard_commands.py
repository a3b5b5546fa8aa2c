"""Leaderboard and personal best commands."""

import discord
from discord import app_commands
from discord.ext import commands

from clients.leaderboard import create_leaderboard_store
from database.manager import db_manager
from game.errors import GameError
from game.ranking import calculate_rank
from game.session_manager import session_manager
from utils.embeds import create_best_embed, create_game_over_embed, create_leaderboard_embed


class LeaderboardCommands(commands.Cog):
    """Leaderboard and personal best commands."""

    def __init__(self, bot: commands.Bot, leaderboard_store=None, high_scores=None):
        self.bot = bot
        self.leaderboard_store = leaderboard_store or create_leaderboard_store()
        self.high_scores = high_scores or db_manager

    @app_commands.command(name="chain_leaderboard", description="View the top scores")
    async def leaderboard(self, interaction: discord.Interaction):
        """View the leaderboard and where your best would place."""
        await interaction.response.defer()

        try:
            entries = await self.leaderboard_store.fetch_top()
        except GameError as exc:
            await interaction.followup.send(f"❌ {exc.message}", ephemeral=True)
            return

        best = await self.high_scores.get_high_score(str(interaction.user.id))
        rank = calculate_rank(best.score, entries) if best else None

        await interaction.followup.send(embed=create_leaderboard_embed(entries, rank))

    @app_commands.command(name="chain_register", description="Register your new high score")
    @app_commands.describe(name="Name to show on the leaderboard (max 10 characters)")
    async def register(self, interaction: discord.Interaction, name: str):
        """Submit a finished game's new record to the leaderboard."""
        session = session_manager.get_session(str(interaction.user.id), str(interaction.channel_id))
        report = session.report if session else None

        if not report or not report.can_register:
            await interaction.response.send_message("❌ You don't have a new high score to register!", ephemeral=True)
            return

        await interaction.response.defer()

        try:
            await report.register(name)
        except GameError as exc:
            await interaction.followup.send(f"❌ {exc.message}", ephemeral=True)
            return

        await interaction.followup.send(embed=create_game_over_embed(report))

    @app_commands.command(name="chain_best", description="View your personal best")
    async def best(self, interaction: discord.Interaction):
        """View your personal best and game totals."""
        user_id = str(interaction.user.id)
        high_score = await self.high_scores.get_high_score(user_id)
        stats = await self.high_scores.get_player_stats(user_id)

        if not high_score and not stats:
            await interaction.response.send_message("❌ No games recorded yet. Play one with `/chain_start`!", ephemeral=True)
            return

        embed = create_best_embed(
            high_score.name if high_score else interaction.user.display_name,
            high_score.score if high_score else 0,
            stats
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot: commands.Bot):
    """Load the cog."""
    await bot.add_cog(LeaderboardCommands(bot))
