"""Discord bot client setup."""

import discord
from discord.ext import commands


def create_bot() -> commands.Bot:
    """Create the bot with slash-command-only intents."""
    intents = discord.Intents.default()
    intents.guilds = True

    # Prefix is unused; every command is an app command
    return commands.Bot(
        command_prefix='!',
        intents=intents,
        activity=discord.Game(name="/chain_start")
    )
