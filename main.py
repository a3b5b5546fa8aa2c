"""Main entry point for the Cosine Chain bot."""

import asyncio
import logging
import os

from dotenv import load_dotenv

import config
from bot.client import create_bot
from bot.events import setup_events
from database.migrations import initialize_database

# Load environment variables
load_dotenv()


async def main():
    """Main function to start the bot."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Get tokens
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        print("ERROR: DISCORD_TOKEN not found in environment variables!")
        print("Please create a .env file with your Discord bot token.")
        return
    if not config.GEMINI_API_KEY:
        print("ERROR: GEMINI_API_KEY not found in environment variables!")
        print("The game cannot score words without a Gemini API key.")
        return

    # Initialize database
    print("Initializing database...")
    await initialize_database()
    print("Database initialized!")

    # Create bot
    bot = create_bot()

    # Setup events
    setup_events(bot)

    # Load cogs
    await bot.load_extension('cogs.game_commands')
    await bot.load_extension('cogs.leaderboard_commands')

    # Start bot
    print("Starting bot...")
    async with bot:
        await bot.start(token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nBot stopped by user.")
