"""Configuration constants for the Cosine Chain bot."""

import os
from dotenv import load_dotenv

load_dotenv()

# Difficulty presets (threshold is the starting similarity bar)
DIFFICULTIES = {
    'easy': {'name': 'Easy', 'threshold': 0.25, 'multiplier': 0.25},
    'normal': {'name': 'Normal', 'threshold': 0.50, 'multiplier': 1.0},
    'hard': {'name': 'Hard', 'threshold': 0.75, 'multiplier': 2.0},
}
CUSTOM_DIFFICULTY_NAME = 'Custom'
CUSTOM_DIFFICULTY_MULTIPLIER = 1.0

# Round rules
MAX_LIVES = 3
ROUND_TIME_SECONDS = 30
THRESHOLD_INCREMENT = 0.01
FAILURE_PENALTY = 1000
BASE_POINTS_SCALE = 10000
ROUND_BONUS_RATE = 0.2
TIMEOUT_MARKER = '(timeout)'

# Leaderboard
LEADERBOARD_SIZE = 3
MAX_NAME_LENGTH = 10

# Oracle
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))

# Storage
LEADERBOARD_URL = os.getenv("LEADERBOARD_URL", "")
DATABASE_PATH = os.getenv("DATABASE_PATH", "./data/cosine_chain.db")
LEADERBOARD_TIMEOUT = 15
