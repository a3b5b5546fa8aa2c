"""Database models and schemas."""

# SQL schemas for all tables

CREATE_HIGH_SCORES_TABLE = """
CREATE TABLE IF NOT EXISTS high_scores (
    user_id TEXT PRIMARY KEY,
    player_name TEXT NOT NULL,
    score INTEGER NOT NULL DEFAULT 0,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

CREATE_LEADERBOARD_ENTRIES_TABLE = """
CREATE TABLE IF NOT EXISTS leaderboard_entries (
    entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    score INTEGER NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

CREATE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS sessions (
    session_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    server_id TEXT,
    channel_id TEXT,
    difficulty TEXT,
    final_threshold REAL,
    start_word TEXT,
    total_score INTEGER DEFAULT 0,
    total_attempts INTEGER DEFAULT 0,
    successful_attempts INTEGER DEFAULT 0,
    started_at TIMESTAMP,
    ended_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

# Indexes for performance
CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_leaderboard_score ON leaderboard_entries(score DESC);",
    "CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_sessions_score ON sessions(total_score DESC);",
]
