import asyncio
import os
import sys

import pytest

# Ensure the project root (containing the `game` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from game.ranking import LeaderboardEntry, validate_submission
from game.session import Difficulty
from game.transitions import (
    SessionStarted,
    SimilarityScored,
    SubmissionStarted,
    new_session,
    transition,
)


class FakeOracle:
    """Oracle double returning queued words and similarities (exceptions are raised)."""

    def __init__(self, words=("ocean",), similarities=()):
        self.words = list(words)
        self.similarities = list(similarities)
        self.calls = []

    async def random_word(self):
        value = self.words.pop(0) if len(self.words) > 1 else self.words[0]
        if isinstance(value, Exception):
            raise value
        return value

    async def similarity(self, first, second):
        self.calls.append((first, second))
        value = self.similarities.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


class GatedOracle(FakeOracle):
    """Oracle whose calls block until ``release()`` is called."""

    def __init__(self, words=("ocean",), similarities=()):
        super().__init__(words, similarities)
        self.gate = asyncio.Event()
        self.waiting = 0

    def release(self):
        self.gate.set()

    async def random_word(self):
        self.waiting += 1
        await self.gate.wait()
        return await super().random_word()

    async def similarity(self, first, second):
        self.waiting += 1
        await self.gate.wait()
        return await super().similarity(first, second)


class MemoryLeaderboardStore:
    def __init__(self, entries=(), fail_fetch=None, fail_submit=None):
        self.entries = list(entries)
        self.fail_fetch = fail_fetch
        self.fail_submit = fail_submit
        self.submitted = []

    async def fetch_top(self):
        if self.fail_fetch:
            raise self.fail_fetch
        ordered = sorted(self.entries, key=lambda e: e.score, reverse=True)
        return ordered[:3]

    async def submit(self, name, score):
        name = validate_submission(name, score)
        if self.fail_submit:
            raise self.fail_submit
        self.submitted.append((name, score))
        self.entries.append(LeaderboardEntry(name, score))


class MemoryHighScores:
    def __init__(self, saved=None, fail_save=None):
        self.saved = dict(saved or {})
        self.fail_save = fail_save

    async def get_high_score(self, user_id):
        return self.saved.get(user_id)

    async def save_high_score(self, user_id, name, score):
        if self.fail_save:
            raise self.fail_save
        from database.manager import HighScore
        self.saved[user_id] = HighScore(score=score, name=name)


def start(difficulty=None, word="ocean"):
    """A session that has just started playing."""
    difficulty = difficulty or Difficulty("Normal", 0.5, 1.0)
    return transition(new_session(), SessionStarted(difficulty, word)).state


def play(state, word, similarity):
    """Submit a word and resolve it with the given similarity."""
    state = transition(state, SubmissionStarted(word)).state
    return transition(state, SimilarityScored(similarity))


@pytest.fixture()
def normal():
    return Difficulty("Normal", 0.5, 1.0)
