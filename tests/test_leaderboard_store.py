import json
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import pytest_asyncio
import requests

from clients.leaderboard import RemoteLeaderboardStore, parse_entries
from conftest import play, start
from database.manager import DatabaseManager, HighScore, SqliteLeaderboardStore
from database.migrations import initialize_database
from game.errors import NetworkError, StorageError, ValidationError
from game.ranking import LeaderboardEntry
from game.transitions import Timeout, transition


def json_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def remote(session):
    return RemoteLeaderboardStore(url="https://example.test/board", timeout=3, session=session)


def test_parse_entries_sorts_and_skips_bad_rows():
    rows = [
        {"name": "bo", "score": 300},
        {"name": "ari", "score": "500"},
        {"score": 10},
        {"name": "cy", "score": "lots"},
    ]

    assert parse_entries(rows) == [LeaderboardEntry("ari", 500), LeaderboardEntry("bo", 300)]
    assert parse_entries(None) == []


@pytest.mark.asyncio
async def test_remote_fetch_top_returns_best_three():
    session = Mock()
    session.get.return_value = json_response({"leaderboard": [
        {"name": "a", "score": 10},
        {"name": "b", "score": 40},
        {"name": "c", "score": 30},
        {"name": "d", "score": 20},
    ]})

    entries = await remote(session).fetch_top()

    assert [e.name for e in entries] == ["b", "c", "d"]
    session.get.assert_called_once()


@pytest.mark.asyncio
async def test_remote_fetch_failure_is_network_error():
    session = Mock()
    session.get.side_effect = requests.Timeout("slow")

    with pytest.raises(NetworkError):
        await remote(session).fetch_top()


@pytest.mark.asyncio
async def test_remote_without_url_is_empty():
    store = RemoteLeaderboardStore(url="", session=Mock())
    store.url = ""
    assert await store.fetch_top() == []


@pytest.mark.asyncio
async def test_remote_submit_posts_plain_text_json():
    session = Mock()
    session.post.return_value = json_response({"status": "success"})

    await remote(session).submit(" zoe ", 1200)

    _, kwargs = session.post.call_args
    assert json.loads(kwargs["data"]) == {"name": "zoe", "score": 1200}
    assert kwargs["headers"]["Content-Type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_remote_submit_rejected_uses_server_message():
    session = Mock()
    session.post.return_value = json_response({"status": "error", "message": "Sheet locked"})

    with pytest.raises(NetworkError) as exc_info:
        await remote(session).submit("zoe", 1200)
    assert exc_info.value.message == "Sheet locked"


@pytest.mark.asyncio
async def test_remote_submit_validates_before_sending():
    session = Mock()

    with pytest.raises(ValidationError):
        await remote(session).submit("averyverylongname", 1200)
    session.post.assert_not_called()


@pytest_asyncio.fixture
async def manager(tmp_path):
    db_path = str(tmp_path / "chain.db")
    await initialize_database(db_path)
    return DatabaseManager(db_path)


@pytest.mark.asyncio
async def test_sqlite_leaderboard_orders_scores(manager):
    store = SqliteLeaderboardStore(manager)
    for name, score in [("ari", 500), ("bo", 300), ("cy", 500), ("dee", 900)]:
        await store.submit(name, score)

    entries = await store.fetch_top()

    assert entries == [
        LeaderboardEntry("dee", 900),
        LeaderboardEntry("ari", 500),
        LeaderboardEntry("cy", 500),
    ]


@pytest.mark.asyncio
async def test_high_score_keeps_the_best(manager):
    assert await manager.get_high_score("u1") is None

    await manager.save_high_score("u1", "zoe", 800)
    await manager.save_high_score("u1", "zed", 400)
    assert await manager.get_high_score("u1") == HighScore(score=800, name="zoe")

    await manager.save_high_score("u1", "zed", 1200)
    assert await manager.get_high_score("u1") == HighScore(score=1200, name="zed")


@pytest.mark.asyncio
async def test_record_session_feeds_player_stats(manager, normal):
    assert await manager.get_player_stats("u1") is None

    state = play(start(normal), "wave", 0.9).state
    state = play(state, "surf", 0.9).state
    for _ in range(3):
        state = transition(state, Timeout()).state

    await manager.record_session(state, "u1", "g1", "c1", datetime.now(timezone.utc))
    stats = await manager.get_player_stats("u1")

    assert stats["games_played"] == 1
    assert stats["best_game_score"] == state.score
    assert stats["total_links"] == 2
    assert stats["longest_chain"] == 2


@pytest.mark.asyncio
async def test_high_score_save_failure_is_storage_error(tmp_path):
    # Tables were never created
    manager = DatabaseManager(str(tmp_path / "empty.db"))

    with pytest.raises(StorageError):
        await manager.save_high_score("u1", "zoe", 800)
