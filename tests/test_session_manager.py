import asyncio

import pytest

from conftest import FakeOracle, GatedOracle
from game.engine import GameEngine
from game.errors import StaleSessionError
from game.session import Phase
from game.session_manager import SessionManager


@pytest.fixture()
def manager():
    return SessionManager(lambda: GameEngine(FakeOracle(similarities=[0.9]), tick_interval=None))


def test_create_session_needs_a_factory():
    with pytest.raises(RuntimeError):
        SessionManager().create_session("c1", "g1", "u1", "zoe")


@pytest.mark.asyncio
async def test_sessions_are_per_player_and_channel(manager, normal):
    first = manager.create_session("c1", "g1", "u1", "zoe")
    other_channel = manager.create_session("c2", "g1", "u1", "zoe")

    assert manager.get_session("u1", "c1") is first
    assert manager.get_session("u1", "c2") is other_channel
    assert first.engine is not other_channel.engine
    assert not manager.is_active("u1", "c1")

    await first.engine.start_session(normal)

    assert manager.is_active("u1", "c1")
    assert not manager.is_active("u1", "c2")


@pytest.mark.asyncio
async def test_new_session_replaces_the_old_one(manager, normal):
    old = manager.create_session("c1", "g1", "u1", "zoe")
    await old.engine.start_session(normal)

    new = manager.create_session("c1", "g1", "u1", "zoe")

    assert manager.get_session("u1", "c1") is new
    assert new.state.session_id != old.state.session_id
    assert not new.state.is_playing


def test_end_session_removes_it(manager):
    manager.create_session("c1", "g1", "u1", "zoe")

    ended = manager.end_session("u1", "c1")

    assert ended is not None
    assert manager.get_session("u1", "c1") is None
    assert manager.end_session("u1", "c1") is None


@pytest.mark.asyncio
async def test_replaced_session_discards_its_pending_start(normal):
    oracle = GatedOracle()
    manager = SessionManager(lambda: GameEngine(oracle, tick_interval=0.001))

    old = manager.create_session("c1", "g1", "u1", "zoe")
    task = asyncio.create_task(old.engine.start_session(normal))
    while oracle.waiting < 1:
        await asyncio.sleep(0)

    new = manager.create_session("c1", "g1", "u1", "zoe")
    oracle.release()

    with pytest.raises(StaleSessionError):
        await task
    await asyncio.sleep(0.05)

    assert old.state.phase == Phase.SELECTING_DIFFICULTY
    assert old.state.history == ()
    assert old.engine._timer_task is None
    assert manager.get_session("u1", "c1") is new


def test_end_if_current_leaves_a_newer_session_alone(manager):
    old = manager.create_session("c1", "g1", "u1", "zoe")
    new = manager.create_session("c1", "g1", "u1", "zoe")

    assert manager.end_if_current(old) is False
    assert manager.get_session("u1", "c1") is new

    assert manager.end_if_current(new) is True
    assert manager.get_session("u1", "c1") is None
