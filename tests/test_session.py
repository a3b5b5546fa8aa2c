import pytest

from cogs.game_commands import build_difficulty
from conftest import play, start
from game.session import Difficulty


@pytest.mark.parametrize(
    "key, threshold, multiplier",
    [
        ("easy", 0.25, 0.25),
        ("Normal", 0.5, 1.0),
        ("hard", 0.75, 2.0),
    ],
)
def test_presets(key, threshold, multiplier):
    difficulty = Difficulty.preset(key)
    assert difficulty.threshold == threshold
    assert difficulty.multiplier == multiplier


def test_unknown_preset():
    with pytest.raises(ValueError):
        Difficulty.preset("nightmare")


@pytest.mark.parametrize("percent", [0, 101, -5])
def test_custom_threshold_out_of_range(percent):
    with pytest.raises(ValueError):
        Difficulty.custom(percent)


def test_custom_threshold():
    difficulty = Difficulty.custom(40)
    assert difficulty.name == "Custom"
    assert difficulty.threshold == pytest.approx(0.4)
    assert difficulty.multiplier == 1.0


def test_build_difficulty_from_command_options():
    assert build_difficulty("hard", None) == Difficulty.preset("hard")
    assert build_difficulty("custom", 60).threshold == pytest.approx(0.6)

    with pytest.raises(ValueError):
        build_difficulty("custom", None)


def test_last_chained_word_skips_failures(normal):
    state = start(normal)
    assert state.last_chained_word == "ocean"

    state = play(state, "wave", 0.9).state
    state = play(state, "tax", 0.1).state

    assert state.last_chained_word == "wave"
    assert state.successful_attempts == 1
    assert state.used_words == {"ocean", "wave", "tax"}
