"""
Pure state transitions for a word chain session.

Every event is applied with ``transition(state, event)``, which returns a
``Transition`` holding the next state, the Attempt recorded by the event (if
any) and a runtime error to show the player (if any). The input state is
never modified, so an event that fails leaves nothing half-applied.

Events that make no sense for the current phase raise InvalidStateError.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Union

import config
from game.errors import GameError, InvalidStateError, OracleError, WordRejectedError
from game.scoring import apply_penalty, calculate_points, is_successful_attempt
from game.session import Attempt, Difficulty, Phase, SessionState
from utils.text_parsing import clamp_similarity, clean_oracle_word, normalize_word


@dataclass(frozen=True)
class SessionStarted:
    """The oracle supplied a starting word for the chosen difficulty."""
    difficulty: Difficulty
    word: str


@dataclass(frozen=True)
class SessionStartFailed:
    error: GameError


@dataclass(frozen=True)
class Tick:
    """One second of the round timer elapsed."""


@dataclass(frozen=True)
class Timeout:
    """The round timer ran out."""


@dataclass(frozen=True)
class SubmissionStarted:
    """The player submitted a word; its similarity is about to be requested."""
    candidate: str


@dataclass(frozen=True)
class SimilarityScored:
    similarity: float


@dataclass(frozen=True)
class SimilarityFailed:
    error: GameError


@dataclass(frozen=True)
class Restart:
    pass


Event = Union[
    SessionStarted, SessionStartFailed, Tick, Timeout,
    SubmissionStarted, SimilarityScored, SimilarityFailed, Restart,
]


@dataclass(frozen=True)
class Transition:
    """Result of applying one event."""
    state: SessionState
    attempt: Optional[Attempt] = None
    error: Optional[GameError] = None


def new_session() -> SessionState:
    """A fresh session waiting for a difficulty."""
    return SessionState()


def _require_phase(state: SessionState, phase: Phase, event) -> None:
    if state.phase != phase:
        raise InvalidStateError(
            f"{type(event).__name__} is not valid while {state.phase.value}"
        )


def _start(state: SessionState, event: SessionStarted) -> Transition:
    _require_phase(state, Phase.SELECTING_DIFFICULTY, event)

    word = clean_oracle_word(event.word)
    if not word:
        return Transition(state, error=OracleError("The oracle returned an empty starting word."))

    started = replace(
        state,
        phase=Phase.PLAYING,
        difficulty=event.difficulty,
        threshold=event.difficulty.threshold,
        score=0,
        start_word=word,
        current_word=word,
        lives=config.MAX_LIVES,
        time_remaining=config.ROUND_TIME_SECONDS,
        history=(),
        pending_word=None,
    )
    return Transition(started)


def _lose_life(state: SessionState, attempt: Attempt) -> Transition:
    """Shared failure path for a low-similarity submission or a timeout."""
    lives = state.lives - 1
    next_state = replace(
        state,
        score=apply_penalty(state.score),
        lives=lives,
        history=state.history + (attempt,),
        pending_word=None,
    )

    if lives <= 0:
        next_state = replace(next_state, lives=0, phase=Phase.GAME_OVER)
    else:
        next_state = replace(next_state, time_remaining=config.ROUND_TIME_SECONDS)

    return Transition(next_state, attempt=attempt)


def _timeout(state: SessionState, event) -> Transition:
    _require_phase(state, Phase.PLAYING, event)

    # A submission already owns this round
    if state.in_flight:
        return Transition(state)

    attempt = Attempt(
        previous_word=state.current_word,
        new_word=config.TIMEOUT_MARKER,
        similarity=0.0,
        success=False,
        required_threshold=state.threshold,
        points=-config.FAILURE_PENALTY,
        timed_out=True,
    )
    return _lose_life(state, attempt)


def _tick(state: SessionState, event: Tick) -> Transition:
    _require_phase(state, Phase.PLAYING, event)

    # Timer is suspended while the oracle is scoring a submission
    if state.in_flight:
        return Transition(state)

    if state.time_remaining <= 1:
        return _timeout(state, event)

    return Transition(replace(state, time_remaining=state.time_remaining - 1))


def _submit(state: SessionState, event: SubmissionStarted) -> Transition:
    _require_phase(state, Phase.PLAYING, event)
    if state.in_flight:
        raise InvalidStateError("A word is already being scored.")

    candidate = event.candidate.strip() if event.candidate else ''
    if not candidate:
        return Transition(state, error=WordRejectedError("Please enter a word."))
    if normalize_word(candidate) in state.used_words:
        return Transition(state, error=WordRejectedError(
            f"'{candidate}' has already been used. Try a different word."
        ))

    return Transition(replace(state, pending_word=candidate))


def _score(state: SessionState, event: SimilarityScored) -> Transition:
    _require_phase(state, Phase.PLAYING, event)
    if not state.in_flight:
        raise InvalidStateError("No word is waiting for a similarity score.")

    try:
        similarity = float(event.similarity)
    except (TypeError, ValueError):
        similarity = math.nan
    if not math.isfinite(similarity):
        return _oracle_failed(state, SimilarityFailed(
            OracleError("The oracle returned an unreadable similarity score.")
        ))
    similarity = clamp_similarity(similarity)

    candidate = state.pending_word
    threshold = state.threshold

    if not is_successful_attempt(similarity, threshold):
        attempt = Attempt(
            previous_word=state.current_word,
            new_word=candidate,
            similarity=similarity,
            success=False,
            required_threshold=threshold,
            points=-config.FAILURE_PENALTY,
        )
        return _lose_life(state, attempt)

    points = calculate_points(
        similarity,
        threshold,
        state.successful_attempts + 1,
        state.difficulty.multiplier,
    )
    attempt = Attempt(
        previous_word=state.current_word,
        new_word=candidate,
        similarity=similarity,
        success=True,
        required_threshold=threshold,
        points=points,
    )
    next_state = replace(
        state,
        score=state.score + points,
        # Rounded so repeated increments don't drift (0.5 + 5 * 0.01 == 0.55)
        threshold=round(threshold + config.THRESHOLD_INCREMENT, 6),
        current_word=candidate,
        lives=config.MAX_LIVES,
        time_remaining=config.ROUND_TIME_SECONDS,
        history=state.history + (attempt,),
        pending_word=None,
    )
    return Transition(next_state, attempt=attempt)


def _oracle_failed(state: SessionState, event: SimilarityFailed) -> Transition:
    _require_phase(state, Phase.PLAYING, event)
    if not state.in_flight:
        raise InvalidStateError("No word is waiting for a similarity score.")
    return Transition(replace(state, pending_word=None), error=event.error)


def transition(state: SessionState, event: Event) -> Transition:
    """Apply one event to a session state."""
    if isinstance(event, Restart):
        return Transition(new_session())
    if isinstance(event, SessionStarted):
        return _start(state, event)
    if isinstance(event, SessionStartFailed):
        _require_phase(state, Phase.SELECTING_DIFFICULTY, event)
        return Transition(state, error=event.error)
    if isinstance(event, Tick):
        return _tick(state, event)
    if isinstance(event, Timeout):
        return _timeout(state, event)
    if isinstance(event, SubmissionStarted):
        return _submit(state, event)
    if isinstance(event, SimilarityScored):
        return _score(state, event)
    if isinstance(event, SimilarityFailed):
        return _oracle_failed(state, event)

    raise InvalidStateError(f"Unknown event: {event!r}")
