"""Asyncio driver that feeds oracle results and timer ticks into a session."""

import asyncio
import inspect
import logging
from typing import Callable, List, Optional, Set

from game.errors import GameError, InvalidStateError, OracleError, StaleSessionError
from game.session import Difficulty, Phase, SessionState
from game.transitions import (
    Event,
    Restart,
    SessionStarted,
    SessionStartFailed,
    SimilarityFailed,
    SimilarityScored,
    SubmissionStarted,
    Tick,
    Transition,
    new_session,
    transition,
)

logger = logging.getLogger(__name__)

Listener = Callable[[Transition], object]


class GameEngine:
    """
    Owns one player's session and serializes every change to it.

    Oracle calls run as awaited tasks; each is tagged with the session id it
    started under and its result is dropped if the session was restarted in
    the meantime. While a submission is being scored the state carries a
    pending word, which suspends the round timer.
    """

    def __init__(self, oracle, tick_interval: Optional[float] = 1.0):
        """
        Args:
            oracle: Object with async ``random_word()`` and ``similarity(a, b)``
            tick_interval: Seconds between timer ticks, or None to drive
                ticks manually with ``tick()``
        """
        self.oracle = oracle
        self.tick_interval = tick_interval
        self.state: SessionState = new_session()
        self._listeners: List[Listener] = []
        self._listener_tasks: Set[asyncio.Task] = set()
        self._starting_token: Optional[str] = None
        self._timer_task: Optional[asyncio.Task] = None

    def add_listener(self, callback: Listener):
        """Register a callback (plain or coroutine) for every applied transition."""
        self._listeners.append(callback)

    def _apply(self, event: Event) -> Transition:
        result = transition(self.state, event)
        self.state = result.state

        if result.state.phase == Phase.GAME_OVER:
            self.stop_timer()

        for callback in self._listeners:
            outcome = callback(result)
            if inspect.isawaitable(outcome):
                task = asyncio.ensure_future(outcome)
                self._listener_tasks.add(task)
                task.add_done_callback(self._listener_done)

        return result

    def _listener_done(self, task: asyncio.Task):
        self._listener_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Listener failed for session %s", self.state.session_id, exc_info=exc)

    def _check_current(self, token: str):
        if self.state.session_id != token:
            raise StaleSessionError("That game was restarted; the result was discarded.")

    async def start_session(self, difficulty: Difficulty) -> Transition:
        """Fetch a starting word and begin playing."""
        if self.state.phase != Phase.SELECTING_DIFFICULTY:
            raise InvalidStateError("A game is already in progress.")
        if self._starting_token is not None:
            raise InvalidStateError("A game is already starting.")

        token = self.state.session_id
        self._starting_token = token
        try:
            word = await self.oracle.random_word()
        except OracleError as exc:
            self._check_current(token)
            self._apply(SessionStartFailed(exc))
            raise
        finally:
            if self._starting_token == token:
                self._starting_token = None

        self._check_current(token)
        result = self._apply(SessionStarted(difficulty, word))
        if result.error:
            raise result.error

        logger.info(
            "Session %s started on %s with word %r",
            token, difficulty.name, self.state.current_word
        )
        if self.tick_interval is not None:
            self.start_timer()
        return result

    async def submit_word(self, candidate: str) -> Transition:
        """
        Score a candidate word against the current word.

        Raises:
            WordRejectedError: Blank or already-used word (nothing changes)
            OracleError: Similarity could not be computed (nothing changes)
            StaleSessionError: The session was restarted while scoring
            InvalidStateError: Not playing, or another word is being scored
        """
        result = self._apply(SubmissionStarted(candidate))
        if result.error:
            raise result.error

        token = self.state.session_id
        previous_word = self.state.current_word
        pending_word = self.state.pending_word

        try:
            similarity = await self.oracle.similarity(previous_word, pending_word)
        except GameError as exc:
            self._release(token, exc)
            raise
        except (Exception, asyncio.CancelledError):
            self._release(token, OracleError("Similarity check was interrupted."))
            raise

        self._check_current(token)
        result = self._apply(SimilarityScored(similarity))
        if result.error:
            raise result.error

        attempt = result.attempt
        logger.debug(
            "Session %s: %r -> %r similarity=%.4f success=%s points=%d",
            token, attempt.previous_word, attempt.new_word,
            attempt.similarity, attempt.success, attempt.points
        )
        return result

    def _release(self, token: str, error: GameError):
        """Clear the in-flight marker after a failed oracle call."""
        self._check_current(token)
        if not isinstance(error, OracleError):
            error = OracleError(error.message)
        self._apply(SimilarityFailed(error))

    def tick(self) -> Transition:
        """Advance the round timer by one second."""
        return self._apply(Tick())

    def start_timer(self):
        """Start the once-per-second timer task for the current session."""
        if self._timer_task and not self._timer_task.done():
            return
        self._timer_task = asyncio.create_task(self._run_timer(self.state.session_id))

    def stop_timer(self):
        task = self._timer_task
        self._timer_task = None
        if task and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run_timer(self, token: str):
        interval = self.tick_interval or 1.0
        while True:
            await asyncio.sleep(interval)
            if self.state.session_id != token or not self.state.is_playing:
                return
            self.tick()

    def restart(self) -> Transition:
        """Discard the current session and wait for a new difficulty."""
        self.stop_timer()
        self._starting_token = None
        return self._apply(Restart())
