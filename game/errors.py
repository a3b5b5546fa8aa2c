"""Error types surfaced by the game engine and its collaborators."""


class GameError(Exception):
    """Base class for errors that carry a player-displayable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OracleError(GameError):
    """The similarity oracle failed or returned content we could not parse."""


class NetworkError(GameError):
    """Reading from or writing to the leaderboard failed."""


class ValidationError(GameError):
    """A leaderboard submission was malformed."""


class WordRejectedError(GameError):
    """A submitted word was blank or already used this session."""


class InvalidStateError(GameError):
    """An event arrived that is not valid for the current phase."""


class StaleSessionError(GameError):
    """An oracle result arrived for a session that has since been replaced."""


class StorageError(GameError):
    """The local database could not be read or written."""
