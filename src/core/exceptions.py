"""
Custom exceptions, shared by all layers.

Everything derives from GameError, so the API layer can catch one type and map the subclass to a response.
"""


class GameError(Exception):
    """Top-level exception of the Othello service."""


# --- REQUEST / NOTATION ---
class InvalidRequestError(GameError):
    """Payload could not be interpreted."""


class InvalidMaskError(GameError):
    """A bitmask that should denote exactly one square does not."""


# --- RULES ---
class IllegalMoveError(GameError):
    """The requested move cannot be played."""


class InvalidNotationError(IllegalMoveError):
    """Square text is not of the form 'a1' - 'h8'."""


class SquareOccupiedError(IllegalMoveError):
    pass


class NoLegalFlipError(IllegalMoveError):
    """Square is empty, but placing a disc there does not flip anything."""


class IllegalPassError(GameError):
    """Pass submitted while the player still has a legal move."""


# --- LIFECYCLE ---
class GameStateError(GameError):
    """Action does not fit the current state of the game."""


class GameAlreadyFinishedError(GameStateError):
    pass


class NotYourTurnError(GameError):
    """Acting player is not the one holding the color to move."""


# --- PERSISTENCE ---
class RepositoryError(GameError):
    """Base for anything going wrong while talking to storage."""


class GameNotFoundError(RepositoryError):
    pass


class ConflictError(RepositoryError):
    """A record with the same identity already exists."""


class ConcurrencyConflictError(RepositoryError):
    """The game changed between reading and writing it back. Safe to retry."""


class StorageError(RepositoryError):
    """Wraps an error raised by the storage backend."""
