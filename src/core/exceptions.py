"""
Exceptions raised by the domain, store and service layers.

Every custom exception derives from GameError, so a router only needs one handler to map them onto responses.
None of them are fatal to the process.
"""

from src.core.shared_types import RejectionReason


class GameError(Exception):
    """Top-level exception of the application."""


# --- InvalidInput ---
class InvalidRequestError(GameError):
    """Malformed input, rejected before it reaches the game rules."""


# --- IllegalMove ---
class IllegalMoveError(GameError):
    """A well-formed move the rules do not allow right now."""

    reason: RejectionReason

    def __init__(self, reason: RejectionReason, message: str = "") -> None:
        self.reason = reason
        super().__init__(message or str(reason))


class NotYourTurnError(IllegalMoveError):
    def __init__(self, message: str = "") -> None:
        super().__init__(RejectionReason.NOT_YOUR_TURN, message)


class GameOverError(IllegalMoveError):
    def __init__(self, message: str = "") -> None:
        super().__init__(RejectionReason.GAME_OVER, message)


class ColumnFullError(IllegalMoveError):
    def __init__(self, message: str = "") -> None:
        super().__init__(RejectionReason.COLUMN_FULL, message)


# --- NotFound ---
class NotFoundError(GameError):
    """Unknown session or lobby. Callers should redirect to a fresh start."""


class SessionNotFoundError(NotFoundError):
    pass


class LobbyNotFoundError(NotFoundError):
    pass


# --- Conflict ---
class ConflictError(GameError):
    pass


class DuplicateCodeError(ConflictError):
    """Requested lobby code is already taken. Retry with another (or a generated) code."""


# --- State ---
class GameStateError(GameError):
    pass


class RematchNotAvailableError(GameStateError):
    pass


class SeatNotTakenError(GameStateError):
    """Request made for a side nobody sits on (ex. Yellow before the second player joined)."""
