"""Protocol store (the services only rely on this. Tests can plug in their own implementation)"""

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from src.connect_four.game import GameState
from src.connect_four.lobby import Lobby


class GameStore(Protocol):
    """Registry of sessions and lobbies"""

    def atomic(self) -> AbstractContextManager[None]:
        """Critical section. Every read-modify-write of a session or lobby runs inside it."""
        ...

    def add_session(self, session_id: str, state: GameState) -> GameState:
        """Register the game of a new session."""
        ...

    def get_session(self, session_id: str) -> GameState | None:
        """Get session by ID, if it exists."""
        ...

    def delete_session(self, session_id: str) -> GameState | None:
        """Remove a session."""
        ...

    def add_lobby(self, lobby: Lobby) -> Lobby:
        """Register a new lobby under its code. Raises DuplicateCodeError if the code is taken."""
        ...

    def get_lobby(self, code: str) -> Lobby | None:
        """Get lobby by code, if it exists."""
        ...

    def has_lobby(self, code: str) -> bool: ...

    def delete_lobby(self, code: str) -> Lobby | None:
        """Remove a lobby."""
        ...

    def evict_idle(
        self, now: datetime, session_max_idle: float, lobby_max_idle: float
    ) -> tuple[int, int]:
        """Drop sessions / lobbies idle for longer than the given number of seconds. Returns how many of each were removed."""
        ...
