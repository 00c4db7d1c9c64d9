"""Implementation of (Game)Store keeping everything in process memory"""

import logging
import threading
from contextlib import AbstractContextManager
from datetime import datetime, timedelta

from src.connect_four.game import GameState
from src.connect_four.lobby import Lobby
from src.core.exceptions import DuplicateCodeError

logger = logging.getLogger(__name__)


class InMemoryGameStore:
    """
    Two dictionaries behind a single lock.
    ---

    The lock is re-entrant: the services hold it through `atomic()` for a whole read-modify-write,
    and the individual methods take it again on their own.
    NOTE: nothing blocking (I/O) may happen while holding it.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: dict[str, GameState] = {}
        self._lobbies: dict[str, Lobby] = {}

    def atomic(self) -> AbstractContextManager[None]:
        return self._lock  # type: ignore[return-value]

    # --- SESSIONS ---
    def add_session(self, session_id: str, state: GameState) -> GameState:
        with self._lock:
            self._sessions[session_id] = state
            return state

    def get_session(self, session_id: str) -> GameState | None:
        with self._lock:
            return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> GameState | None:
        with self._lock:
            return self._sessions.pop(session_id, None)

    # --- LOBBIES ---
    def add_lobby(self, lobby: Lobby) -> Lobby:
        with self._lock:
            if lobby.code in self._lobbies:
                raise DuplicateCodeError(f"Lobby code {lobby.code!r} is already in use.")
            self._lobbies[lobby.code] = lobby
            return lobby

    def get_lobby(self, code: str) -> Lobby | None:
        with self._lock:
            return self._lobbies.get(code)

    def has_lobby(self, code: str) -> bool:
        with self._lock:
            return code in self._lobbies

    def delete_lobby(self, code: str) -> Lobby | None:
        with self._lock:
            return self._lobbies.pop(code, None)

    # --- HOUSEKEEPING ---
    def evict_idle(
        self, now: datetime, session_max_idle: float, lobby_max_idle: float
    ) -> tuple[int, int]:
        """Remove sessions / lobbies whose last activity is older than the cutoff."""
        session_cutoff = now - timedelta(seconds=session_max_idle)
        lobby_cutoff = now - timedelta(seconds=lobby_max_idle)
        with self._lock:
            stale_sessions = [
                session_id
                for session_id, state in self._sessions.items()
                if state.last_activity < session_cutoff
            ]
            stale_lobbies = [
                code
                for code, lobby in self._lobbies.items()
                if lobby.last_activity < lobby_cutoff
            ]
            for session_id in stale_sessions:
                del self._sessions[session_id]
            for code in stale_lobbies:
                del self._lobbies[code]

        if stale_sessions or stale_lobbies:
            logger.info(
                "Evicted %d idle session(s) and %d idle lobby(ies)",
                len(stale_sessions),
                len(stale_lobbies),
            )
        return len(stale_sessions), len(stale_lobbies)

