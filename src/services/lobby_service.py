"""Orchestration of layers for online games: two browsers polling one lobby."""

import logging
import secrets
from datetime import datetime
from random import Random
from typing import Callable, Optional

from src.api.models import (
    ChatFetchRequest,
    ChatMessageResponse,
    ChatPostRequest,
    CreateLobbyRequest,
    GameView,
    JoinLobbyRequest,
    LobbyResponse,
    LobbyStateResponse,
    OnlineMoveRequest,
    RematchVoteRequest,
    SessionResponse,
)
from src.connect_four.game import GameState, utc_now
from src.connect_four.lobby import Lobby, generate_code, normalize_code
from src.core.config import Settings
from src.core.exceptions import (
    ConflictError,
    GameOverError,
    LobbyNotFoundError,
    NotYourTurnError,
    SeatNotTakenError,
)
from src.core.shared_types import Mode, Side
from src.services.game_service import new_session_id
from src.services.views import chat_message_response, game_view, lobby_state
from src.store.repository import GameStore

logger = logging.getLogger(__name__)

# attempts at drawing an unused lobby code
MAX_CODE_ATTEMPTS = 64


class LobbyService:
    """Online play: create / join a lobby, moves, chat, rematch votes."""

    def __init__(
        self,
        store: GameStore,
        settings: Optional[Settings] = None,
        rng: Optional[Random] = None,
        code_rng: Optional[Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.rng = rng or Random()
        # codes come from the OS entropy source unless a generator is injected
        self.code_rng = code_rng or secrets.SystemRandom()
        self.clock = clock

    # -- HTTP layer logic ---
    def create_lobby(self, request: CreateLobbyRequest) -> LobbyResponse:
        """
        First player opens a lobby and sits as Red.
        ---

        A preferred code that is already taken raises DuplicateCodeError. The caller can retry without one.
        """
        self.evict_idle()
        difficulty = request.difficulty or self.settings.default_difficulty
        with self.store.atomic():
            code = request.preferred_code or self._generate_unique_code()
            state = GameState.new(difficulty=difficulty, mode=Mode.ONLINE, rng=self.rng)
            if request.player_name.strip():
                state.names[Side.RED] = self._clean_name(request.player_name)
            lobby = Lobby(
                code=code,
                state=state,
                chat_max_length=self.settings.chat_max_length,
                chat_history_limit=self.settings.chat_history_limit,
                chat_name_max_length=self.settings.chat_name_max_length,
            )
            lobby.touch(self.clock())
            self.store.add_lobby(lobby)
            logger.info("Created lobby %s (%s)", code, difficulty)
            return LobbyResponse(code=code, side=Side.RED, state=lobby_state(lobby))

    def join_lobby(self, request: JoinLobbyRequest) -> LobbyResponse:
        """Second player takes the Yellow seat. Joining again does not displace anybody."""
        with self.store.atomic():
            lobby = self._fetch_lobby(request.code)
            if not lobby.has_yellow:
                lobby.seat(Side.YELLOW)
                if request.player_name.strip():
                    lobby.state.names[Side.YELLOW] = self._clean_name(
                        request.player_name
                    )
                logger.info("Yellow joined lobby %s", lobby.code)
            lobby.touch(self.clock())
            return LobbyResponse(
                code=lobby.code, side=Side.YELLOW, state=lobby_state(lobby)
            )

    def apply_online_move(self, request: OnlineMoveRequest) -> LobbyStateResponse:
        """
        Play a move for `side`.
        ----

        The turn check, the placement and the turn switch happen in one critical section:
        two requests for the same turn can never both be honoured.
        Refused with SeatNotTakenError (side not joined) / GameOverError / NotYourTurnError / ColumnFullError.
        """
        with self.store.atomic():
            lobby = self._fetch_seated_lobby(request.code, request.side)
            state = lobby.state
            if state.game_over:
                raise GameOverError("The game is over. Vote for a rematch first.")
            if state.current_player != request.side:
                logger.debug(
                    "Lobby %s: refused move from %s, waiting for %s",
                    lobby.code,
                    request.side,
                    state.current_player,
                )
                raise NotYourTurnError(
                    f"It is not your turn. Waiting for {state.current_player} to play."
                )
            result = state.apply_move(request.column)
            logger.debug(
                "Lobby %s: %s played column %d", lobby.code, result.side, result.col
            )
            lobby.touch(self.clock())
            return lobby_state(lobby)

    def post_chat(self, request: ChatPostRequest) -> ChatMessageResponse:
        with self.store.atomic():
            lobby = self._fetch_seated_lobby(request.code, request.side)
            message = lobby.post_message(
                request.side, request.name, request.text, now=self.clock()
            )
            lobby.touch(self.clock())
            return chat_message_response(message)

    def fetch_chat_since(self, request: ChatFetchRequest) -> list[ChatMessageResponse]:
        """Polled by the clients. An unknown lobby simply has no messages."""
        with self.store.atomic():
            lobby = self.store.get_lobby(request.code)
            if lobby is None:
                return []
            return [
                chat_message_response(message)
                for message in lobby.messages_since(request.since_id)
            ]

    def lobby_snapshot(self, code: str) -> LobbyStateResponse:
        """
        Retrieve current lobby state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        with self.store.atomic():
            return lobby_state(self._fetch_lobby(normalize_code(code)))

    def lobby_view(self, code: str) -> GameView:
        with self.store.atomic():
            return game_view(self._fetch_lobby(normalize_code(code)).state)

    def vote_rematch(self, request: RematchVoteRequest) -> LobbyStateResponse:
        """Both seats have to vote. The second vote starts the next round, scores kept."""
        with self.store.atomic():
            lobby = self._fetch_seated_lobby(request.code, request.side)
            if lobby.vote_rematch(request.side, rng=self.rng):
                logger.info("Lobby %s: rematch started", lobby.code)
            lobby.touch(self.clock())
            return lobby_state(lobby)

    def continue_as_session(self, code: str) -> SessionResponse:
        """Copy the lobby's game into a private session (two players on one device from here on)."""
        with self.store.atomic():
            lobby = self._fetch_lobby(normalize_code(code))
            state = lobby.state.snapshot()
            state.mode = Mode.PVP
            state.touch(self.clock())
            session_id = new_session_id()
            self.store.add_session(session_id, state)
            logger.info("Lobby %s continued as session %s", lobby.code, session_id[:8])
            return SessionResponse(session_id=session_id, view=game_view(state))

    def evict_idle(self) -> tuple[int, int]:
        return self.store.evict_idle(
            self.clock(),
            session_max_idle=self.settings.session_idle_timeout,
            lobby_max_idle=self.settings.lobby_idle_timeout,
        )

    # -- Internal helpers --
    def _generate_unique_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_code(self.code_rng)
            if not self.store.has_lobby(code):
                return code
        raise ConflictError("Could not find a free lobby code. Try again later.")

    def _clean_name(self, name: str) -> str:
        return name.strip()[: self.settings.chat_name_max_length]

    def _fetch_lobby(self, code: str) -> Lobby:
        """Attempt to find the lobby in the store and raise error if it fails."""
        lobby = self.store.get_lobby(code)
        if lobby is None:
            raise LobbyNotFoundError(f"Lobby {code!r} not found.")
        return lobby

    def _fetch_seated_lobby(self, code: str, side: Side) -> Lobby:
        """Same as _fetch_lobby, but `side` has to be taken by a player."""
        lobby = self._fetch_lobby(code)
        if not lobby.is_seated(side):
            raise SeatNotTakenError(
                f"Nobody plays {side} in lobby {lobby.code!r}. Join the lobby first."
            )
        return lobby
