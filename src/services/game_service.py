"""Orchestration of communication from the HTTP layer to the game rules and the store (and the reverse direction) for single-device play."""

import logging
import secrets
from datetime import datetime
from random import Random
from typing import Callable, Optional

from src.api.models import (
    GameView,
    ModeRequest,
    PlayRequest,
    PlayResponse,
    ResetRequest,
    SessionRequest,
    SessionResponse,
)
from src.connect_four.game import COMPUTER_SIDE, GameState, utc_now
from src.connect_four.opponent import HeuristicOpponent
from src.core.config import Settings
from src.core.exceptions import SessionNotFoundError
from src.core.shared_types import Mode
from src.services.views import game_view, move_response
from src.store.repository import GameStore

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """128 random bits, hex encoded."""
    return secrets.token_hex(16)


class GameService:
    """Orchestration of layers for a game played on one device (two humans, or a human against the computer)."""

    def __init__(
        self,
        store: GameStore,
        settings: Optional[Settings] = None,
        opponent: Optional[HeuristicOpponent] = None,
        rng: Optional[Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.opponent = opponent or HeuristicOpponent(COMPUTER_SIDE)
        self.rng = rng or Random()
        self.clock = clock

    # -- HTTP layer logic ---
    def new_session(self) -> SessionResponse:
        """First visit: a fresh id and a game with the default configuration."""
        self.evict_idle()
        with self.store.atomic():
            session_id, state = self._create_session()
            return SessionResponse(session_id=session_id, view=game_view(state))

    def get_or_create_session(self, token: Optional[str]) -> SessionResponse:
        """
        Resolve the client-held token.
        ----

        NOTE an unknown or malformed token gets a brand new session under a fresh id. Ids chosen by the client are never adopted.
        The caller compares the returned id with the token it sent to know whether it should hand out a new one.
        """
        with self.store.atomic():
            state = self.store.get_session(token) if token else None
            if state is not None:
                state.touch(self.clock())
                return SessionResponse(session_id=token, view=game_view(state))
        return self.new_session()

    def play(self, request: PlayRequest) -> PlayResponse:
        """
        Drop a piece in the requested column.
        ---

        In "ai" mode the computer answers within the same critical section.
        """
        with self.store.atomic():
            state = self._fetch_session(request.session_id)
            player_result = state.apply_move(request.column)
            logger.debug(
                "Session %s: %s played column %d",
                request.session_id[:8],
                player_result.side,
                player_result.col,
            )

            computer_result = None
            if state.is_computer_turn:
                column = self.opponent.choose_column(
                    state.board,
                    state.gravity_inverted,
                    next_gravity_inverted=state.gravity_after_next_move,
                )
                if column is not None:
                    computer_result = state.apply_move(column)
                    logger.debug(
                        "Session %s: computer played column %d",
                        request.session_id[:8],
                        column,
                    )

            state.touch(self.clock())
            return PlayResponse(
                session_id=request.session_id,
                player_move=move_response(player_result),
                computer_move=move_response(computer_result)
                if computer_result
                else None,
                view=game_view(state),
            )

    def reset_game(self, request: ResetRequest) -> GameView:
        """Start over: new board (optionally another difficulty / mode), scores back to zero."""
        with self.store.atomic():
            state = self._fetch_session(request.session_id)
            state.reset(difficulty=request.difficulty, mode=request.mode, rng=self.rng)
            state.touch(self.clock())
            return game_view(state)

    def replay_keeping_score(self, request: SessionRequest) -> GameView:
        """Next round, same opponents, scores kept."""
        with self.store.atomic():
            state = self._fetch_session(request.session_id)
            state.replay_keeping_score(rng=self.rng)
            state.touch(self.clock())
            return game_view(state)

    def set_mode(self, request: ModeRequest) -> GameView:
        """Switching between two players and playing the computer starts a new round. Scores are kept."""
        with self.store.atomic():
            state = self._fetch_session(request.session_id)
            state.mode = Mode(request.mode)
            state.replay_keeping_score(rng=self.rng)
            state.touch(self.clock())
            return game_view(state)

    def view(self, session_id: str) -> GameView:
        with self.store.atomic():
            return game_view(self._fetch_session(session_id))

    def evict_idle(self) -> tuple[int, int]:
        return self.store.evict_idle(
            self.clock(),
            session_max_idle=self.settings.session_idle_timeout,
            lobby_max_idle=self.settings.lobby_idle_timeout,
        )

    # -- Internal helpers --
    def _create_session(self) -> tuple[str, GameState]:
        session_id = new_session_id()
        state = GameState.new(difficulty=self.settings.default_difficulty, rng=self.rng)
        state.touch(self.clock())
        self.store.add_session(session_id, state)
        logger.info("Created session %s", session_id[:8])
        return session_id, state

    def _fetch_session(self, session_id: str) -> GameState:
        """Attempt to find the session in the store and raise error if it fails."""
        state = self.store.get_session(session_id)
        if state is None:
            raise SessionNotFoundError(f"Session {session_id[:8]}... not found.")
        return state
