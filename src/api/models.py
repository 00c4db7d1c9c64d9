"""Requests and Response models"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from src.connect_four.lobby import is_valid_code, normalize_code
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty, Mode, Side

SESSION_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")

CellValue = str
RowCol = tuple[int, int]


def _validate_session_id(value: str) -> str:
    if not SESSION_ID_PATTERN.match(value):
        raise InvalidRequestError(f"Malformed session id: {value!r}")
    return value


def _validate_lobby_code(value: str) -> str:
    code = normalize_code(value)
    if not is_valid_code(code):
        raise InvalidRequestError(f"Malformed lobby code: {value!r}")
    return code


def _validate_column(value: int) -> int:
    if value < 0:
        raise InvalidRequestError(f"Column must be zero or positive, got {value}.")
    return value


# --- REQUEST MODELS ---
class SessionRequest(BaseModel):
    session_id: str

    @field_validator("session_id")
    @classmethod
    def validate_session_id(cls, value: str) -> str:
        return _validate_session_id(value)


class PlayRequest(SessionRequest):
    column: int

    @field_validator("column")
    @classmethod
    def validate_column(cls, value: int) -> int:
        return _validate_column(value)


class ResetRequest(SessionRequest):
    difficulty: Optional[Difficulty] = None
    mode: Optional[Mode] = None


class ModeRequest(SessionRequest):
    mode: str

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, value: str) -> str:
        """Anything but "ai" means two players on one device."""
        mode = value.strip().lower()
        return Mode.AI.value if mode == Mode.AI else Mode.PVP.value


class CreateLobbyRequest(BaseModel):
    player_name: str = ""
    difficulty: Optional[Difficulty] = None
    preferred_code: Optional[str] = None

    @field_validator("preferred_code")
    @classmethod
    def validate_preferred_code(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return _validate_lobby_code(value)


class LobbyRequest(BaseModel):
    code: str

    @field_validator("code")
    @classmethod
    def validate_code(cls, value: str) -> str:
        return _validate_lobby_code(value)


class JoinLobbyRequest(LobbyRequest):
    player_name: str = ""


class SideRequest(LobbyRequest):
    side: Side

    @field_validator("side", mode="before")
    @classmethod
    def validate_side(cls, value: object) -> object:
        if value not in {side.value for side in Side}:
            raise InvalidRequestError(f"Unknown side: {value!r}")
        return value


class OnlineMoveRequest(SideRequest):
    column: int

    @field_validator("column")
    @classmethod
    def validate_column(cls, value: int) -> int:
        return _validate_column(value)


class ChatPostRequest(SideRequest):
    name: str = ""
    text: str

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Chat message is empty.")
        return value


class ChatFetchRequest(LobbyRequest):
    since_id: int = 0

    @field_validator("since_id")
    @classmethod
    def validate_since_id(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"since_id must be zero or positive, got {value}.")
        return value


class RematchVoteRequest(SideRequest):
    pass


# --- RESPONSE MODELS ---
class GameView(BaseModel):
    """Everything the renderer needs to draw a board. The only shape it consumes."""

    rows: int
    cols: int
    grid: list[list[CellValue]]
    playable_columns: list[bool]
    current_player: Side
    winning_cells: list[RowCol]
    gravity_inverted: bool
    turn_count: int
    mode: Mode
    difficulty: Difficulty
    names: dict[Side, str]
    scores: dict[Side, int]
    message: str
    game_over: bool
    winner: Optional[Side]
    last_move: Optional[RowCol]


class MoveResponse(BaseModel):
    row: int
    col: int
    side: Side
    won: bool
    draw: bool
    gravity_flipped: bool


class SessionResponse(BaseModel):
    session_id: str
    view: GameView


class PlayResponse(BaseModel):
    session_id: str
    player_move: MoveResponse
    computer_move: Optional[MoveResponse]
    view: GameView


class LobbyStateResponse(BaseModel):
    """What a polling client needs to know whether something changed."""

    code: str
    current_side: Side
    gravity_inverted: bool
    turn_count: int
    game_over: bool
    winner: Optional[Side]
    has_red: bool
    has_yellow: bool
    last_move: Optional[RowCol]
    scores: dict[Side, int]
    rematch_votes: list[Side]
    latest_message_id: int


class LobbyResponse(BaseModel):
    code: str
    side: Side
    state: LobbyStateResponse


class ChatMessageResponse(BaseModel):
    id: int
    timestamp: datetime
    side: Side
    name: str
    text: str
