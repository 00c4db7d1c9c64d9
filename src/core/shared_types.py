"""
Type definitions used across layers
"""

from enum import StrEnum


class Side(StrEnum):
    RED = "red"
    YELLOW = "yellow"


class Mode(StrEnum):
    PVP = "pvp"
    AI = "ai"
    ONLINE = "online"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class RejectionReason(StrEnum):
    """Why a move was refused. The caller re-renders the unchanged state."""

    NOT_YOUR_TURN = "not your turn"
    GAME_OVER = "game already over"
    COLUMN_FULL = "column full"


# --- NOTE Side does not contain options for empty / blocked cells. Those live in src/connect_four/cell.py
DISPLAY_NAMES: dict[Side, str] = {
    Side.RED: "Red",
    Side.YELLOW: "Yellow",
}
