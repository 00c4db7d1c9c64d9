"""
Configuration: board presets per difficulty and process-wide settings.

Settings can be overridden through environment variables prefixed with C4_ (ex. C4_LOBBY_IDLE_TIMEOUT=600).
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class BoardConfig(BaseModel):
    """Shape of a board and how many obstacles get dropped on it at the start of a round."""

    model_config = ConfigDict(frozen=True)

    rows: int = Field(default=6, ge=4)
    cols: int = Field(default=7, ge=4)
    obstacles: int = Field(default=3, ge=0)
    # gravity flips after every n-th move. 0 disables inversion (classic rules)
    gravity_flip_interval: int = Field(default=5, ge=0)


DIFFICULTY_PRESETS: dict[Difficulty, BoardConfig] = {
    Difficulty.EASY: BoardConfig(rows=6, cols=7, obstacles=3),
    Difficulty.MEDIUM: BoardConfig(rows=6, cols=8, obstacles=5),
    Difficulty.HARD: BoardConfig(rows=6, cols=9, obstacles=7),
}


def board_config_for(difficulty: Difficulty) -> BoardConfig:
    return DIFFICULTY_PRESETS[difficulty]


class Settings(BaseSettings):
    """Process-wide knobs, read from C4_* environment variables. Timeouts are in seconds."""

    model_config = SettingsConfigDict(env_prefix="C4_", frozen=True)

    # one day, as long as the session cookie lives
    session_idle_timeout: float = Field(default=24 * 60 * 60, gt=0)
    lobby_idle_timeout: float = Field(default=2 * 60 * 60, gt=0)
    chat_max_length: int = Field(default=240, gt=0)
    chat_history_limit: int = Field(default=200, gt=0)
    chat_name_max_length: int = Field(default=24, gt=0)
    default_difficulty: Difficulty = Difficulty.EASY
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise InvalidRequestError(f"Unknown log level: {value!r}")
        return level


def configure_logging(settings: Settings) -> None:
    """Called once by whatever boots the process (the HTTP layer)."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
