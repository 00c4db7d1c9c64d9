"""Unit tests for /src/core/config.py"""

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import (
    DIFFICULTY_PRESETS,
    LOG_FORMAT,
    BoardConfig,
    Settings,
    board_config_for,
    configure_logging,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty


# -- BOARD PRESETS --
@pytest.mark.parametrize(
    "difficulty, cols, obstacles",
    [
        (Difficulty.EASY, 7, 3),
        (Difficulty.MEDIUM, 8, 5),
        (Difficulty.HARD, 9, 7),
    ],
)
def test_presets(difficulty: Difficulty, cols: int, obstacles: int) -> None:
    config = board_config_for(difficulty)
    assert config is DIFFICULTY_PRESETS[difficulty]
    assert config.rows == 6
    assert config.cols == cols
    assert config.obstacles == obstacles
    assert config.gravity_flip_interval == 5


def test_board_must_fit_a_line() -> None:
    with pytest.raises(ValidationError):
        BoardConfig(rows=3, cols=7)


# -- SETTINGS --
def test_default_settings() -> None:
    settings = Settings()
    assert settings.session_idle_timeout == 24 * 60 * 60
    assert settings.lobby_idle_timeout == 2 * 60 * 60
    assert settings.chat_max_length == 240
    assert settings.chat_history_limit == 200
    assert settings.default_difficulty == Difficulty.EASY
    assert settings.log_level == "INFO"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("C4_LOBBY_IDLE_TIMEOUT", "600")
    monkeypatch.setenv("C4_DEFAULT_DIFFICULTY", "hard")
    monkeypatch.setenv("C4_LOG_LEVEL", "debug")
    monkeypatch.setenv("UNRELATED", "ignored")

    settings = Settings()

    assert settings.lobby_idle_timeout == 600
    assert settings.default_difficulty == Difficulty.HARD
    assert settings.log_level == "DEBUG"
    assert settings.session_idle_timeout == 24 * 60 * 60


def test_explicit_values_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("C4_CHAT_MAX_LENGTH", "10")
    assert Settings(chat_max_length=50).chat_max_length == 50


def test_settings_are_frozen() -> None:
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.chat_max_length = 10


def test_unknown_log_level() -> None:
    with pytest.raises(InvalidRequestError):
        Settings(log_level="chatty")


def test_negative_timeout_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("C4_SESSION_IDLE_TIMEOUT", "-1")
    with pytest.raises(ValidationError):
        Settings()


# -- LOGGING --
def test_configure_logging() -> None:
    with patch("src.core.config.logging.basicConfig") as basic_config:
        configure_logging(Settings(log_level="warning"))
    basic_config.assert_called_once_with(level="WARNING", format=LOG_FORMAT)
    assert logging.getLevelName("WARNING") == logging.WARNING
