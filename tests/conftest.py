"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import os
from random import Random

import pytest

from src.connect_four.game import GameState
from src.core.config import BoardConfig
from src.store.memory_store import InMemoryGameStore

# 6x7, no obstacles, gravity never flips: the rules of the classic game
CLASSIC_CONFIG = BoardConfig(rows=6, cols=7, obstacles=0, gravity_flip_interval=0)
# 6x7, no obstacles, gravity flips every 5 moves
NO_OBSTACLES_CONFIG = BoardConfig(rows=6, cols=7, obstacles=0)


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings read C4_* variables: keep the ones of the machine running the tests out."""
    for name in list(os.environ):
        if name.startswith("C4_"):
            monkeypatch.delenv(name)


@pytest.fixture
def rng() -> Random:
    """Seeded, so obstacle placement is reproducible."""
    return Random(1234)


@pytest.fixture
def memory_store() -> InMemoryGameStore:
    return InMemoryGameStore()


@pytest.fixture
def classic_game() -> GameState:
    return GameState.new(config=CLASSIC_CONFIG)


@pytest.fixture
def flipping_game() -> GameState:
    return GameState.new(config=NO_OBSTACLES_CONFIG)


@pytest.fixture
def classic_config() -> BoardConfig:
    return CLASSIC_CONFIG
