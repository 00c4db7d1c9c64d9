"""Unit tests for /src/connect_four/rules.py"""

import pytest

from src.connect_four.rules import (
    DEFAULT_GRAVITY_FLIP_INTERVAL,
    TurnState,
    gravity_flips_after,
    next_turn,
    opponent_of,
)
from src.core.shared_types import Side


def test_opponent_of() -> None:
    assert opponent_of(Side.RED) == Side.YELLOW
    assert opponent_of(Side.YELLOW) == Side.RED


@pytest.mark.parametrize(
    "turn_count, expected",
    [(0, False), (1, False), (4, False), (5, True), (6, False), (10, True), (15, True)],
)
def test_gravity_flips_every_fifth_move(turn_count: int, expected: bool) -> None:
    assert DEFAULT_GRAVITY_FLIP_INTERVAL == 5
    assert gravity_flips_after(turn_count) is expected


def test_zero_interval_never_flips() -> None:
    assert not any(gravity_flips_after(turn, interval=0) for turn in range(50))


def test_turn_passes_to_opponent() -> None:
    after = next_turn(TurnState(Side.RED, False, 0), terminal=False)
    assert after == TurnState(Side.YELLOW, False, 1)


def test_fifth_move_flips_gravity() -> None:
    after = next_turn(TurnState(Side.RED, False, 4), terminal=False)
    assert after == TurnState(Side.YELLOW, True, 5)

    # and the 10th flips it back
    after = next_turn(TurnState(Side.YELLOW, True, 9), terminal=False)
    assert after == TurnState(Side.RED, False, 10)


def test_terminal_move_freezes_player_and_gravity() -> None:
    """The move is counted, but a game-ending 5th move does not flip gravity nor pass the turn."""
    after = next_turn(TurnState(Side.RED, False, 4), terminal=True)
    assert after == TurnState(Side.RED, False, 5)
