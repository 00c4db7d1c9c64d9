"""
Gravity & turn rules

The state machine over (current player, gravity direction, turn count) that runs after every applied move.
"""

from dataclasses import dataclass

from src.core.shared_types import Side

DEFAULT_GRAVITY_FLIP_INTERVAL = 5


@dataclass(frozen=True)
class TurnState:
    current_player: Side
    gravity_inverted: bool
    turn_count: int


def opponent_of(side: Side) -> Side:
    return Side.YELLOW if side == Side.RED else Side.RED


def gravity_flips_after(
    turn_count: int, interval: int = DEFAULT_GRAVITY_FLIP_INTERVAL
) -> bool:
    """True if gravity inverts once `turn_count` moves have been played. An interval of 0 never flips."""
    return interval > 0 and turn_count > 0 and turn_count % interval == 0


def next_turn(
    state: TurnState,
    terminal: bool,
    interval: int = DEFAULT_GRAVITY_FLIP_INTERVAL,
) -> TurnState:
    """
    Transition after one successfully applied move.
    ----

    1. the move always counts
    2. a terminal move (win / draw) freezes player and gravity
    3. otherwise the turn passes to the opponent, and every `interval`-th move flips gravity

    NOTE the win/draw check has already happened when this gets called, so gravity never flips on a terminal move.
    """
    turn_count = state.turn_count + 1
    if terminal:
        return TurnState(state.current_player, state.gravity_inverted, turn_count)

    gravity_inverted = state.gravity_inverted
    if gravity_flips_after(turn_count, interval):
        gravity_inverted = not gravity_inverted
    return TurnState(opponent_of(state.current_player), gravity_inverted, turn_count)
