"""
The GameState will be the entrypoint into the domain layer for the service layer.
It owns one board plus everything around it (turn, gravity, scores, names) and is only mutated through
apply_move, reset and replay_keeping_score.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from random import Random
from typing import Optional, Self

from src.connect_four.board import (
    Board,
    is_column_playable,
    place_obstacles,
    resolve_drop_cell,
)
from src.connect_four.cell import Cell, Coordinate
from src.connect_four.evaluator import find_line_through, is_draw
from src.connect_four.rules import TurnState, gravity_flips_after, next_turn
from src.core.config import BoardConfig, board_config_for
from src.core.exceptions import ColumnFullError, GameOverError, InvalidRequestError
from src.core.models import AppliedMoveResult
from src.core.shared_types import DISPLAY_NAMES, Difficulty, Mode, Side

# In "ai" mode the computer always plays Yellow, the human opens with Red.
COMPUTER_SIDE = Side.YELLOW
DRAW_MESSAGE = "Draw!"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _zero_scores() -> dict[Side, int]:
    return {side: 0 for side in Side}


@dataclass
class GameState:
    board: Board
    config: BoardConfig
    difficulty: Difficulty = Difficulty.EASY
    mode: Mode = Mode.PVP
    current_player: Side = Side.RED
    turn_count: int = 0
    gravity_inverted: bool = False
    game_over: bool = False
    winner: Optional[Side] = None
    winning_cells: list[Coordinate] = field(default_factory=list)
    names: dict[Side, str] = field(default_factory=lambda: dict(DISPLAY_NAMES))
    scores: dict[Side, int] = field(default_factory=_zero_scores)
    last_placed_by: Optional[Side] = None
    last_move: Optional[Coordinate] = None
    message: str = ""
    last_activity: datetime = field(default_factory=utc_now)

    @classmethod
    def new(
        cls,
        difficulty: Difficulty = Difficulty.EASY,
        mode: Mode = Mode.PVP,
        rng: Optional[Random] = None,
        config: Optional[BoardConfig] = None,
    ) -> Self:
        """Start a fresh game. An explicit `config` overrides the difficulty preset (ex. classic rules in tests)."""
        config = config or board_config_for(difficulty)
        state = cls(
            board=Board.empty(config.rows, config.cols),
            config=config,
            difficulty=difficulty,
            mode=mode,
        )
        place_obstacles(state.board, config.obstacles, rng or Random())
        return state

    # --- DOMAIN LAYER API CALLED BY SERVICE---
    def apply_move(self, column: int) -> AppliedMoveResult:
        """
        Drop a piece for the player whose turn it is.
        -----

        1. refuse the move if the game ended or the column has no empty cell
        2. place the piece where gravity takes it
        3. check for a win, then for a draw
        4. pass the turn / flip gravity (only if the game goes on)
        """
        if not 0 <= column < self.board.cols:
            raise InvalidRequestError(
                f"Column {column} is outside the board (0-{self.board.cols - 1})."
            )
        if self.game_over:
            raise GameOverError("The game is over. Start a new round first.")

        coord = resolve_drop_cell(self.board, column, self.gravity_inverted)
        if coord is None:
            raise ColumnFullError(f"Column {column} is full.")

        side = self.current_player
        self.board.place(coord, Cell.of(side))
        self.last_placed_by = side
        self.last_move = coord

        won = self._check_win(coord, side)
        draw = not won and self._check_draw()

        before = TurnState(self.current_player, self.gravity_inverted, self.turn_count)
        after = next_turn(
            before, terminal=won or draw, interval=self.config.gravity_flip_interval
        )
        self.current_player = after.current_player
        self.gravity_inverted = after.gravity_inverted
        self.turn_count = after.turn_count
        self.touch()

        return AppliedMoveResult(
            row=coord.row,
            col=coord.col,
            side=side,
            won=won,
            draw=draw,
            gravity_flipped=after.gravity_inverted != before.gravity_inverted,
        )

    def reset(
        self,
        difficulty: Optional[Difficulty] = None,
        mode: Optional[Mode] = None,
        rng: Optional[Random] = None,
        config: Optional[BoardConfig] = None,
    ) -> None:
        """Full reset: new board, scores back to zero. Names are kept."""
        if difficulty is not None:
            self.difficulty = difficulty
            self.config = config or board_config_for(difficulty)
        elif config is not None:
            self.config = config
        if mode is not None:
            self.mode = mode
        self.scores = _zero_scores()
        self._start_round(rng)

    def replay_keeping_score(self, rng: Optional[Random] = None) -> None:
        """Another round with the same board size, mode, names and scores."""
        self._start_round(rng)

    def snapshot(self) -> Self:
        """
        Independent copy, field by field.
        ---

        NOTE: Used to turn a lobby's game into a private session. Nothing mutable may be shared between the two.
        """
        return type(self)(
            board=self.board.copy(),
            config=self.config,
            difficulty=self.difficulty,
            mode=self.mode,
            current_player=self.current_player,
            turn_count=self.turn_count,
            gravity_inverted=self.gravity_inverted,
            game_over=self.game_over,
            winner=self.winner,
            winning_cells=list(self.winning_cells),
            names=dict(self.names),
            scores=dict(self.scores),
            last_placed_by=self.last_placed_by,
            last_move=self.last_move,
            message=self.message,
            last_activity=self.last_activity,
        )

    def column_flags(self) -> list[bool]:
        """Per column: can a piece be dropped there right now?"""
        return [
            not self.game_over and is_column_playable(self.board, col)
            for col in range(self.board.cols)
        ]

    @property
    def is_computer_turn(self) -> bool:
        return (
            self.mode == Mode.AI
            and not self.game_over
            and self.current_player == COMPUTER_SIDE
        )

    @property
    def gravity_after_next_move(self) -> bool:
        """Gravity the following player faces once the next move is played, unless that move ends the game."""
        flips = gravity_flips_after(self.turn_count + 1, self.config.gravity_flip_interval)
        return self.gravity_inverted != flips

    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity = now or utc_now()

    # -- PRIVATE HELPERS ---
    def _check_win(self, coord: Coordinate, side: Side) -> bool:
        line = find_line_through(self.board, coord.row, coord.col, side)
        if not line:
            return False
        self.winning_cells = line
        self.winner = side
        self.game_over = True
        self.scores[side] += 1
        self.message = f"{self.names[side]} wins!"
        return True

    def _check_draw(self) -> bool:
        if not is_draw(self.board):
            return False
        self.game_over = True
        self.message = DRAW_MESSAGE
        return True

    def _start_round(self, rng: Optional[Random]) -> None:
        """Red always opens, gravity starts pointing down."""
        self.board = Board.empty(self.config.rows, self.config.cols)
        place_obstacles(self.board, self.config.obstacles, rng or Random())
        self.current_player = Side.RED
        self.turn_count = 0
        self.gravity_inverted = False
        self.game_over = False
        self.winner = None
        self.winning_cells = []
        self.last_placed_by = None
        self.last_move = None
        self.message = ""
        self.touch()
