"""
Heuristic computer opponent
-----

One ply deep and greedy. For every playable column:

1. a move that wins right away is played immediately
2. a move that occupies a cell where the opponent would complete four gets a large bonus
   (looked up under the gravity the opponent will face, which differs when this move flips it)
3. the resulting position is scored by counting open 3- and 2-in-a-row windows (own minus opponent's)
4. a small penalty per column of distance from the middle breaks ties towards central play

The best score wins, ties go to the leftmost column. No randomness, no memory.
"""

from typing import Optional

from src.connect_four.board import Board, resolve_drop_cell
from src.connect_four.cell import Cell, Coordinate
from src.connect_four.evaluator import AXES, WIN_LENGTH, is_winning_move
from src.connect_four.rules import opponent_of
from src.core.shared_types import Side

BLOCK_BONUS = 5000
THREE_WEIGHT = 50
TWO_WEIGHT = 10
CENTER_PENALTY = 3


def windows(board: Board) -> list[list[Coordinate]]:
    """Every straight line of WIN_LENGTH cells that fits on the board."""
    found: list[list[Coordinate]] = []
    for row in range(board.rows):
        for col in range(board.cols):
            for d_row, d_col in AXES:
                end_row = row + d_row * (WIN_LENGTH - 1)
                end_col = col + d_col * (WIN_LENGTH - 1)
                if not board.is_inside(end_row, end_col):
                    continue
                start = Coordinate(row, col)
                found.append(
                    [start.shifted(d_row, d_col, step) for step in range(WIN_LENGTH)]
                )
    return found


def _window_score(cells: list[Cell], own: Cell, other: Cell) -> int:
    empty = cells.count(Cell.EMPTY)
    mine = cells.count(own)
    theirs = cells.count(other)
    if mine == 3 and empty == 1:
        return THREE_WEIGHT
    if mine == 2 and empty == 2:
        return TWO_WEIGHT
    if theirs == 3 and empty == 1:
        return -THREE_WEIGHT
    if theirs == 2 and empty == 2:
        return -TWO_WEIGHT
    return 0


def position_score(board: Board, side: Side) -> int:
    """Static evaluation from the point of view of `side`. Windows containing an obstacle can never be completed and are skipped."""
    own = Cell.of(side)
    other = Cell.of(opponent_of(side))
    score = 0
    for window in windows(board):
        cells = [board.cell(coord) for coord in window]
        if Cell.BLOCKED in cells:
            continue
        score += _window_score(cells, own, other)
    return score


def winning_cells(board: Board, side: Side, gravity_inverted: bool) -> set[Coordinate]:
    """Cells where `side` would complete four with its next drop."""
    found: set[Coordinate] = set()
    for col in range(board.cols):
        coord = resolve_drop_cell(board, col, gravity_inverted)
        if coord is None:
            continue
        if _wins_with(board, coord, side):
            found.add(coord)
    return found


def _wins_with(board: Board, coord: Coordinate, side: Side) -> bool:
    """Try the placement, then restore the cell."""
    board.place(coord, Cell.of(side))
    try:
        return is_winning_move(board, coord.row, coord.col, side)
    finally:
        board.clear(coord)


class HeuristicOpponent:
    """Plays for `side` (the computer is Yellow unless told otherwise)."""

    def __init__(self, side: Side = Side.YELLOW) -> None:
        self.side = side

    def choose_column(
        self,
        board: Board,
        gravity_inverted: bool,
        next_gravity_inverted: Optional[bool] = None,
    ) -> Optional[int]:
        """
        Column to play, or None if every column is full.
        ---

        Own moves land under `gravity_inverted`. The opponent answers under `next_gravity_inverted`
        (same as `gravity_inverted` when not given), so that is where its threats are looked for.
        """
        # scoring places and clears pieces, keep that off the live board
        board = board.copy()
        candidates = [
            (col, coord)
            for col in range(board.cols)
            if (coord := resolve_drop_cell(board, col, gravity_inverted)) is not None
        ]
        if not candidates:
            return None

        for col, coord in candidates:
            if _wins_with(board, coord, self.side):
                return col

        reply_gravity = (
            gravity_inverted if next_gravity_inverted is None else next_gravity_inverted
        )
        threats = winning_cells(board, opponent_of(self.side), reply_gravity)
        best_col: Optional[int] = None
        best_score = float("-inf")
        for col, coord in candidates:
            score = self.evaluate(board, coord, threats)
            if score > best_score:
                best_col, best_score = col, score
        return best_col

    def evaluate(
        self, board: Board, coord: Coordinate, threats: set[Coordinate]
    ) -> float:
        """Score of dropping a piece on `coord` (which is not an immediate win)."""
        score: float = BLOCK_BONUS if coord in threats else 0

        board.place(coord, Cell.of(self.side))
        try:
            score += position_score(board, self.side)
        finally:
            board.clear(coord)

        middle = (board.cols - 1) / 2
        score -= CENTER_PENALTY * abs(coord.col - middle)
        return score
