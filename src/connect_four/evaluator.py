"""
Win / draw detection

A win is checked from the cell that was just filled: walk each axis in both directions while the cells belong to the same side.
"""

from src.connect_four.board import Board, playable_columns
from src.connect_four.cell import Cell, Coordinate
from src.core.shared_types import Side

WIN_LENGTH = 4

Vector = tuple[int, int]

# horizontal, vertical, diagonal (down-right), anti-diagonal (down-left)
AXES: tuple[Vector, ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


def _run_along(
    board: Board, start: Coordinate, axis: Vector, cell: Cell
) -> list[Coordinate]:
    """Contiguous run of `cell` through `start` along one axis, ordered from one end to the other."""
    d_row, d_col = axis

    backwards: list[Coordinate] = []
    coord = start.shifted(-d_row, -d_col)
    while board.is_inside(coord.row, coord.col) and board.cell(coord) == cell:
        backwards.append(coord)
        coord = coord.shifted(-d_row, -d_col)

    forwards: list[Coordinate] = []
    coord = start.shifted(d_row, d_col)
    while board.is_inside(coord.row, coord.col) and board.cell(coord) == cell:
        forwards.append(coord)
        coord = coord.shifted(d_row, d_col)

    return list(reversed(backwards)) + [start] + forwards


def longest_run_through(
    board: Board, row: int, col: int, side: Side
) -> list[Coordinate]:
    """Longest same-side run through (row, col) over the four axes. The first axis wins ties."""
    start = Coordinate(row, col)
    cell = Cell.of(side)
    if board.cell(start) != cell:
        return []

    longest: list[Coordinate] = []
    for axis in AXES:
        run = _run_along(board, start, axis, cell)
        if len(run) > len(longest):
            longest = run
    return longest


def find_line_through(
    board: Board, row: int, col: int, side: Side
) -> list[Coordinate]:
    """
    The winning line through the just-placed cell, or an empty list.

    Longer runs are cut down to the first WIN_LENGTH cells, that is what gets highlighted.
    """
    run = longest_run_through(board, row, col, side)
    if len(run) < WIN_LENGTH:
        return []
    return run[:WIN_LENGTH]


def is_winning_move(board: Board, row: int, col: int, side: Side) -> bool:
    return bool(find_line_through(board, row, col, side))


def is_entry_row_full(board: Board) -> bool:
    """Top row completely filled (pieces or obstacles)."""
    return all(cell != Cell.EMPTY for cell in board.grid[0])


def is_draw(board: Board) -> bool:
    """
    No legal drop cell left anywhere.

    NOTE: A full top row is not enough. Under inverted gravity the top row is the first one to fill up.
    """
    return not playable_columns(board)
