"""Unit tests for /src/connect_four/board.py"""

from random import Random
from unittest.mock import Mock

import pytest

from src.connect_four.board import (
    OBSTACLE_ATTEMPTS_PER_CELL,
    Board,
    is_column_playable,
    place_obstacles,
    playable_columns,
    resolve_drop_cell,
)
from src.connect_four.cell import Cell, Coordinate
from src.core.shared_types import Side

EMPTY_6X7 = ["......."] * 6


# -- NOTATION --
def test_text_roundtrip() -> None:
    rows = [
        ".......",
        ".......",
        "...#...",
        ".......",
        "...Y...",
        "R..RY.#",
    ]
    board = Board.from_text(rows)
    assert board.to_text() == rows
    assert board.rows == 6
    assert board.cols == 7
    assert board.cell(Coordinate(5, 0)) == Cell.RED
    assert board.cell(Coordinate(4, 3)) == Cell.YELLOW
    assert board.cell(Coordinate(2, 3)) == Cell.BLOCKED


def test_empty_board() -> None:
    board = Board.empty(6, 9)
    assert board.rows == 6
    assert board.cols == 9
    assert len(board.empty_cells()) == 54


def test_cell_side_mapping() -> None:
    assert Cell.of(Side.RED) == Cell.RED
    assert Cell.YELLOW.side == Side.YELLOW
    assert Cell.BLOCKED.side is None
    assert Cell.EMPTY.side is None


def test_copy_is_independent() -> None:
    board = Board.from_text(EMPTY_6X7)
    copied = board.copy()
    copied.place(Coordinate(5, 0), Cell.RED)
    assert board.cell(Coordinate(5, 0)) == Cell.EMPTY


# -- DROP CELL --
@pytest.mark.parametrize("column", range(7))
def test_drop_on_empty_board(column: int) -> None:
    """Normal gravity lands on the bottom row, inverted gravity on the top row."""
    board = Board.from_text(EMPTY_6X7)
    assert resolve_drop_cell(board, column, gravity_inverted=False) == Coordinate(
        5, column
    )
    assert resolve_drop_cell(board, column, gravity_inverted=True) == Coordinate(
        0, column
    )


def test_drop_stacks_on_pieces_and_obstacles() -> None:
    board = Board.from_text(
        [
            ".......",
            ".......",
            ".......",
            ".......",
            "#......",
            "R......",
        ]
    )
    assert resolve_drop_cell(board, 0, gravity_inverted=False) == Coordinate(3, 0)


def test_drop_passes_through_obstacle_under_inverted_gravity() -> None:
    """An obstacle on the top row does not stop a piece falling upwards: it lands right behind it."""
    board = Board.from_text(
        [
            "#......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ]
    )
    assert resolve_drop_cell(board, 0, gravity_inverted=True) == Coordinate(1, 0)


def test_drop_does_not_need_connected_column() -> None:
    """
    A red piece stuck near the top (left over from inverted gravity) does not block anything:
    the scan simply skips it and the column fills around it.
    """
    board = Board.from_text(
        [
            ".......",
            "R......",
            ".......",
            ".......",
            ".......",
            ".......",
        ]
    )
    landed_rows = []
    while (coord := resolve_drop_cell(board, 0, gravity_inverted=False)) is not None:
        landed_rows.append(coord.row)
        board.place(coord, Cell.YELLOW)
    assert landed_rows == [5, 4, 3, 2, 0]


def test_full_column_has_no_drop_cell() -> None:
    board = Board.from_text(
        [
            "R......",
            "Y......",
            "#......",
            "R......",
            "Y......",
            "R......",
        ]
    )
    assert resolve_drop_cell(board, 0, gravity_inverted=False) is None
    assert resolve_drop_cell(board, 0, gravity_inverted=True) is None
    assert not is_column_playable(board, 0)
    assert playable_columns(board) == [1, 2, 3, 4, 5, 6]


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
@pytest.mark.parametrize("gravity_inverted", [False, True])
def test_repeated_drops_fill_every_column(seed: int, gravity_inverted: bool) -> None:
    """
    Resolve-then-place until the column is full:
    every empty cell of the column gets used exactly once, occupied cells are never selected.
    """
    board = Board.empty(6, 7)
    place_obstacles(board, 7, Random(seed))

    for column in range(board.cols):
        empty_before = [
            coord for coord in board.empty_cells() if coord.col == column
        ]
        landed: list[Coordinate] = []
        while (coord := resolve_drop_cell(board, column, gravity_inverted)) is not None:
            assert board.cell(coord) == Cell.EMPTY
            board.place(coord, Cell.RED)
            landed.append(coord)
        assert sorted(landed) == sorted(empty_before)
        assert not is_column_playable(board, column)


# -- OBSTACLES --
def test_place_obstacles_on_empty_board() -> None:
    board = Board.empty(6, 9)
    placed = place_obstacles(board, 7, Random(42))
    assert placed == 7
    assert len(board.locate(Cell.BLOCKED)) == 7


def test_place_zero_obstacles() -> None:
    board = Board.empty(6, 7)
    assert place_obstacles(board, 0, Random(42)) == 0
    assert board.to_text() == EMPTY_6X7


def test_obstacles_never_overwrite_pieces() -> None:
    rows = [
        "RYRYRYR",
        "YRYRYRY",
        "RYRYRYR",
        "YRYRYRY",
        "RYRYRYR",
        "YRYRY..",
    ]
    board = Board.from_text(rows)
    placed = place_obstacles(board, 5, Random(7))
    assert placed <= 2
    assert board.to_text()[:5] == rows[:5]
    assert board.to_text()[5][:5] == "YRYRY"


def test_saturated_board_gets_no_obstacles() -> None:
    rows = ["RYRY", "YRYR", "RYRY", "YRYR"]
    board = Board.from_text(rows)
    assert place_obstacles(board, 3, Random(7)) == 0
    assert board.to_text() == rows


def test_obstacle_attempt_budget() -> None:
    """The placer keeps hitting the same cell: it gives up after the attempt budget instead of looping forever."""
    board = Board.empty(4, 4)
    rng = Mock()
    rng.randrange.return_value = 0

    placed = place_obstacles(board, 3, rng)

    assert placed == 1
    assert board.cell(Coordinate(0, 0)) == Cell.BLOCKED
    # two random numbers (row, col) per attempt
    assert rng.randrange.call_count == 2 * OBSTACLE_ATTEMPTS_PER_CELL * 3
