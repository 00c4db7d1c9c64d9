"""The Board holds the grid of cells and the placement primitives (obstacles, where a dropped piece lands)."""

from dataclasses import dataclass
from random import Random
from typing import Optional, Self

from src.connect_four.cell import Cell, Coordinate

# the obstacle placer gives up after this many random picks per requested obstacle
OBSTACLE_ATTEMPTS_PER_CELL = 10


@dataclass
class Board:
    grid: list[list[Cell]]

    @classmethod
    def empty(cls, rows: int, cols: int) -> Self:
        return cls([[Cell.EMPTY for _ in range(cols)] for _ in range(rows)])

    @classmethod
    def from_text(cls, rows: list[str]) -> Self:
        """Construct a board from its text notation, top row first.

        ex) a 4x4 board with a red piece in the bottom-left corner and an obstacle next to it:
        ["....", "....", "....", "R#.."]

        * "." empty cell
        * "R" / "Y" red / yellow piece
        * "#" obstacle
        """
        return cls([[Cell(character) for character in row] for row in rows])

    def to_text(self) -> list[str]:
        return ["".join(cell.value for cell in row) for row in self.grid]

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def cell(self, coord: Coordinate) -> Cell:
        return self.grid[coord.row][coord.col]

    def place(self, coord: Coordinate, cell: Cell) -> None:
        self.grid[coord.row][coord.col] = cell

    def clear(self, coord: Coordinate) -> None:
        self.grid[coord.row][coord.col] = Cell.EMPTY

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def empty_cells(self) -> list[Coordinate]:
        return self.locate(Cell.EMPTY)

    def locate(self, cell: Cell) -> list[Coordinate]:
        return [
            Coordinate(row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self.grid[row][col] == cell
        ]

    def copy(self) -> Self:
        """New grid, same cells. (Cells are enum members, so copying the rows is enough)"""
        return type(self)([list(row) for row in self.grid])


def place_obstacles(board: Board, count: int, rng: Random) -> int:
    """
    Drop `count` obstacles on distinct empty cells, picked uniformly at random.
    ----

    Gives up after OBSTACLE_ATTEMPTS_PER_CELL * count picks, so a (nearly) saturated board just gets fewer obstacles.
    Returns how many were actually placed.
    """
    if count <= 0 or board.rows == 0:
        return 0

    placed = 0
    for _ in range(OBSTACLE_ATTEMPTS_PER_CELL * count):
        if placed == count:
            break
        coord = Coordinate(rng.randrange(board.rows), rng.randrange(board.cols))
        if board.cell(coord) != Cell.EMPTY:
            continue
        board.place(coord, Cell.BLOCKED)
        placed += 1
    return placed


def resolve_drop_cell(
    board: Board, column: int, gravity_inverted: bool
) -> Optional[Coordinate]:
    """
    Where a piece dropped into `column` ends up.
    ---

    Normal gravity scans the column from the bottom row upwards, inverted gravity from the top row downwards.
    NOTE: obstacles and pieces do not stop the scan. A piece travels through them and lands on the first empty cell in scan order.
    Returns None when the column has no empty cell at all.
    """
    scan = range(board.rows) if gravity_inverted else range(board.rows - 1, -1, -1)
    for row in scan:
        coord = Coordinate(row, column)
        if board.cell(coord) == Cell.EMPTY:
            return coord
    return None


def is_column_playable(board: Board, column: int) -> bool:
    return any(board.grid[row][column] == Cell.EMPTY for row in range(board.rows))


def playable_columns(board: Board) -> list[int]:
    return [col for col in range(board.cols) if is_column_playable(board, col)]
