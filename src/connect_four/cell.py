"""
Contents of a single grid cell and the coordinate of a cell on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.core.shared_types import Side


class Cell(Enum):
    """Values are the characters used in the text notation of a board."""

    EMPTY = "."
    RED = "R"
    YELLOW = "Y"
    BLOCKED = "#"

    @classmethod
    def of(cls, side: Side) -> Cell:
        return SIDE_TO_CELL[side]

    @property
    def side(self) -> Side | None:
        return CELL_TO_SIDE.get(self)


SIDE_TO_CELL: dict[Side, Cell] = {
    Side.RED: Cell.RED,
    Side.YELLOW: Cell.YELLOW,
}

CELL_TO_SIDE: dict[Cell, Side] = {value: key for key, value in SIDE_TO_CELL.items()}


@dataclass(frozen=True, order=True)
class Coordinate:
    """(row, col). Row 0 is the top row of the board."""

    row: int
    col: int

    def shifted(self, d_row: int, d_col: int, steps: int = 1) -> Coordinate:
        return Coordinate(self.row + d_row * steps, self.col + d_col * steps)

    def as_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)
