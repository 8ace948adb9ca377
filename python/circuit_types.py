"""
Shared type definitions for the circuit loop puzzle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Direction(Enum):
    """Cardinal direction of a connection point, in clockwise order."""

    TOP = 0  # Up (decreasing row)
    RIGHT = 1  # Right (increasing col)
    BOTTOM = 2  # Down (increasing row)
    LEFT = 3  # Left (decreasing col)

    @property
    def opposite(self) -> Direction:
        return Direction((self.value + 2) % 4)

    @property
    def delta(self) -> tuple[int, int]:
        """(row_delta, col_delta) of a single step in this direction."""
        return _DELTAS[self]

    def rotated(self, steps: int) -> Direction:
        """Direction after `steps` clockwise quarter turns."""
        return Direction((self.value + steps) % 4)


_DELTAS = {
    Direction.TOP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.BOTTOM: (1, 0),
    Direction.LEFT: (0, -1),
}


class Shape(Enum):
    """Fixed topology of a puzzle piece, independent of rotation."""

    EMPTY = "empty"
    L = "L"  # Two adjacent connections (corner)
    I = "I"  # Two opposite connections (straight)
    T = "T"  # Three connections
    X = "X"  # All four connections


class Difficulty(Enum):
    """How far the generator scrambles a solved layout."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class CellPosition:
    """A position within the grid. Doubles as the cell id."""

    row: int
    col: int

    def step(self, direction: Direction) -> CellPosition:
        dr, dc = direction.delta
        return CellPosition(self.row + dr, self.col + dc)


@dataclass(frozen=True)
class Piece:
    """A cell of the simple model: one of the canonical shapes at a rotation."""

    shape: Shape
    rotation: int = 0  # Degrees: 0, 90, 180 or 270
    is_source: bool = False
    is_bulb: bool = False
    fixed: bool = False


@dataclass(frozen=True)
class Tile:
    """A rotatable cell with arbitrary connections at rotation 0."""

    base_connections: frozenset[Direction]
    rotation: int = 0
    is_source: bool = False
    is_bulb: bool = False
    fixed: bool = False


@dataclass(frozen=True)
class Switch:
    """A two-state cell. Toggling swaps the active connection set instead of rotating."""

    states: tuple[frozenset[Direction], frozenset[Direction]]
    state: int = 0
    is_source: bool = False
    is_bulb: bool = False
    fixed: bool = False


@dataclass(frozen=True)
class Bridge:
    """
    A crossing cell carrying two independent paths.

    Each path is a set of directions; current on one path never reaches
    the other. Both paths rotate together.
    """

    paths: tuple[frozenset[Direction], frozenset[Direction]]
    rotation: int = 0
    is_source: bool = False
    is_bulb: bool = False
    fixed: bool = False


@dataclass(frozen=True)
class Blocker:
    """An obstacle with no connections. Never rotates."""

    is_source: bool = False
    is_bulb: bool = False
    fixed: bool = True


Cell = Piece | Tile | Switch | Bridge | Blocker


@dataclass(frozen=True)
class Grid:
    """An immutable 2D grid of cells. Updates return a new grid."""

    cells: tuple[tuple[Cell, ...], ...]

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def inside(self, pos: CellPosition) -> bool:
        return 0 <= pos.row < self.rows and 0 <= pos.col < self.cols

    def get(self, pos: CellPosition) -> Cell:
        if not self.inside(pos):
            raise IndexError(
                f"Position ({pos.row}, {pos.col}) is outside the {self.rows}x{self.cols} grid"
            )
        return self.cells[pos.row][pos.col]

    def replace(self, pos: CellPosition, cell: Cell) -> Grid:
        """Return a copy of this grid with the cell at `pos` swapped out."""
        if not self.inside(pos):
            raise IndexError(
                f"Position ({pos.row}, {pos.col}) is outside the {self.rows}x{self.cols} grid"
            )
        row = self.cells[pos.row]
        new_row = row[: pos.col] + (cell,) + row[pos.col + 1 :]
        return Grid(self.cells[: pos.row] + (new_row,) + self.cells[pos.row + 1 :])

    def positions(self) -> Iterator[CellPosition]:
        """Yield every position in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield CellPosition(r, c)


# Boolean per cell, same dimensions as the grid it was computed from
PoweredMatrix = tuple[tuple[bool, ...], ...]
