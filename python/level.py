"""
Level snapshots and player moves.

A Level is never mutated: every move returns a new Level whose power and
solved state have been recomputed from scratch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from circuit_types import CellPosition, Difficulty, Grid, Piece, PoweredMatrix
from connections import connections_of, turn
from power import is_solved, propagate

logger = logging.getLogger(__name__)

__all__ = ["Level", "calculate_stars", "evaluate", "rotate_cell"]


@dataclass(frozen=True)
class Level:
    """An immutable puzzle snapshot with derived power state."""

    grid: Grid
    difficulty: Difficulty
    powered: PoweredMatrix
    is_solved: bool
    # Designed (unscrambled) rotation of every loop cell, read-only
    solution: Mapping[CellPosition, int] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    def is_powered(self, pos: CellPosition) -> bool:
        return self.powered[pos.row][pos.col]

    def moves_to_solve(self) -> dict[CellPosition, int]:
        """
        Quarter turns each loop cell needs to reach its designed connections.

        Symmetric shapes can match early, e.g. an I piece is never more than
        one turn away.
        """
        moves: dict[CellPosition, int] = {}
        for pos, designed in self.solution.items():
            cell = self.grid.get(pos)
            if not isinstance(cell, Piece):
                continue
            target = connections_of(cell.shape, designed)
            moves[pos] = next(
                steps
                for steps in range(4)
                if connections_of(cell.shape, cell.rotation + steps * 90) == target
            )
        return moves

    def with_solution_applied(self) -> Level:
        """Return this level with every loop cell turned back to its designed rotation."""
        grid = self.grid
        for pos, designed in self.solution.items():
            cell = grid.get(pos)
            if isinstance(cell, Piece):
                grid = grid.replace(pos, replace(cell, rotation=designed))
        return evaluate(grid, self.difficulty, self.solution)


def evaluate(
    grid: Grid,
    difficulty: Difficulty = Difficulty.MEDIUM,
    solution: Mapping[CellPosition, int] | None = None,
) -> Level:
    """Build a Level from a grid, computing power flow and solved state."""
    powered = propagate(grid)
    solved = is_solved(grid, powered)
    return Level(grid, difficulty, powered, solved, MappingProxyType(dict(solution or {})))


def rotate_cell(level: Level, pos: CellPosition) -> Level:
    """
    Turn the cell at `pos` and re-evaluate.

    Fixed cells and blockers are left alone and the same level is returned.

    Raises:
        IndexError: if `pos` is outside the grid
    """
    cell = level.grid.get(pos)
    turned = turn(cell)
    if turned == cell:
        return level

    result = evaluate(level.grid.replace(pos, turned), level.difficulty, level.solution)
    logger.debug(
        "Turned cell (%d, %d): solved=%s",
        pos.row,
        pos.col,
        result.is_solved,
    )
    return result


def calculate_stars(seconds: float, tile_count: int) -> int:
    """
    Star rating for a finished puzzle.

    Allows three seconds per tile for three stars, twice that for two, and
    always awards at least one.
    """
    base_time = tile_count * 3
    if seconds <= base_time:
        return 3
    if seconds <= base_time * 2:
        return 2
    return 1
