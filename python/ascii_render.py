"""
ASCII rendering for circuit puzzles.

Each cell is drawn as the box-drawing glyph of its open directions, padded
to a fixed width. Powered cells are coloured, and the source and bulb are
tagged with S and B.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from circuit_types import Blocker, Bridge, Cell, CellPosition, Grid, PoweredMatrix
from connections import open_directions
from grid_parser import glyph_for
from level import Level

logger = logging.getLogger(__name__)

__all__ = ["cell_glyph", "render", "render_level"]


def cell_glyph(cell: Cell) -> str:
    """Single character for a cell, ignoring power and markers."""
    match cell:
        case Blocker():
            return "#"
        case Bridge():
            return "╬"
        case _:
            return glyph_for(open_directions(cell))


def _cell_content(cell: Cell, cell_width: int) -> str:
    glyph = cell_glyph(cell)
    if cell_width == 1:
        return glyph
    marker = "S" if cell.is_source else "B" if cell.is_bulb else ""
    if not marker:
        return glyph.center(cell_width)
    return (glyph + marker).center(cell_width)


def render(
    grid: Grid,
    powered: PoweredMatrix | None = None,
    highlight_pos: CellPosition | None = None,
    cell_width: int = 3,
) -> str:
    """
    Render a grid inside a border.

    Args:
        grid: The grid to render
        powered: Optional powered matrix; powered cells are drawn in yellow
            and a powered bulb in bright green
        highlight_pos: Optional cell to draw on a white background
        cell_width: Characters per cell (default 3)

    Returns:
        Rendered string, one line per grid row plus borders
    """
    frame: Callable[[str], str] = chalk.blue
    lines: list[str] = [frame("┌" + "─" * (grid.cols * cell_width) + "┐")]

    for r_idx, row in enumerate(grid.cells):
        line_parts = [frame("│")]

        for c_idx, cell in enumerate(row):
            content = _cell_content(cell, cell_width)
            is_powered = powered is not None and powered[r_idx][c_idx]
            is_highlighted = (
                highlight_pos is not None
                and highlight_pos.row == r_idx
                and highlight_pos.col == c_idx
            )

            if is_highlighted:
                content = chalk.bgWhite.black(content)
            elif is_powered and cell.is_bulb:
                content = chalk.greenBright(content)
            elif is_powered:
                content = chalk.yellow(content)
            elif cell.is_source or cell.is_bulb:
                content = chalk.red(content)

            line_parts.append(content)

        line_parts.append(frame("│"))
        lines.append("".join(line_parts))

    lines.append(frame("└" + "─" * (grid.cols * cell_width) + "┘"))
    return "\n".join(lines)


def render_level(
    level: Level,
    highlight_pos: CellPosition | None = None,
    cell_width: int = 3,
) -> str:
    """Render a level with its power state and a status line."""
    powered_count = sum(row.count(True) for row in level.powered)
    status = "SOLVED" if level.is_solved else "open circuit"
    logger.debug("Rendering %dx%d level (%s)", level.rows, level.cols, status)
    return (
        render(level.grid, level.powered, highlight_pos, cell_width)
        + f"\n{level.difficulty.value} | {powered_count}/{level.rows * level.cols} powered | {status}"
    )
