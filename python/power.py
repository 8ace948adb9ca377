"""
Power propagation and solved-state evaluation.

Power spreads breadth-first from every source across mutual connections.
The puzzle is solved when the bulb is powered and sits on a closed loop,
i.e. it has at least two links that reach a source without passing through
the bulb itself.
"""

from __future__ import annotations

import logging
from collections import deque

from circuit_types import Blocker, CellPosition, Direction, Grid, PoweredMatrix
from connections import channels_of, open_directions

logger = logging.getLogger(__name__)

__all__ = [
    "find_bulb",
    "find_sources",
    "is_bulb_powered",
    "is_solved",
    "powered_channels",
    "propagate",
    "source_connection_count",
]

# A BFS node: one independent channel of one cell
Node = tuple[CellPosition, int]


def find_sources(grid: Grid) -> list[CellPosition]:
    """All source positions in row-major order."""
    return [pos for pos in grid.positions() if grid.get(pos).is_source]


def find_bulb(grid: Grid) -> CellPosition | None:
    """The first bulb in row-major order, or None if the grid has none."""
    for pos in grid.positions():
        if grid.get(pos).is_bulb:
            return pos
    return None


def powered_channels(grid: Grid) -> set[Node]:
    """
    Breadth-first search from all sources at once.

    Every channel of a source cell is seeded. From a dequeued channel the
    search looks in each direction it opens toward, and enters any
    neighbouring channel that opens back. Each node is visited once, so
    the search is bounded by the number of channels in the grid.

    Returns:
        The set of (position, channel index) nodes carrying current
    """
    visited: set[Node] = set()
    queue: deque[Node] = deque()

    for pos in find_sources(grid):
        for channel in range(len(channels_of(grid.get(pos)))):
            visited.add((pos, channel))
            queue.append((pos, channel))

    while queue:
        pos, channel = queue.popleft()
        exits = channels_of(grid.get(pos))[channel]

        for direction in Direction:
            neighbor = pos.step(direction)
            if not grid.inside(neighbor) or direction not in exits:
                continue

            for neighbor_channel, entries in enumerate(channels_of(grid.get(neighbor))):
                node = (neighbor, neighbor_channel)
                if node in visited or direction.opposite not in entries:
                    continue
                visited.add(node)
                queue.append(node)

    return visited


def propagate(grid: Grid) -> PoweredMatrix:
    """Per-cell powered flags. A cell is powered when any of its channels is."""
    powered_positions = {pos for pos, _ in powered_channels(grid)}
    matrix = tuple(
        tuple(CellPosition(r, c) in powered_positions for c in range(grid.cols))
        for r in range(grid.rows)
    )
    logger.debug(
        "Propagated power: %d of %d cells powered",
        len(powered_positions),
        grid.rows * grid.cols,
    )
    return matrix


def _powered_links(grid: Grid, powered: PoweredMatrix, pos: CellPosition) -> int:
    """Count mutual connections from `pos` to powered neighbours."""
    count = 0
    for direction in open_directions(grid.get(pos)):
        neighbor = pos.step(direction)
        if not grid.inside(neighbor):
            continue
        if direction.opposite not in open_directions(grid.get(neighbor)):
            continue
        if powered[neighbor.row][neighbor.col]:
            count += 1
    return count


def is_solved(grid: Grid, powered: PoweredMatrix) -> bool:
    """
    True if the bulb is lit by a closed circuit.

    A bulb with a single powered link is the end of a dead branch. Links are
    counted against the power that flows with the bulb cut out of the grid,
    so a dead branch hanging off the far side of the bulb (powered only
    through the bulb) does not count as a way back to the source.
    """
    bulb = find_bulb(grid)
    if bulb is None or not powered[bulb.row][bulb.col]:
        return False
    bypass = propagate(grid.replace(bulb, Blocker()))
    return _powered_links(grid, bypass, bulb) >= 2


def is_bulb_powered(grid: Grid, powered: PoweredMatrix) -> bool:
    """True if any bulb receives current, closed loop or not."""
    return any(
        powered[pos.row][pos.col] for pos in grid.positions() if grid.get(pos).is_bulb
    )


def source_connection_count(grid: Grid, powered: PoweredMatrix) -> int:
    """Powered links leaving the first source, or 0 if there is none."""
    sources = find_sources(grid)
    if not sources:
        return 0
    return _powered_links(grid, powered, sources[0])
