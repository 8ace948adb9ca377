"""
Connection model: which directions a cell opens toward, and whether two
neighbouring cells are joined.

Everything here is pure. Rotations are assumed to be multiples of 90.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from circuit_types import (
    Blocker,
    Bridge,
    Cell,
    CellPosition,
    Direction,
    Piece,
    Shape,
    Switch,
    Tile,
)

__all__ = [
    "BASE_CONNECTIONS",
    "are_connected",
    "channels_of",
    "connections_of",
    "direction_between",
    "has_connection",
    "open_directions",
    "rotate_directions",
    "shape_for_directions",
    "turn",
]


# Connections of each shape at rotation 0
BASE_CONNECTIONS: dict[Shape, frozenset[Direction]] = {
    Shape.EMPTY: frozenset(),
    Shape.L: frozenset({Direction.TOP, Direction.RIGHT}),
    Shape.I: frozenset({Direction.TOP, Direction.BOTTOM}),
    Shape.T: frozenset({Direction.TOP, Direction.RIGHT, Direction.LEFT}),
    Shape.X: frozenset(Direction),
}


def rotate_directions(directions: Iterable[Direction], rotation: int) -> frozenset[Direction]:
    """Shift every direction clockwise by `rotation` degrees."""
    steps = (rotation % 360) // 90
    return frozenset(d.rotated(steps) for d in directions)


def connections_of(shape: Shape, rotation: int) -> frozenset[Direction]:
    """Open directions of `shape` turned by `rotation` degrees."""
    return rotate_directions(BASE_CONNECTIONS[shape], rotation)


def has_connection(shape: Shape, rotation: int, direction: Direction) -> bool:
    return direction in connections_of(shape, rotation)


def channels_of(cell: Cell) -> tuple[frozenset[Direction], ...]:
    """
    Independent connection sets through a cell.

    Most cells have a single channel. A bridge has one per path, so current
    entering on one path can only leave on that same path.
    """
    match cell:
        case Piece(shape=shape, rotation=rotation):
            return (connections_of(shape, rotation),)
        case Tile(base_connections=base, rotation=rotation):
            return (rotate_directions(base, rotation),)
        case Switch(states=states, state=state):
            return (states[state % 2],)
        case Bridge(paths=paths, rotation=rotation):
            return tuple(rotate_directions(path, rotation) for path in paths)
        case Blocker():
            return (frozenset(),)
        case _:
            raise ValueError(f"Unknown cell type: {cell}")


def open_directions(cell: Cell) -> frozenset[Direction]:
    """Union of all channels of a cell."""
    result: frozenset[Direction] = frozenset()
    for channel in channels_of(cell):
        result |= channel
    return result


def are_connected(cell_a: Cell, cell_b: Cell, direction: Direction) -> bool:
    """
    True if `cell_a` and its neighbour `cell_b` (lying in `direction`) are joined.

    Both sides must open toward each other; a one-sided stub is not a
    connection.
    """
    return direction in open_directions(cell_a) and direction.opposite in open_directions(cell_b)


def direction_between(a: CellPosition, b: CellPosition) -> Direction | None:
    """Direction leading from `a` to `b`, or None if they are not adjacent."""
    for direction in Direction:
        if a.step(direction) == b:
            return direction
    return None


# Rotation realising each two-direction set
_TWO_WAY: dict[frozenset[Direction], tuple[Shape, int]] = {
    frozenset({Direction.TOP, Direction.RIGHT}): (Shape.L, 0),
    frozenset({Direction.RIGHT, Direction.BOTTOM}): (Shape.L, 90),
    frozenset({Direction.BOTTOM, Direction.LEFT}): (Shape.L, 180),
    frozenset({Direction.LEFT, Direction.TOP}): (Shape.L, 270),
    frozenset({Direction.TOP, Direction.BOTTOM}): (Shape.I, 0),
    frozenset({Direction.RIGHT, Direction.LEFT}): (Shape.I, 90),
}

# T rotation keyed by the direction it leaves closed
_T_MISSING: dict[Direction, int] = {
    Direction.BOTTOM: 0,
    Direction.LEFT: 90,
    Direction.TOP: 180,
    Direction.RIGHT: 270,
}


def shape_for_directions(directions: Iterable[Direction]) -> tuple[Shape, int]:
    """
    Minimal piece whose connections are exactly `directions`.

    Returns:
        (shape, rotation) with rotation in degrees

    Raises:
        ValueError: for fewer than two directions, which no loop cell needs
    """
    wanted = frozenset(directions)
    match len(wanted):
        case 2:
            return _TWO_WAY[wanted]
        case 3:
            (missing,) = frozenset(Direction) - wanted
            return Shape.T, _T_MISSING[missing]
        case 4:
            return Shape.X, 0
        case _:
            names = ", ".join(sorted(d.name for d in wanted)) or "none"
            raise ValueError(
                f"No piece realises the direction set {{{names}}}\n"
                f"  A loop cell needs between 2 and 4 open directions"
            )


def turn(cell: Cell) -> Cell:
    """
    Apply one player action to a cell.

    Rotatable cells turn 90° clockwise, switches toggle state. Fixed cells
    and blockers come back unchanged.
    """
    if cell.fixed:
        return cell
    match cell:
        case Piece() | Tile() | Bridge():
            return replace(cell, rotation=(cell.rotation + 90) % 360)
        case Switch(state=state):
            return replace(cell, state=(state + 1) % 2)
        case _:
            return cell
