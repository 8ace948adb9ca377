"""
Circuit loop puzzle core.

Generate a scrambled grid whose solution is a closed loop from a power
source through a bulb and back, then re-evaluate power flow after every
rotation:

    level = generate(4, Difficulty.EASY)
    level = rotate_cell(level, CellPosition(0, 1))
    level.is_solved
"""

from __future__ import annotations

from circuit_types import (
    Blocker,
    Bridge,
    Cell,
    CellPosition,
    Difficulty,
    Direction,
    Grid,
    Piece,
    PoweredMatrix,
    Shape,
    Switch,
    Tile,
)
from connections import (
    are_connected,
    channels_of,
    connections_of,
    direction_between,
    has_connection,
    shape_for_directions,
    turn,
)
from level import Level, calculate_stars, evaluate, rotate_cell
from level_generator import (
    DIFFICULTY_SETTINGS,
    GeneratorRules,
    LoopStrategy,
    generate,
    generate_for,
)
from power import (
    is_bulb_powered,
    is_solved,
    propagate,
    source_connection_count,
)

__all__ = [
    "Blocker",
    "Bridge",
    "Cell",
    "CellPosition",
    "DIFFICULTY_SETTINGS",
    "Difficulty",
    "Direction",
    "GeneratorRules",
    "Grid",
    "Level",
    "LoopStrategy",
    "Piece",
    "PoweredMatrix",
    "Shape",
    "Switch",
    "Tile",
    "are_connected",
    "calculate_stars",
    "channels_of",
    "connections_of",
    "direction_between",
    "evaluate",
    "generate",
    "generate_for",
    "has_connection",
    "is_bulb_powered",
    "is_solved",
    "propagate",
    "rotate_cell",
    "shape_for_directions",
    "source_connection_count",
    "turn",
]
