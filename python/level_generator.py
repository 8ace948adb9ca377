"""
Solvable level generation.

A level starts as a solved layout: a closed loop of pieces running from the
source through the bulb and back, surrounded by decorative filler. Every
cell is then turned a random number of quarter turns, so the player only
has to rotate the loop back into place.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from circuit_types import CellPosition, Difficulty, Grid, Piece, Shape
from connections import direction_between, shape_for_directions
from level import Level, evaluate

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_RULES",
    "DIFFICULTY_SETTINGS",
    "DifficultySetting",
    "GeneratorRules",
    "LOOP_BUILDERS",
    "LoopStrategy",
    "build_loop",
    "default_loop",
    "edge_loop",
    "generate",
    "generate_for",
    "inner_loop",
    "is_closed_loop",
    "random_loop",
]

Loop = list[CellPosition]


class LoopStrategy(Enum):
    """How the designed loop is laid out."""

    EDGE = "edge"  # Perimeter, clockwise from the top-left corner
    INNER = "inner"  # Perimeter traced from the source and bulb positions
    RANDOM = "random"  # Random forward path plus a return path


@dataclass(frozen=True)
class GeneratorRules:
    """Tunables for level generation."""

    decorative_shapes: tuple[Shape, ...] = (Shape.L, Shape.I, Shape.T)
    # Upper bound of the random quarter turns added to each cell
    scramble_steps: dict[Difficulty, int] = field(
        default_factory=lambda: {
            Difficulty.EASY: 2,
            Difficulty.MEDIUM: 3,
            Difficulty.HARD: 4,
        }
    )
    min_loop_length: int = 4


DEFAULT_RULES = GeneratorRules()


@dataclass(frozen=True)
class DifficultySetting:
    """Default presentation of a difficulty."""

    grid_size: int
    name: str


DIFFICULTY_SETTINGS: dict[Difficulty, DifficultySetting] = {
    Difficulty.EASY: DifficultySetting(3, "Easy"),
    Difficulty.MEDIUM: DifficultySetting(4, "Medium"),
    Difficulty.HARD: DifficultySetting(5, "Hard"),
}


# =============================================================================
# Loop Construction
# =============================================================================


def edge_loop(size: int) -> Loop:
    """The grid perimeter, clockwise from (0, 0)."""
    loop: Loop = []
    for col in range(size):
        loop.append(CellPosition(0, col))
    for row in range(1, size):
        loop.append(CellPosition(row, size - 1))
    for col in range(size - 2, -1, -1):
        loop.append(CellPosition(size - 1, col))
    for row in range(size - 2, 0, -1):
        loop.append(CellPosition(row, 0))
    return loop


def default_loop(size: int) -> Loop:
    """
    Fixed rectangle used when no other loop could be built.

    Walks the four sides corner to corner without going through the
    strategy builders, so it still works when those fail.
    """
    last = size - 1
    top = [CellPosition(0, col) for col in range(last)]
    right = [CellPosition(row, last) for row in range(last)]
    bottom = [CellPosition(last, col) for col in range(last, 0, -1)]
    left = [CellPosition(row, 0) for row in range(last, 0, -1)]
    return top + right + bottom + left


def inner_loop(size: int, source: CellPosition, bulb: CellPosition) -> Loop:
    """
    Rectangle spanned by the source and bulb corners.

    With the source and bulb on opposite corners of the grid this is the
    perimeter again, but walked from the source's row and column.
    """
    loop: Loop = [source]
    for col in range(source.col + 1, bulb.col + 1):
        loop.append(CellPosition(source.row, col))
    for row in range(source.row + 1, bulb.row + 1):
        loop.append(CellPosition(row, bulb.col))
    for col in range(bulb.col - 1, source.col - 1, -1):
        loop.append(CellPosition(bulb.row, col))
    for row in range(bulb.row - 1, source.row, -1):
        loop.append(CellPosition(row, source.col))
    return loop


def random_loop(
    size: int,
    source: CellPosition,
    bulb: CellPosition,
    rng: random.Random,
    rules: GeneratorRules = DEFAULT_RULES,
) -> Loop:
    """
    A staircase from the source to the bulb, closed by a return along the edges.

    The forward path runs right along the source row to a random column,
    drops to a random row, runs right to the bulb column and drops to the
    bulb. It never touches the bulb row or the source column except at its
    ends, so the return path (left along the bulb row, then up the source
    column) closes it into a simple cycle.
    """
    turn_col = rng.randint(source.col + 1, bulb.col)
    turn_row = rng.randint(source.row, bulb.row - 1)

    forward: Loop = [CellPosition(source.row, col) for col in range(source.col, turn_col + 1)]
    forward += [CellPosition(row, turn_col) for row in range(source.row + 1, turn_row + 1)]
    forward += [CellPosition(turn_row, col) for col in range(turn_col + 1, bulb.col + 1)]
    forward += [CellPosition(row, bulb.col) for row in range(turn_row + 1, bulb.row + 1)]

    back: Loop = [CellPosition(bulb.row, col) for col in range(bulb.col - 1, source.col - 1, -1)]
    back += [CellPosition(row, source.col) for row in range(bulb.row - 1, source.row, -1)]

    loop: Loop = []
    seen: set[CellPosition] = set()
    for pos in forward + back:
        if pos not in seen:
            seen.add(pos)
            loop.append(pos)

    if len(loop) < rules.min_loop_length:
        logger.info("Random loop too short (%d cells), using the edge loop", len(loop))
        return edge_loop(size)
    return loop


LoopBuilder = Callable[[int, CellPosition, CellPosition, random.Random], Loop]

LOOP_BUILDERS: dict[LoopStrategy, LoopBuilder] = {
    LoopStrategy.EDGE: lambda size, source, bulb, rng: edge_loop(size),
    LoopStrategy.INNER: lambda size, source, bulb, rng: inner_loop(size, source, bulb),
    LoopStrategy.RANDOM: random_loop,
}


def is_closed_loop(loop: Loop) -> bool:
    """True if `loop` is a cycle of distinct cells, each adjacent to the next."""
    if len(loop) < 4 or len(set(loop)) != len(loop):
        return False
    return all(
        direction_between(pos, loop[(i + 1) % len(loop)]) is not None
        for i, pos in enumerate(loop)
    )


def build_loop(
    size: int,
    strategy: LoopStrategy,
    rng: random.Random,
    source: CellPosition,
    bulb: CellPosition,
) -> Loop:
    """
    Build the designed loop with the given strategy.

    A malformed loop, or one missing the source or bulb, is replaced by the
    edge loop. An empty result is passed through for the caller to handle.
    """
    if size < 2:
        return []

    loop = LOOP_BUILDERS[strategy](size, source, bulb, rng)
    if loop and not (is_closed_loop(loop) and source in loop and bulb in loop):
        logger.info("%s loop is not a closed circuit, using the edge loop", strategy.value)
        loop = edge_loop(size)
    return loop


# =============================================================================
# Level Assembly
# =============================================================================


def _loop_pieces(loop: Loop, source: CellPosition, bulb: CellPosition) -> dict[CellPosition, Piece]:
    """Pieces joining every loop cell to its predecessor and successor."""
    pieces: dict[CellPosition, Piece] = {}
    for i, pos in enumerate(loop):
        neighbours = (loop[i - 1], loop[(i + 1) % len(loop)])
        directions = {
            d for d in (direction_between(pos, n) for n in neighbours) if d is not None
        }
        shape, rotation = shape_for_directions(directions)
        pieces[pos] = Piece(shape, rotation, is_source=pos == source, is_bulb=pos == bulb)
    return pieces


def generate(
    size: int,
    difficulty: Difficulty = Difficulty.MEDIUM,
    rng: random.Random | None = None,
    strategy: LoopStrategy | None = None,
    rules: GeneratorRules = DEFAULT_RULES,
) -> Level:
    """
    Generate a scrambled, guaranteed-solvable level.

    Args:
        size: Width and height of the square grid (at least 2)
        difficulty: Controls how many quarter turns each cell is scrambled by
        rng: Source of randomness; pass a seeded Random for repeatable levels
        strategy: Pin the loop layout instead of picking one at random
        rules: Generation tunables

    Returns:
        A Level whose `solution` maps each loop cell to its designed rotation

    Raises:
        ValueError: if `size` is too small to hold both a source and a bulb
    """
    if size < 2:
        raise ValueError(
            f"Grid size {size} is too small\n"
            f"  The source and bulb need distinct corners, so size must be at least 2"
        )

    rng = rng if rng is not None else random.Random()
    source = CellPosition(0, 0)
    bulb = CellPosition(size - 1, size - 1)
    if strategy is None:
        strategy = rng.choice(list(LoopStrategy))

    logger.info("Generating %dx%d %s level with %s loop", size, size, difficulty.value, strategy.value)

    loop = build_loop(size, strategy, rng, source, bulb)
    filler = rules.decorative_shapes
    if not loop:
        logger.warning("Loop construction failed, using the default circuit")
        loop = default_loop(size)
        # The default circuit is padded with corners only
        filler = (Shape.L,)

    pieces = _loop_pieces(loop, source, bulb)
    solution = {pos: piece.rotation for pos, piece in pieces.items()}

    for r in range(size):
        for c in range(size):
            pos = CellPosition(r, c)
            if pos not in pieces:
                pieces[pos] = Piece(rng.choice(filler), rng.randrange(4) * 90)

    max_steps = rules.scramble_steps[difficulty]
    rows: list[tuple[Piece, ...]] = []
    for r in range(size):
        row: list[Piece] = []
        for c in range(size):
            piece = pieces[CellPosition(r, c)]
            steps = rng.randint(1, max_steps)
            row.append(
                Piece(
                    piece.shape,
                    (piece.rotation + steps * 90) % 360,
                    is_source=piece.is_source,
                    is_bulb=piece.is_bulb,
                )
            )
        rows.append(tuple(row))

    return evaluate(Grid(tuple(rows)), difficulty, solution)


def generate_for(difficulty: Difficulty, rng: random.Random | None = None) -> Level:
    """Generate a level at the default grid size for `difficulty`."""
    return generate(DIFFICULTY_SETTINGS[difficulty].grid_size, difficulty, rng)
