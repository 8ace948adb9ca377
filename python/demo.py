"""
Demonstration scripts for the circuit loop puzzle.
"""

import random

from ascii_render import render, render_level
from circuitloop import (
    Bridge,
    CellPosition,
    Difficulty,
    Direction,
    Grid,
    LoopStrategy,
    Piece,
    Shape,
    evaluate,
    generate,
    propagate,
    rotate_cell,
)
from grid_parser import parse_grid, parse_grid_concise


def circuit_demo() -> None:
    """Show a dead-end branch next to a closed circuit."""
    dead_end = parse_grid("L90* I90 L180|I _ I|L0 I90 L270@")
    dead_end = dead_end.replace(CellPosition(1, 2), Piece(Shape.I, 90))

    print("=" * 40)
    print("Open circuit (bulb reached from one side):")
    print("=" * 40)
    print(render_level(evaluate(dead_end)))
    print()

    closed = parse_grid_concise(
        "┌─┐|│.│|└─┘",
        source=CellPosition(0, 0),
        bulb=CellPosition(2, 2),
    )
    print("=" * 40)
    print("Closed circuit:")
    print("=" * 40)
    print(render_level(evaluate(closed)))


def bridge_demo() -> None:
    """Two currents crossing one bridge cell without mixing."""
    vertical = frozenset({Direction.TOP, Direction.BOTTOM})
    horizontal = frozenset({Direction.LEFT, Direction.RIGHT})
    grid = Grid(
        (
            (Piece(Shape.EMPTY), Piece(Shape.I, 0, is_source=True), Piece(Shape.EMPTY)),
            (Piece(Shape.I, 90), Bridge((vertical, horizontal)), Piece(Shape.I, 90)),
            (Piece(Shape.EMPTY), Piece(Shape.I), Piece(Shape.EMPTY)),
        )
    )

    print("=" * 40)
    print("Bridge: vertical path powered, horizontal path dark")
    print("=" * 40)
    print(render(grid, propagate(grid)))


def generator_demo(seed: int = 7) -> None:
    """Generate one level per loop strategy and solve it move by move."""
    for strategy in LoopStrategy:
        rng = random.Random(seed)
        level = generate(5, Difficulty.MEDIUM, rng, strategy)

        print("=" * 40)
        print(f"{strategy.value} loop, scrambled:")
        print("=" * 40)
        print(render_level(level))
        print()

        moves = 0
        for pos, turns in level.moves_to_solve().items():
            for _ in range(turns):
                level = rotate_cell(level, pos)
                moves += 1

        print(f"After {moves} moves:")
        print(render_level(level))
        print()


if __name__ == "__main__":
    circuit_demo()
    print()
    bridge_demo()
    print()
    generator_demo()
