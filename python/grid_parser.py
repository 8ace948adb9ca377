"""
Grid parsing utilities for circuit puzzles.

Provides two parsing formats:
1. Standard format with spaces and explicit rotations/markers
2. Concise format with one box-drawing glyph per cell
"""

from __future__ import annotations

from circuit_types import Blocker, Cell, CellPosition, Direction, Grid, Piece, Shape
from connections import connections_of

__all__ = ["GLYPHS", "glyph_for", "parse_grid", "parse_grid_concise"]

_T, _R, _B, _L = Direction.TOP, Direction.RIGHT, Direction.BOTTOM, Direction.LEFT

# Box-drawing glyph for every set of open directions
GLYPHS: dict[frozenset[Direction], str] = {
    frozenset(): " ",
    frozenset({_T}): "╵",
    frozenset({_R}): "╶",
    frozenset({_B}): "╷",
    frozenset({_L}): "╴",
    frozenset({_T, _R}): "└",
    frozenset({_R, _B}): "┌",
    frozenset({_B, _L}): "┐",
    frozenset({_L, _T}): "┘",
    frozenset({_T, _B}): "│",
    frozenset({_R, _L}): "─",
    frozenset({_T, _R, _L}): "┴",
    frozenset({_T, _R, _B}): "├",
    frozenset({_R, _B, _L}): "┬",
    frozenset({_T, _B, _L}): "┤",
    frozenset({_T, _R, _B, _L}): "┼",
}

# Glyph -> (shape, rotation) for every canonical piece orientation
_CONCISE_PIECES: dict[str, tuple[Shape, int]] = {
    GLYPHS[connections_of(shape, rotation)]: (shape, rotation)
    for shape in (Shape.X, Shape.T, Shape.I, Shape.L)
    for rotation in (270, 180, 90, 0)
}

_FLAG_CHARS = "*@!"


def glyph_for(directions: frozenset[Direction]) -> str:
    return GLYPHS[directions]


def _parse_token(token: str, row_idx: int, col_idx: int, row_str: str) -> Cell:
    """Parse a single standard-format cell token."""
    if token in ("", "_"):
        return Piece(Shape.EMPTY)
    if token == "#":
        return Blocker()

    def invalid(reason: str) -> ValueError:
        return ValueError(
            f"Invalid cell string: '{token}'\n"
            f"  Row {row_idx}: \"{row_str}\"\n"
            f"  Position: column {col_idx}\n"
            f"  {reason}\n"
            f"  Valid formats:\n"
            f"    - Shape letter (L, I, T, X) with optional rotation in degrees (e.g., 'L', 'T180')\n"
            f"    - Optional flags after the rotation: '*' source, '@' bulb, '!' fixed (e.g., 'L90*')\n"
            f"    - '_': Empty cell\n"
            f"    - '#': Blocker"
        )

    try:
        shape = Shape(token[0])
    except ValueError:
        raise invalid(f"Unknown shape '{token[0]}'") from None
    if shape is Shape.EMPTY:
        raise invalid("Use '_' for empty cells")

    idx = 1
    while idx < len(token) and token[idx].isdigit():
        idx += 1
    digits, flags = token[1:idx], token[idx:]

    rotation = int(digits) if digits else 0
    if rotation % 90 != 0 or rotation >= 360:
        raise invalid(f"Rotation {rotation} is not one of 0, 90, 180, 270")

    unknown = [ch for ch in flags if ch not in _FLAG_CHARS]
    if unknown:
        raise invalid(f"Unknown flag '{unknown[0]}'")
    if "*" in flags and "@" in flags:
        raise invalid("A cell cannot be both source and bulb")

    return Piece(
        shape,
        rotation,
        is_source="*" in flags,
        is_bulb="@" in flags,
        fixed="!" in flags,
    )


def parse_grid(definition: str) -> Grid:
    """
    Parse a grid from a compact string format.

    Format:
    - Rows separated by |
    - Cells separated by spaces
    - Cell token is a shape letter, an optional rotation, then optional flags:
      * "L", "I", "T", "X": piece at rotation 0
      * "L90", "T270": piece at the given rotation in degrees
      * "*" source, "@" bulb, "!" fixed (e.g., "L90*", "L270@", "I!")
      * Underscore (_) or empty string (multiple adjacent spaces): Empty cell
      * Hash (#): Blocker

    Example:
        "L90* I90 L180|I _ I|L0 I90 L270@"
        Creates the 3x3 perimeter loop from a source at (0, 0) to a bulb at (2, 2).

    Args:
        definition: The grid definition

    Returns:
        The parsed Grid

    Raises:
        ValueError: on invalid tokens or rows of different lengths
    """
    row_strings = definition.strip().split("|")
    rows: list[tuple[Cell, ...]] = []

    for row_idx, row_str in enumerate(row_strings):
        cell_strings = row_str.strip().split(" ")
        rows.append(
            tuple(
                _parse_token(token, row_idx, col_idx, row_str)
                for col_idx, token in enumerate(cell_strings)
            )
        )

    cols = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise ValueError(error_msg)

    return Grid(tuple(rows))


def parse_grid_concise(
    definition: str,
    source: CellPosition | None = None,
    bulb: CellPosition | None = None,
) -> Grid:
    """
    Parse a grid drawn with one box-drawing glyph per cell.

    Format:
    - Rows separated by | or newlines (surrounding whitespace is stripped)
    - Cell glyphs:
      * └ ┌ ┐ ┘: L piece at 0, 90, 180, 270
      * │ ─: I piece at 0, 90
      * ┴ ├ ┬ ┤: T piece at 0, 90, 180, 270
      * ┼: X piece
      * Dot (.) or space: Empty cell
      * Hash (#): Blocker
    - Short rows are padded with Empty cells

    Example:
        parse_grid_concise("┌─┐|│.│|└─┘", source=CellPosition(0, 0), bulb=CellPosition(2, 2))

    Args:
        definition: The drawn grid
        source: Position to mark as the source
        bulb: Position to mark as the bulb

    Returns:
        The parsed Grid

    Raises:
        ValueError: on unknown glyphs or a marker outside the grid
    """
    lines = definition.strip().replace("\n", "|").split("|")
    row_strings = [line.strip() for line in lines if line.strip()]
    rows: list[list[Cell]] = []

    for row_idx, row_str in enumerate(row_strings):
        cells: list[Cell] = []
        for col_idx, char in enumerate(row_str):
            if char in (".", " "):
                cells.append(Piece(Shape.EMPTY))
            elif char == "#":
                cells.append(Blocker())
            elif char in _CONCISE_PIECES:
                shape, rotation = _CONCISE_PIECES[char]
                cells.append(Piece(shape, rotation))
            else:
                raise ValueError(
                    f"Invalid character '{char}'\n"
                    f"  Row {row_idx}, column {col_idx}\n"
                    f"  Valid characters: {''.join(_CONCISE_PIECES)}, dot (.), hash (#)"
                )
        rows.append(cells)

    max_cols = max((len(row) for row in rows), default=0)
    for row in rows:
        row.extend(Piece(Shape.EMPTY) for _ in range(max_cols - len(row)))

    for marker, name in ((source, "source"), (bulb, "bulb")):
        if marker is None:
            continue
        if not (0 <= marker.row < len(rows) and 0 <= marker.col < max_cols):
            raise ValueError(
                f"The {name} at ({marker.row}, {marker.col}) is outside the "
                f"{len(rows)}x{max_cols} grid"
            )
        cell = rows[marker.row][marker.col]
        if not isinstance(cell, Piece):
            raise ValueError(f"The {name} at ({marker.row}, {marker.col}) must be a piece")
        rows[marker.row][marker.col] = Piece(
            cell.shape,
            cell.rotation,
            is_source=name == "source",
            is_bulb=name == "bulb",
        )

    return Grid(tuple(tuple(row) for row in rows))
