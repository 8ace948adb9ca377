"""
Tests for power propagation and solved-state evaluation.
"""

from dataclasses import replace

from circuit_types import (
    Blocker,
    Bridge,
    CellPosition,
    Direction,
    Grid,
    Piece,
    Shape,
    Switch,
)
from grid_parser import parse_grid
from power import (
    find_bulb,
    find_sources,
    is_bulb_powered,
    is_solved,
    powered_channels,
    propagate,
    source_connection_count,
)

TOP, RIGHT, BOTTOM, LEFT = Direction.TOP, Direction.RIGHT, Direction.BOTTOM, Direction.LEFT

# 3x3 perimeter loop from a source at (0, 0) through a bulb at (2, 2)
CLOSED_LOOP = "L90* I90 L180|I _ I|L0 I90 L270@"


def powered_positions(grid: Grid) -> set[tuple[int, int]]:
    powered = propagate(grid)
    return {
        (r, c) for r in range(grid.rows) for c in range(grid.cols) if powered[r][c]
    }


# =============================================================================
# Test Propagation
# =============================================================================


class TestPropagate:
    """Tests for breadth-first power propagation."""

    def test_closed_loop_powers_perimeter(self) -> None:
        """Every loop cell is powered; the empty centre is not."""
        grid = parse_grid(CLOSED_LOOP)
        assert powered_positions(grid) == {
            (0, 0), (0, 1), (0, 2),
            (1, 0), (1, 2),
            (2, 0), (2, 1), (2, 2),
        }

    def test_matrix_dimensions(self) -> None:
        """The matrix matches the grid's shape."""
        grid = parse_grid("L90* I90 L180 _|I _ I _")
        powered = propagate(grid)
        assert len(powered) == 2
        assert all(len(row) == 4 for row in powered)

    def test_no_source_is_all_dark(self) -> None:
        """Without a source nothing is powered."""
        grid = parse_grid("L90 I90 L180|I _ I|L0 I90 L270@")
        powered = propagate(grid)
        assert not any(any(row) for row in powered)

    def test_source_powered_even_when_isolated(self) -> None:
        """A source is always powered, connections or not."""
        grid = parse_grid("_ _|_ X*")
        assert powered_positions(grid) == {(1, 1)}

    def test_one_sided_stub_stops_current(self) -> None:
        """Current needs both sides to open."""
        grid = parse_grid("I90* I0 I90")
        assert powered_positions(grid) == {(0, 0)}

    def test_out_of_bounds_connections_are_ignored(self) -> None:
        """Connections pointing off the grid are skipped, not errors."""
        grid = parse_grid("X* X|X X")
        assert powered_positions(grid) == {(0, 0), (0, 1), (1, 0), (1, 1)}

    def test_multiple_sources(self) -> None:
        """All sources seed the search at once."""
        grid = parse_grid("I90* I90 _ I90* I90")
        assert powered_positions(grid) == {(0, 0), (0, 1), (0, 3), (0, 4)}

    def test_each_cell_visited_once(self) -> None:
        """The search never holds more nodes than there are cells."""
        grid = parse_grid("X* X X|X X X|X X X")
        nodes = powered_channels(grid)
        assert len(nodes) == 9
        assert len({pos for pos, _ in nodes}) == 9

    def test_blocker_stops_current(self) -> None:
        grid = parse_grid("I90* # I90")
        assert powered_positions(grid) == {(0, 0)}

    def test_deterministic(self) -> None:
        grid = parse_grid(CLOSED_LOOP)
        assert propagate(grid) == propagate(grid)


class TestVariantPropagation:
    """Propagation through switches and bridges."""

    def test_bridge_keeps_paths_apart(self) -> None:
        """Current entering the vertical path never leaks onto the horizontal one."""
        vertical = frozenset({TOP, BOTTOM})
        horizontal = frozenset({LEFT, RIGHT})
        grid = Grid(
            (
                (Piece(Shape.EMPTY), Piece(Shape.I, 0, is_source=True), Piece(Shape.EMPTY)),
                (Piece(Shape.I, 90), Bridge((vertical, horizontal)), Piece(Shape.I, 90)),
                (Piece(Shape.EMPTY), Piece(Shape.I), Piece(Shape.EMPTY)),
            )
        )
        nodes = powered_channels(grid)
        assert (CellPosition(1, 1), 0) in nodes
        assert (CellPosition(1, 1), 1) not in nodes
        assert powered_positions(grid) == {(0, 1), (1, 1), (2, 1)}

    def test_bridge_carries_both_currents(self) -> None:
        """Two sources can each use one bridge path."""
        vertical = frozenset({TOP, BOTTOM})
        horizontal = frozenset({LEFT, RIGHT})
        grid = Grid(
            (
                (Piece(Shape.EMPTY), Piece(Shape.I, 0, is_source=True), Piece(Shape.EMPTY)),
                (Piece(Shape.I, 90, is_source=True), Bridge((vertical, horizontal)), Piece(Shape.I, 90)),
                (Piece(Shape.EMPTY), Piece(Shape.I), Piece(Shape.EMPTY)),
            )
        )
        nodes = powered_channels(grid)
        assert (CellPosition(1, 1), 0) in nodes
        assert (CellPosition(1, 1), 1) in nodes
        assert powered_positions(grid) == {(0, 1), (1, 0), (1, 1), (1, 2), (2, 1)}

    def test_switch_state_selects_connections(self) -> None:
        """Toggling a switch opens or closes the path."""
        switch = Switch((frozenset({LEFT, RIGHT}), frozenset({TOP, BOTTOM})))
        grid = Grid(((Piece(Shape.I, 90, is_source=True), switch, Piece(Shape.I, 90)),))
        assert powered_positions(grid) == {(0, 0), (0, 1), (0, 2)}

        toggled = grid.replace(CellPosition(0, 1), replace(switch, state=1))
        assert powered_positions(toggled) == {(0, 0)}


# =============================================================================
# Test Solved Evaluation
# =============================================================================


class TestIsSolved:
    """Tests for the closed-circuit rule."""

    def test_closed_loop_is_solved(self) -> None:
        grid = parse_grid(CLOSED_LOOP)
        assert is_solved(grid, propagate(grid))

    def test_dead_end_branch_is_not_solved(self) -> None:
        """A bulb with a single powered link does not close the circuit."""
        grid = parse_grid(CLOSED_LOOP).replace(CellPosition(1, 2), Piece(Shape.I, 90))
        powered = propagate(grid)
        assert powered[2][2]
        assert is_bulb_powered(grid, powered)
        assert not is_solved(grid, powered)

    def test_second_link_closes_circuit(self) -> None:
        """Restoring the second path back to the source solves it."""
        broken = parse_grid(CLOSED_LOOP).replace(CellPosition(1, 2), Piece(Shape.I, 90))
        fixed = broken.replace(CellPosition(1, 2), Piece(Shape.I, 0))
        assert not is_solved(broken, propagate(broken))
        assert is_solved(fixed, propagate(fixed))

    def test_branch_behind_bulb_is_not_a_circuit(self) -> None:
        """A branch powered only through the bulb is no way back to the source."""
        # Top straight turned upright: current reaches the bulb up the left
        # side, then runs on into the dead-end right column.
        grid = parse_grid(CLOSED_LOOP).replace(CellPosition(0, 1), Piece(Shape.I, 0))
        powered = propagate(grid)
        assert powered[1][2]
        assert powered[0][2]
        assert not is_solved(grid, powered)

    def test_unpowered_bulb(self) -> None:
        """An unpowered bulb short-circuits to False."""
        grid = parse_grid("L90* I0 L180|I _ I|L0 I0 L270@")
        powered = propagate(grid)
        assert not powered[2][2]
        assert not is_solved(grid, powered)

    def test_no_bulb(self) -> None:
        grid = parse_grid("L90* I90 L180|I _ I|L0 I90 L270")
        assert not is_solved(grid, propagate(grid))

    def test_powered_neighbour_must_open_back(self) -> None:
        """A powered neighbour facing away does not count as a link."""
        # Bulb at (1, 1) joined to the source on the left only; the powered
        # corner above it faces left and up, away from the bulb.
        grid = parse_grid("X* L270 _|X L270@ _")
        powered = propagate(grid)
        assert powered[0][1]
        assert powered[1][1]
        assert not is_solved(grid, powered)

    def test_bulb_in_small_cycle(self) -> None:
        """A 2x2 ring is the smallest closed circuit."""
        grid = parse_grid("L90* L180|L0 L270@")
        assert is_solved(grid, propagate(grid))

    def test_bulb_with_single_connection_shape(self) -> None:
        """A bulb that can only ever have one link is never solved."""
        grid = parse_grid("X* X|X _")
        bulb_cell = Piece(Shape.EMPTY, is_bulb=True)
        grid = grid.replace(CellPosition(1, 1), bulb_cell)
        assert not is_solved(grid, propagate(grid))


class TestLookups:
    """Tests for source and bulb lookups."""

    def test_find_sources_and_bulb(self) -> None:
        grid = parse_grid(CLOSED_LOOP)
        assert find_sources(grid) == [CellPosition(0, 0)]
        assert find_bulb(grid) == CellPosition(2, 2)

    def test_missing_markers(self) -> None:
        grid = parse_grid("L I|T X")
        assert find_sources(grid) == []
        assert find_bulb(grid) is None

    def test_source_connection_count(self) -> None:
        """Powered links at the source."""
        closed = parse_grid(CLOSED_LOOP)
        assert source_connection_count(closed, propagate(closed)) == 2

        one_side = closed.replace(CellPosition(1, 0), Piece(Shape.I, 90))
        assert source_connection_count(one_side, propagate(one_side)) == 1

    def test_source_connection_count_without_source(self) -> None:
        grid = parse_grid("L I|T X")
        assert source_connection_count(grid, propagate(grid)) == 0

    def test_blocker_has_no_markers(self) -> None:
        grid = Grid(((Blocker(), Piece(Shape.X, is_source=True)),))
        assert find_sources(grid) == [CellPosition(0, 1)]
