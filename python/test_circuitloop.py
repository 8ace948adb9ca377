"""Tests for the circuitloop facade."""

import random
from pathlib import Path

import pytest

import circuitloop
from circuitloop import CellPosition, Difficulty, generate, rotate_cell


class TestFacade:
    """The public API works end to end from one import."""

    def test_exports_resolve(self) -> None:
        for name in circuitloop.__all__:
            assert hasattr(circuitloop, name), name

    def test_play_a_level(self) -> None:
        """Generate, make a move, then solve from the hints."""
        level = generate(4, Difficulty.EASY, random.Random(2))
        moved = rotate_cell(level, CellPosition(0, 1))
        assert moved.grid != level.grid
        assert moved.with_solution_applied().is_solved


class TestPackaging:
    """Only the library modules are installed."""

    def test_demo_scripts_not_installed(self) -> None:
        tomllib = pytest.importorskip("tomllib")
        root = Path(__file__).resolve().parent.parent
        with open(root / "pyproject.toml", "rb") as f:
            modules = tomllib.load(f)["tool"]["setuptools"]["py-modules"]

        assert "demo" not in modules
        assert "interactive_demo" not in modules
        for name in modules:
            assert (root / "python" / f"{name}.py").is_file(), name
