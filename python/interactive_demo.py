"""
Interactive demo for the circuit loop puzzle.
Display a generated puzzle and rotate pieces with keyboard commands.
"""

import logging
import random
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_level
from circuitloop import (
    DIFFICULTY_SETTINGS,
    CellPosition,
    Difficulty,
    Level,
    generate,
    rotate_cell,
)


class InteractiveDemo:
    """Interactive demo for rotating pieces until the bulb lights up."""

    def __init__(self, size: int, difficulty: Difficulty, seed: int | None = None) -> None:
        self.size = size
        self.difficulty = difficulty
        self.rng = random.Random(seed)
        self.level = generate(size, difficulty, self.rng)
        self.original_level = self.level  # Keep the unplayed puzzle for reset
        self.cursor = CellPosition(0, 0)
        self.moves = 0
        self.console = Console()
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with grid and status."""
        grid_text = render_level(self.level, highlight_pos=self.cursor)

        status = Text()
        status.append("Cursor: ", style="bold")
        status.append(f"[{self.cursor.row}, {self.cursor.col}]   ")
        status.append("Moves: ", style="bold")
        status.append(f"{self.moves}\n\n")

        # Convert ANSI-colored grid text to Rich Text properly
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move cursor\n")
        status.append("  Space   - Rotate piece\n")
        status.append("  H       - Show solution\n")
        status.append("  N       - New puzzle\n")
        status.append("  R       - Reset puzzle\n")
        status.append("  Q       - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        border = "green" if self.level.is_solved else "yellow"
        return Panel(status, title="Circuit Loop", border_style=border, width=60)

    def move_cursor(self, d_row: int, d_col: int) -> None:
        row = min(max(self.cursor.row + d_row, 0), self.level.rows - 1)
        col = min(max(self.cursor.col + d_col, 0), self.level.cols - 1)
        self.cursor = CellPosition(row, col)

    def rotate(self) -> None:
        """Rotate the piece under the cursor."""
        rotated = rotate_cell(self.level, self.cursor)
        if rotated is self.level:
            self.status_message = "✗ That piece is fixed"
            return

        self.level = rotated
        self.moves += 1
        if self.level.is_solved:
            self.status_message = f"✓ Circuit closed in {self.moves} moves!"
        else:
            self.status_message = "Rotated"

    def show_solution(self) -> None:
        self.level = self.level.with_solution_applied()
        self.status_message = "Solution applied"

    def new_puzzle(self) -> None:
        self.level = generate(self.size, self.difficulty, self.rng)
        self.original_level = self.level
        self.moves = 0
        self.status_message = "New puzzle"

    def reset(self) -> None:
        """Reset the puzzle to its scrambled starting state."""
        self.level = self.original_level
        self.moves = 0
        self.status_message = "Puzzle reset"

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()

                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key.lower() == 'w':
                        self.move_cursor(-1, 0)
                    elif key.lower() == 's':
                        self.move_cursor(1, 0)
                    elif key.lower() == 'a':
                        self.move_cursor(0, -1)
                    elif key.lower() == 'd':
                        self.move_cursor(0, 1)
                    elif key in (' ', readchar.key.ENTER):
                        self.rotate()
                    elif key.lower() == 'h':
                        self.show_solution()
                    elif key.lower() == 'n':
                        self.new_puzzle()
                    elif key.lower() == 'r':
                        self.reset()
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def print_level(level: Level) -> None:
    print(render_level(level))
    print()
    print("Solution:")
    print(render_level(level.with_solution_applied()))


if __name__ == "__main__":
    args = [arg for arg in sys.argv[1:] if arg != 'sublime']
    difficulty = Difficulty(args[0]) if args else Difficulty.MEDIUM
    size = int(args[1]) if len(args) > 1 else DIFFICULTY_SETTINGS[difficulty].grid_size

    if 'sublime' in sys.argv[1:]:
        # Running from IDE - just render a puzzle and its solution
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

        print('Running from IDE - rendering a generated puzzle')
        print()
        print_level(generate(size, difficulty))
    else:
        InteractiveDemo(size, difficulty).run()
