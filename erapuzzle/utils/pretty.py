"""Pretty-print helpers for puzzle grids and progress."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..core.models import GridPuzzle
    from ..data.catalog import WordCatalog
    from ..engine.tracker import SolveStateTracker


def format_puzzle(puzzle: GridPuzzle, *, highlight: bool = False) -> str:
    """Render the grid; with ``highlight`` the path letters are lowercased."""

    path = puzzle.path_cells() if highlight else frozenset()
    header_cells = [f"{x:>2}" for x in range(puzzle.size)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * puzzle.size - 1))
    for y in range(puzzle.size):
        row_cells = []
        for x in range(puzzle.size):
            letter = puzzle.letter_at(x, y)
            row_cells.append(letter.lower() if (x, y) in path else letter)
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{y:>2} | {row_render}")
    return "\n".join(lines)


def pretty_print_puzzle(
    puzzle: GridPuzzle, *, label: Optional[str] = None, highlight: bool = False, stream=None
) -> None:
    """Print the puzzle grid in a human-friendly format."""

    stream = stream or sys.stdout
    print(label or f"{puzzle.target_word} ({len(puzzle.path)} letters)", file=stream)
    print(format_puzzle(puzzle, highlight=highlight), file=stream)


def print_progress(
    catalog: WordCatalog,
    tracker: SolveStateTracker,
    language: str = "en",
    *,
    stream=None,
) -> None:
    """Print solved/total per theme plus the global solved count."""

    stream = stream or sys.stdout
    print("--- Progress ---", file=stream)
    for theme in catalog.themes():
        total = theme.word_count()
        solved = tracker.solved_count(theme.id)
        pct = (solved / total * 100) if total else 0.0
        name = theme.display_name(language)
        print(f"  {name:<28} {solved:>3}/{total:<3} ({pct:5.1f}%)", file=stream)
    print(f"  Solved overall: {len(tracker.all_solved_canonical())}/{len(catalog)}", file=stream)
