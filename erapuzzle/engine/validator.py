"""Deterministic integrity checks for generated or reloaded puzzles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set

from ..core.constants import Bounds
from ..core.exceptions import ValidationError
from ..core.models import Coord, GridPuzzle
from ..data.normalization import is_grid_letter
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Runs deterministic validation over a finished grid."""

    def validate(self, puzzle: GridPuzzle) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_shape(puzzle)
            self._check_letters(puzzle)
            self._check_path(puzzle)
            self._check_spelling(puzzle)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed for %s: %s", puzzle.target_word, exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_shape(self, puzzle: GridPuzzle) -> None:
        if len(puzzle.cells) != puzzle.size:
            raise ValidationError(f"Expected {puzzle.size} rows, found {len(puzzle.cells)}")
        for y, row in enumerate(puzzle.cells):
            if len(row) != puzzle.size:
                raise ValidationError(f"Row {y} has {len(row)} cells, expected {puzzle.size}")

    def _check_letters(self, puzzle: GridPuzzle) -> None:
        for y, row in enumerate(puzzle.cells):
            for x, letter in enumerate(row):
                if not is_grid_letter(letter):
                    raise ValidationError(f"Invalid letter {letter!r} at ({x},{y})")

    def _check_path(self, puzzle: GridPuzzle) -> None:
        if len(puzzle.path) != len(puzzle.target_word):
            raise ValidationError(
                f"Path has {len(puzzle.path)} cells for a {len(puzzle.target_word)}-letter word"
            )
        bounds = Bounds(puzzle.size)
        seen: Set[Coord] = set()
        previous = None
        for x, y in puzzle.path:
            if not bounds.contains(x, y):
                raise ValidationError(f"Path cell ({x},{y}) outside grid")
            if (x, y) in seen:
                raise ValidationError(f"Path revisits ({x},{y})")
            if previous is not None:
                px, py = previous
                if abs(px - x) + abs(py - y) != 1:
                    raise ValidationError(f"Path jumps from ({px},{py}) to ({x},{y})")
            seen.add((x, y))
            previous = (x, y)

    def _check_spelling(self, puzzle: GridPuzzle) -> None:
        spelled = puzzle.path_word()
        if spelled != puzzle.target_word:
            raise ValidationError(f"Path spells {spelled!r}, expected {puzzle.target_word!r}")
