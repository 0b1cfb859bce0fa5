"""Snake-path grid placement.

Each word gets its own square grid. The word is laid along a self-avoiding
orthogonal path ("snake") and every other cell receives a noise letter.

Search strategy: every attempt shuffles all start cells and, for each one,
grows a random walk without backtracking. The first walk that reaches the
word length wins. A dead-ended walk simply moves on to the next start cell;
the attempt budget is spent once per full sweep of start cells.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Set, Tuple

from ..core.constants import (
    ALPHABETS,
    BASE_LANGUAGE,
    DEFAULT_GRID_SIZE,
    DEFAULT_MAX_ATTEMPTS,
    ENGLISH_ALPHABET,
    ORTHOGONAL_STEPS,
    Bounds,
)
from ..core.exceptions import PlacementExhaustedError, WordTooLongError
from ..core.models import Coord, GridPuzzle
from ..data.normalization import display_upper
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..data.catalog import WordCatalog


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    """Configuration values driving grid generation."""

    size: int = DEFAULT_GRID_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: Optional[int] = None
    alphabet: Optional[str] = None

    def alphabet_for(self, language: str) -> str:
        if self.alphabet:
            return self.alphabet
        return ALPHABETS.get(language, ENGLISH_ALPHABET)


def placement_letters(word: str, language: str = BASE_LANGUAGE) -> str:
    """Uppercase letters of ``word`` as they will appear in the grid."""

    return "".join(char for char in display_upper(word, language) if char.isalpha())


class GridGenerator:
    """Builds :class:`GridPuzzle` instances for single words."""

    def __init__(self, config: Optional[GeneratorConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or GeneratorConfig()
        if self.config.size < 1:
            raise ValueError("Grid size must be positive")
        if self.config.max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self.rng = rng or random.Random(self.config.seed)

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def generate(self, word: str, size: Optional[int] = None, language: str = BASE_LANGUAGE) -> GridPuzzle:
        """Place ``word`` in a ``size`` x ``size`` grid.

        Raises :class:`WordTooLongError` without searching when the word
        cannot fit, and :class:`PlacementExhaustedError` once the attempt
        budget is spent.
        """

        size = self.config.size if size is None else size
        if size < 1:
            raise ValueError("Grid size must be positive")
        letters = placement_letters(word, language)
        if not letters:
            raise ValueError(f"Word {word!r} has no placeable letters")
        bounds = Bounds(size)
        if len(letters) > bounds.cell_count:
            raise WordTooLongError(letters, size)

        path = self._find_path(letters, bounds)
        cells = self._fill(letters, path, bounds, self.config.alphabet_for(language))
        LOGGER.debug("Placed %s in %dx%d grid: %s", letters, size, size, path)
        return GridPuzzle(
            target_word=letters,
            size=size,
            cells=cells,
            path=tuple(path),
            language=language,
        )

    def try_generate(
        self, word: str, size: Optional[int] = None, language: str = BASE_LANGUAGE
    ) -> Optional[GridPuzzle]:
        """Like :meth:`generate` but returns ``None`` when placement is exhausted.

        :class:`WordTooLongError` still propagates: it means the catalog and
        grid size disagree, which retrying cannot fix.
        """

        try:
            return self.generate(word, size=size, language=language)
        except PlacementExhaustedError as exc:
            LOGGER.warning("Skipping word: %s", exc)
            return None

    def generate_all(
        self, catalog: WordCatalog, language: str, size: Optional[int] = None
    ) -> Dict[str, GridPuzzle]:
        """Pre-generate grids for every word of ``language``, keyed by surface."""

        grids: Dict[str, GridPuzzle] = {}
        skipped: List[str] = []
        for theme_id in catalog.theme_ids:
            for surface in catalog.words(theme_id, language):
                if surface in grids:
                    continue
                try:
                    puzzle = self.try_generate(surface, size=size, language=language)
                except WordTooLongError as exc:
                    LOGGER.error("Catalog/grid size mismatch: %s", exc)
                    skipped.append(surface)
                    continue
                if puzzle is None:
                    skipped.append(surface)
                    continue
                grids[surface] = puzzle
        LOGGER.info(
            "Generated %d %s grids (%d skipped)", len(grids), language, len(skipped)
        )
        return grids

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _find_path(self, letters: str, bounds: Bounds) -> List[Coord]:
        starts: List[Coord] = [(x, y) for y in range(bounds.size) for x in range(bounds.size)]
        attempts_left = self.config.max_attempts
        while attempts_left > 0:
            self.rng.shuffle(starts)
            for start in starts:
                path = self._grow_path(start, len(letters), bounds)
                if path is not None:
                    return path
            attempts_left -= 1
            LOGGER.debug(
                "No snake for %s this sweep (%d attempts left)", letters, attempts_left
            )
        raise PlacementExhaustedError(letters, bounds.size, self.config.max_attempts)

    def _grow_path(self, start: Coord, length: int, bounds: Bounds) -> Optional[List[Coord]]:
        path = [start]
        visited: Set[Coord] = {start}
        x, y = start
        steps = list(ORTHOGONAL_STEPS)
        while len(path) < length:
            self.rng.shuffle(steps)
            for dx, dy in steps:
                nx, ny = x + dx, y + dy
                if bounds.contains(nx, ny) and (nx, ny) not in visited:
                    break
            else:
                return None
            x, y = nx, ny
            path.append((x, y))
            visited.add((x, y))
        return path

    def _fill(
        self, letters: str, path: Sequence[Coord], bounds: Bounds, alphabet: str
    ) -> Tuple[Tuple[str, ...], ...]:
        rows: List[List[Optional[str]]] = [[None] * bounds.size for _ in range(bounds.size)]
        for letter, (x, y) in zip(letters, path):
            rows[y][x] = letter
        return tuple(
            tuple(cell if cell is not None else self.rng.choice(alphabet) for cell in row)
            for row in rows
        )
