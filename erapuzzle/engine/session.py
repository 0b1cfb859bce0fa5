"""Session glue: one player working through one era at a time.

Every collaborator is injected. The session owns only navigation (current
era, language and word), the letters the player is currently dragging over
and the grid cache; solve state, points and unlocks live in their own
components and are reached through their public interfaces.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..core.constants import BASE_LANGUAGE, POINTS_PER_WORD, SENTENCE_BLANK, HintLevel
from ..core.exceptions import PuzzleError, ThemeLockedError
from ..core.models import Coord, GridPuzzle, WordRecord
from ..data.catalog import WordCatalog
from ..data.normalization import match_key
from ..utils.logger import get_logger
from .economy import HintEconomy, PointsWallet, ThemeUnlocks
from .generator import GeneratorConfig, GridGenerator
from .resolver import TranslationResolver
from .save_store import GridKey, SaveState, grid_key
from .tracker import SolveStateTracker


LOGGER = get_logger(__name__)

MISSING_SENTENCE = {
    "en": "sentence not found",
    "tr": "için cümle bulunamadı",
}


@dataclass(frozen=True)
class GuessResult:
    """Outcome of one submitted word."""

    correct: bool
    guess: str
    canonical: str
    theme: str
    newly_solved: bool = False
    points_awarded: int = 0


@dataclass(frozen=True)
class HintView:
    """What the purchased hints reveal for the current word."""

    level: int
    first_letter: Optional[str] = None
    first_cell: Optional[Coord] = None
    mask: Optional[str] = None


class PuzzleSession:
    """Navigates an era's words, scores guesses and sells hints."""

    def __init__(
        self,
        catalog: WordCatalog,
        resolver: TranslationResolver,
        generator: GridGenerator,
        tracker: SolveStateTracker,
        economy: HintEconomy,
        unlocks: ThemeUnlocks,
        grids: Optional[Dict[GridKey, GridPuzzle]] = None,
        language: str = BASE_LANGUAGE,
        points_per_word: int = POINTS_PER_WORD,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver
        self.generator = generator
        self.tracker = tracker
        self.economy = economy
        self.unlocks = unlocks
        self.points_per_word = points_per_word
        self.rng = rng or random.Random()
        self._grids: Dict[GridKey, GridPuzzle] = dict(grids or {})
        self._language = BASE_LANGUAGE
        self._theme: Optional[str] = None
        self._index = 0
        self._selection: List[Coord] = []
        self.set_language(language)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    @property
    def wallet(self) -> PointsWallet:
        return self.economy.wallet

    @property
    def language(self) -> str:
        return self._language

    @property
    def theme(self) -> Optional[str]:
        return self._theme

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_word(self) -> str:
        return self.current_record().surface

    def current_record(self) -> WordRecord:
        theme = self._require_theme()
        record = self.catalog.record(theme, self._language, self._index)
        if record is None:
            raise PuzzleError(f"Theme {theme!r} has no {self._language} word #{self._index}")
        return record

    def current_canonical(self) -> str:
        return self.current_record().canonical

    def select_theme(self, theme: str) -> str:
        """Enter ``theme`` at its first unsolved word; returns that word."""

        if not self.catalog.has_theme(theme):
            raise KeyError(f"Unknown theme {theme!r}")
        if not self.unlocks.is_unlocked(theme):
            raise ThemeLockedError(f"Theme {theme!r} is locked")
        self._theme = theme
        solved = self.tracker.solved_indices_for_theme(theme)
        total = self.catalog.theme(theme).word_count()
        self._index = next((i for i in range(total) if i not in solved), 0)
        self._selection.clear()
        LOGGER.info("Playing %s from word #%d", theme, self._index)
        return self.current_word

    def set_language(self, language: str) -> None:
        if language not in self.catalog.languages:
            raise ValueError(
                f"Language {language!r} not in catalog ({', '.join(self.catalog.languages)})"
            )
        # Word lists are position-aligned, so the index survives the switch.
        self._language = language
        self._selection.clear()

    def words(self) -> Tuple[str, ...]:
        return self.catalog.words(self._require_theme(), self._language)

    def goto(self, index: int) -> str:
        count = len(self.words())
        if not 0 <= index < count:
            raise IndexError(f"Word index {index} out of range (0..{count - 1})")
        self._index = index
        self._selection.clear()
        return self.current_word

    def next_word(self) -> str:
        return self.goto((self._index + 1) % len(self.words()))

    def previous_word(self) -> str:
        return self.goto((self._index - 1) % len(self.words()))

    def _require_theme(self) -> str:
        if self._theme is None:
            raise PuzzleError("No theme selected")
        return self._theme

    # ------------------------------------------------------------------
    # Grids
    # ------------------------------------------------------------------
    @property
    def grids(self) -> Dict[GridKey, GridPuzzle]:
        return dict(self._grids)

    def puzzle_for(self, surface: Optional[str] = None) -> Optional[GridPuzzle]:
        """Return the cached grid for ``surface``, generating it on first use.

        ``None`` means placement was exhausted; the word is skipped for now.
        """

        surface = surface or self.current_word
        key = grid_key(self._language, surface)
        puzzle = self._grids.get(key)
        if puzzle is None:
            puzzle = self.generator.try_generate(surface, language=self._language)
            if puzzle is None:
                return None
            self._grids[key] = puzzle
            LOGGER.info("Generated grid for %s (%s)", surface, self._language)
        return puzzle

    def is_highlighted(self, surface: Optional[str] = None) -> bool:
        surface = surface or self.current_word
        return self.tracker.is_solved(self._require_theme(), self.resolver.canonical_of(surface))

    def highlighted_cells(self, surface: Optional[str] = None) -> FrozenSet[Coord]:
        surface = surface or self.current_word
        if not self.is_highlighted(surface):
            return frozenset()
        puzzle = self.puzzle_for(surface)
        return puzzle.path_cells() if puzzle is not None else frozenset()

    def clear_grids(self) -> None:
        LOGGER.info("Clearing %d cached grids", len(self._grids))
        self._grids.clear()
        self._selection.clear()

    # ------------------------------------------------------------------
    # Selection and guesses
    # ------------------------------------------------------------------
    @property
    def selection(self) -> Tuple[Coord, ...]:
        return tuple(self._selection)

    def select_cell(self, x: int, y: int) -> bool:
        """Extend the drag by ``(x, y)``; returns ``False`` if the cell is not a legal next step."""

        puzzle = self.puzzle_for()
        if puzzle is None or not (0 <= x < puzzle.size and 0 <= y < puzzle.size):
            return False
        if (x, y) in self._selection:
            return False
        if self._selection:
            px, py = self._selection[-1]
            if abs(px - x) + abs(py - y) != 1:
                return False
        self._selection.append((x, y))
        return True

    def selected_letters(self) -> str:
        puzzle = self.puzzle_for()
        if puzzle is None:
            return ""
        return "".join(puzzle.letter_at(x, y) for x, y in self._selection)

    def clear_selection(self) -> None:
        self._selection.clear()

    def submit_selection(self) -> GuessResult:
        letters = self.selected_letters()
        self.clear_selection()
        return self.submit_guess(letters)

    def submit_guess(self, guess: str) -> GuessResult:
        """Score ``guess`` against the current word in any catalog language."""

        theme = self._require_theme()
        record = self.current_record()
        canonical = record.canonical
        guessed = self.resolver.canonical_of(guess)
        correct = match_key(guess) == match_key(record.surface) or match_key(guessed) == match_key(canonical)
        if not correct:
            LOGGER.debug("Wrong guess %r for word #%d of %s", guess, self._index, theme)
            return GuessResult(correct=False, guess=guess, canonical=canonical, theme=theme)

        newly = self.tracker.mark_solved(theme, canonical)
        awarded = 0
        if newly:
            awarded = self.points_per_word
            self.wallet.credit(awarded)
        return GuessResult(
            correct=True,
            guess=guess,
            canonical=canonical,
            theme=theme,
            newly_solved=newly,
            points_awarded=awarded,
        )

    # ------------------------------------------------------------------
    # Hints
    # ------------------------------------------------------------------
    def next_hint_level(self) -> Optional[int]:
        theme = self._require_theme()
        canonical = self.current_canonical()
        level = self.tracker.next_hint_level(theme, canonical)
        if level is None or not self.economy.is_available(theme, canonical, level):
            return None
        return level

    def buy_hint(self, level: Optional[int] = None) -> HintView:
        """Buy ``level`` (default: the next one) for the current word."""

        theme = self._require_theme()
        canonical = self.current_canonical()
        if level is None:
            level = self.tracker.next_hint_level(theme, canonical) or len(self.economy.costs) + 1
        self.economy.purchase(theme, canonical, level)
        return self.hint_display()

    def hint_display(self) -> HintView:
        theme = self._require_theme()
        record = self.current_record()
        used = self.tracker.hint_levels_used(theme, record.canonical)
        view = HintView(level=max(used, default=0))
        if HintLevel.FIRST_LETTER.value in used:
            puzzle = self.puzzle_for()
            first_cell = puzzle.path[0] if puzzle is not None else None
            first_letter = puzzle.target_word[0] if puzzle is not None else record.surface[:1]
            view = HintView(level=view.level, first_letter=first_letter, first_cell=first_cell)
        if HintLevel.WORD_LENGTH.value in used:
            view = HintView(
                level=view.level,
                first_letter=view.first_letter,
                first_cell=view.first_cell,
                mask="_" * self._letter_count(record),
            )
        return view

    def _letter_count(self, record: WordRecord) -> int:
        puzzle = self._grids.get(grid_key(self._language, record.surface))
        if puzzle is not None:
            return len(puzzle.target_word)
        return sum(1 for char in record.surface if char.isalpha())

    # ------------------------------------------------------------------
    # Sentences and facts
    # ------------------------------------------------------------------
    def sentence_for(self, surface: Optional[str] = None) -> str:
        """Pick a random example sentence for ``surface`` (blank left in place)."""

        record = self._record_for(surface)
        if record is None or not record.sentences:
            LOGGER.warning("No sentences for %r in %s", surface or self.current_word, self._language)
            missing = MISSING_SENTENCE.get(self._language, MISSING_SENTENCE[BASE_LANGUAGE])
            return f"{SENTENCE_BLANK} {missing}"
        return self.rng.choice(record.sentences)

    def render_sentence(self, sentence: str, selection: str = "") -> str:
        """Fill the blank for display: the answer once solved, otherwise hint or drag state."""

        record = self.current_record()
        if self.tracker.is_solved(self._require_theme(), record.canonical):
            return sentence.replace(SENTENCE_BLANK, record.surface, 1)
        if HintLevel.WORD_LENGTH.value in self.tracker.hint_levels_used(self._theme, record.canonical):
            mask = list("_" * self._letter_count(record))
            for i, char in enumerate(selection[: len(mask)]):
                mask[i] = char
            return sentence.replace(SENTENCE_BLANK, "".join(mask), 1)
        return sentence.replace(SENTENCE_BLANK, selection or "...", 1)

    def fact_for(self, surface: Optional[str] = None) -> str:
        record = self._record_for(surface)
        return record.fact if record is not None else ""

    def _record_for(self, surface: Optional[str]) -> Optional[WordRecord]:
        theme = self._require_theme()
        if surface is None:
            return self.current_record()
        index = self.catalog.index_of(theme, self.resolver.canonical_of(surface))
        if index is None:
            return None
        return self.catalog.record(theme, self._language, index)

    # ------------------------------------------------------------------
    # Progress and persistence
    # ------------------------------------------------------------------
    def progress(self, theme: Optional[str] = None) -> Tuple[int, int]:
        theme = theme or self._require_theme()
        total = self.catalog.theme(theme).word_count()
        return len(self.tracker.solved_indices_for_theme(theme)), total

    def reset_progress(self) -> None:
        """Explicit player reset: solved words, hints, points, unlocks and grids."""

        self.tracker.reset()
        self.wallet.reset()
        self.unlocks.reset()
        self.clear_grids()
        if self._theme is not None and not self.unlocks.is_unlocked(self._theme):
            self._theme = None
        self._index = 0
        LOGGER.info("Progress reset")

    def to_save_state(self) -> SaveState:
        solved, hints = self.tracker.snapshot()
        return SaveState(
            points=self.wallet.balance,
            solved=solved,
            hints=hints,
            grids=dict(self._grids),
            unlocked_themes=self.unlocks.unlocked,
            language=self._language,
        )

    def from_save_state(self, state: SaveState) -> None:
        """Load ``state`` into the injected components; grids are taken verbatim."""

        self.tracker.restore(state.solved, state.hints)
        self.wallet.reset(state.points)
        self.unlocks.restore(state.unlocked_themes)
        self._grids = dict(state.grids)
        if state.language in self.catalog.languages:
            self.set_language(state.language)
        else:
            LOGGER.warning("Saved language %r not in catalog; keeping %s", state.language, self._language)
        if self._theme is not None and not self.unlocks.is_unlocked(self._theme):
            self._theme = None
        LOGGER.info(
            "Restored %d solved words, %d grids, %d points",
            len(self.tracker.all_solved_canonical()),
            len(self._grids),
            self.wallet.balance,
        )


def create_session(
    catalog: WordCatalog,
    config: Optional[GeneratorConfig] = None,
    state: Optional[SaveState] = None,
    language: str = BASE_LANGUAGE,
    rng: Optional[random.Random] = None,
) -> PuzzleSession:
    """Wire a session from a catalog, optionally restoring a saved state."""

    config = config or GeneratorConfig()
    rng = rng or random.Random(config.seed)
    tracker = SolveStateTracker(catalog)
    wallet = PointsWallet()
    session = PuzzleSession(
        catalog=catalog,
        resolver=TranslationResolver(catalog),
        generator=GridGenerator(config, rng=rng),
        tracker=tracker,
        economy=HintEconomy(tracker, wallet),
        unlocks=ThemeUnlocks(catalog, wallet),
        language=language,
        rng=rng,
    )
    if state is not None:
        session.from_save_state(state)
    return session
