"""Per-theme solve state and hint usage keyed by canonical word."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Set, Tuple

from ..core.constants import HintLevel
from ..data.catalog import WordCatalog
from ..data.normalization import match_key
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

HINT_LEVELS: FrozenSet[int] = frozenset(level.value for level in HintLevel)


class SolveStateTracker:
    """Single source of truth for which canonical words are solved.

    State is one map ``theme -> {canonical}`` plus one map
    ``(theme, canonical) -> {hint levels}``. The index-based view consumed by
    positional callers is computed from the canonical set on every query, so
    the two can never drift apart.
    """

    def __init__(self, catalog: WordCatalog) -> None:
        self.catalog = catalog
        self._solved: Dict[str, Set[str]] = {}
        self._hints: Dict[Tuple[str, str], Set[int]] = {}

    @staticmethod
    def _key(word: str) -> str:
        return match_key(word)

    # ------------------------------------------------------------------
    # Solve state
    # ------------------------------------------------------------------
    def mark_solved(self, theme: str, canonical_word: str) -> bool:
        """Record ``canonical_word`` as solved; returns ``False`` if it already was."""

        key = self._key(canonical_word)
        solved = self._solved.setdefault(theme, set())
        if key in solved:
            return False
        solved.add(key)
        if self.catalog.index_of(theme, key) is None:
            LOGGER.warning("Solved word %r is not part of theme %r's word list", key, theme)
        LOGGER.info("Solved %s in %s (%d total)", key, theme, len(solved))
        return True

    def is_solved(self, theme: str, canonical_word: str) -> bool:
        return self._key(canonical_word) in self._solved.get(theme, ())

    def is_solved_anywhere(self, canonical_word: str) -> bool:
        key = self._key(canonical_word)
        return any(key in words for words in self._solved.values())

    def all_solved_canonical(self) -> Set[str]:
        solved: Set[str] = set()
        for words in self._solved.values():
            solved |= words
        return solved

    def solved_count(self, theme: str) -> int:
        return len(self._solved.get(theme, ()))

    def is_theme_solved(self, theme: str) -> bool:
        if not self.catalog.has_theme(theme):
            return False
        total = self.catalog.theme(theme).word_count()
        return total > 0 and len(self.solved_indices_for_theme(theme)) == total

    def solved_indices_for_theme(self, theme: str) -> Set[int]:
        """Positions of solved words in the theme's fixed word order."""

        indices: Set[int] = set()
        for key in self._solved.get(theme, ()):
            index = self.catalog.index_of(theme, key)
            if index is not None:
                indices.add(index)
        return indices

    # ------------------------------------------------------------------
    # Hints
    # ------------------------------------------------------------------
    def hint_levels_used(self, theme: str, canonical_word: str) -> Set[int]:
        return set(self._hints.get((theme, self._key(canonical_word)), ()))

    def next_hint_level(self, theme: str, canonical_word: str) -> Optional[int]:
        used = self.hint_levels_used(theme, canonical_word)
        for level in sorted(HINT_LEVELS):
            if level not in used:
                return level
        return None

    def use_hint(self, theme: str, canonical_word: str, level: int) -> None:
        """Add ``level`` to the word's consumed hints. Points are the caller's job."""

        if level not in HINT_LEVELS:
            raise ValueError(f"Unknown hint level {level}")
        key = (theme, self._key(canonical_word))
        used = self._hints.get(key, set())
        missing = {lower for lower in HINT_LEVELS if lower < level} - used
        if missing:
            raise ValueError(f"Hint level {level} requires levels {sorted(missing)} first")
        self._hints[key] = used | {level}
        LOGGER.debug("Hint %d used for %s/%s", level, theme, key[1])

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Forget all progress (explicit player reset)."""

        LOGGER.info(
            "Resetting progress: %d solved words, %d hint records",
            len(self.all_solved_canonical()),
            len(self._hints),
        )
        self._solved.clear()
        self._hints.clear()

    def snapshot(self) -> Tuple[Dict[str, Set[str]], Dict[str, Dict[str, Set[int]]]]:
        solved = {theme: set(words) for theme, words in self._solved.items() if words}
        hints: Dict[str, Dict[str, Set[int]]] = {}
        for (theme, word), levels in self._hints.items():
            if levels:
                hints.setdefault(theme, {})[word] = set(levels)
        return solved, hints

    def restore(
        self,
        solved: Mapping[str, Iterable[str]],
        hints: Mapping[str, Mapping[str, Iterable[int]]],
    ) -> None:
        self._solved = {theme: {self._key(w) for w in words} for theme, words in solved.items()}
        self._hints = {}
        for theme, words in hints.items():
            for word, levels in words.items():
                valid = {int(level) for level in levels if int(level) in HINT_LEVELS}
                if valid:
                    self._hints[(theme, self._key(word))] = valid
