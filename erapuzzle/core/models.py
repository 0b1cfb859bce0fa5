"""Data models supporting the puzzle engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

Coord = Tuple[int, int]


@dataclass(frozen=True)
class WordRecord:
    """A single catalog word rendered in one language."""

    surface: str
    era: str
    language: str
    canonical: str
    index: int
    translations: Mapping[str, str] = field(default_factory=dict)
    sentences: Tuple[str, ...] = ()
    fact: str = ""
    difficulty_rank: float = 0.5

    def translation(self, language: str) -> Optional[str]:
        return self.translations.get(language)


@dataclass(frozen=True)
class Theme:
    """An era: display names, unlock price and per-language word order."""

    id: str
    unlock_price: int = 0
    display_names: Mapping[str, str] = field(default_factory=dict)
    words: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def display_name(self, language: str) -> str:
        return self.display_names.get(language, self.id)

    def word_count(self) -> int:
        for words in self.words.values():
            return len(words)
        return 0


@dataclass(frozen=True)
class GridPuzzle:
    """A generated letter grid with the snake path spelling its target word.

    ``cells`` is indexed ``cells[y][x]``; ``path`` holds ``(x, y)`` pairs in
    spelling order. Instances are never mutated once created so a reloaded
    puzzle renders exactly like the one first shown to the player.
    """

    target_word: str
    size: int
    cells: Tuple[Tuple[str, ...], ...]
    path: Tuple[Coord, ...]
    language: str = "en"

    def letter_at(self, x: int, y: int) -> str:
        return self.cells[y][x]

    def path_word(self) -> str:
        return "".join(self.cells[y][x] for x, y in self.path)

    def path_cells(self) -> frozenset:
        return frozenset(self.path)

    def rows(self) -> List[str]:
        return ["".join(row) for row in self.cells]

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "target_word": self.target_word,
            "language": self.language,
            "size": self.size,
            "letters": ["".join(row) for row in self.cells],
            "path": [[x, y] for x, y in self.path],
        }

    @classmethod
    def from_jsonable(cls, payload: Mapping[str, Any]) -> "GridPuzzle":
        size = int(payload["size"])
        rows = [list(row) for row in payload["letters"]]
        if len(rows) != size or any(len(row) != size for row in rows):
            raise ValueError(f"Grid for {payload.get('target_word')!r} is not {size}x{size}")
        return cls(
            target_word=str(payload["target_word"]),
            size=size,
            cells=tuple(tuple(row) for row in rows),
            path=tuple((int(x), int(y)) for x, y in payload["path"]),
            language=str(payload.get("language", "en")),
        )
