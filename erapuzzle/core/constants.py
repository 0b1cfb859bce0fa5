"""Shared constants and enumerations for the puzzle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Language(str, Enum):
    """Catalog languages understood by the engine."""

    EN = "en"
    TR = "tr"


class HintLevel(int, Enum):
    """Hint tiers; level 1 reveals the first letter, level 2 the word length."""

    FIRST_LETTER = 1
    WORD_LENGTH = 2


BASE_LANGUAGE = Language.EN.value

DEFAULT_GRID_SIZE = 6
DEFAULT_MAX_ATTEMPTS = 300

# Current tuning: one solved word covers both hint tiers for the next word.
# Older builds paid 100 per word with 50/100 hints.
POINTS_PER_WORD = 250
HINT_COSTS: Dict[int, int] = {
    HintLevel.FIRST_LETTER.value: 100,
    HintLevel.WORD_LENGTH.value: 200,
}

ENGLISH_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
TURKISH_ALPHABET = ENGLISH_ALPHABET + "ÇĞİÖŞÜ"
ALPHABETS: Dict[str, str] = {
    Language.EN.value: ENGLISH_ALPHABET,
    Language.TR.value: TURKISH_ALPHABET,
}

SENTENCE_BLANK = "_____"

ERA_PRICES: Dict[str, int] = {
    "Ancient Egypt": 0,
    "Medieval Europe": 0,
    "Renaissance": 1000,
    "Industrial Revolution": 2000,
    "Ancient Greece": 3000,
    "Viking Age": 4000,
    "Feudal Japan": 5000,
    "Ottoman Empire": 6000,
}

DEFAULT_UNLOCKED_THEMES: Tuple[str, ...] = ("Ancient Egypt", "Medieval Europe")

TURKISH_ERA_NAMES: Dict[str, str] = {
    "Antik Mısır": "Ancient Egypt",
    "Antik Yunan": "Ancient Greece",
    "Orta Çağ Avrupası": "Medieval Europe",
    "Rönesans": "Renaissance",
    "Sanayi Devrimi": "Industrial Revolution",
    "Viking Çağı": "Viking Age",
    "Osmanlı İmparatorluğu": "Ottoman Empire",
    "Feodal Japonya": "Feudal Japan",
}

DIFFICULTY_RANKS: Dict[str, float] = {
    "easy": 0.0,
    "normal": 0.5,
    "medium": 0.5,
    "hard": 1.0,
}

# (dx, dy) in grid coordinates: up, right, down, left
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


@dataclass(frozen=True)
class Bounds:
    """Square grid bounds helper."""

    size: int

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size
