"""Shared helpers for word normalization across catalog languages."""

from __future__ import annotations

import re

# Python's default case mapping is locale-free; Turkish dotted/dotless i
# need explicit handling to round-trip between lower and upper case.
TURKISH_UPPER = {
    "i": "İ",
    "ı": "I",
}

# Folding table for language-agnostic lookup keys.
MATCH_FOLD = {
    "İ": "I",
    "ı": "I",
    "̇": "",  # combining dot above, produced by "İ".lower()
}

WHITESPACE_RE = re.compile(r"\s+")


def display_upper(text: str, language: str = "en") -> str:
    """Return ``text`` trimmed and uppercased the way ``language`` spells it."""

    if not text:
        return ""
    text = WHITESPACE_RE.sub(" ", text.strip())
    if language == "tr":
        text = "".join(TURKISH_UPPER.get(char, char) for char in text)
    return text.upper()


def match_key(text: str) -> str:
    """Return a case-insensitive key for comparing surface forms.

    Dotted and dotless i fold together so ``"piramit"``, ``"PİRAMİT"`` and
    ``"PIRAMIT"`` share one key.
    """

    if not text:
        return ""
    text = WHITESPACE_RE.sub(" ", text.strip())
    folded = "".join(MATCH_FOLD.get(char, char) for char in text)
    return "".join(MATCH_FOLD.get(char, char) for char in folded.upper())


def is_grid_letter(char: str) -> bool:
    return len(char) == 1 and char.isalpha() and char.isupper()


__all__ = ["display_upper", "match_key", "is_grid_letter", "TURKISH_UPPER"]
