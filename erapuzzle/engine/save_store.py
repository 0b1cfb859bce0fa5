"""Persistent player progress.

The save file is a single JSON document holding points, unlocked eras, the
solved canonical words per era, hint levels per word and every generated
grid. Grids are stored cell for cell and reloaded verbatim so a word solved
before a restart highlights the same path afterwards.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Set, Tuple

from ..core.constants import BASE_LANGUAGE
from ..core.exceptions import SaveStateError
from ..core.models import GridPuzzle
from ..data.normalization import match_key
from ..utils.logger import get_logger
from .validator import PuzzleValidator


LOGGER = get_logger(__name__)

SAVE_VERSION = 1
DEFAULT_SAVE_PATH = Path("local_db/save.json")

GridKey = Tuple[str, str]


def grid_key(language: str, word: str) -> GridKey:
    return language, match_key(word)


@dataclass
class SaveState:
    """Everything the player keeps between sessions."""

    points: int = 0
    solved: Dict[str, Set[str]] = field(default_factory=dict)
    hints: Dict[str, Dict[str, Set[int]]] = field(default_factory=dict)
    grids: Dict[GridKey, GridPuzzle] = field(default_factory=dict)
    unlocked_themes: Set[str] = field(default_factory=set)
    language: str = BASE_LANGUAGE
    version: int = SAVE_VERSION


def dump_state(state: SaveState) -> Dict[str, Any]:
    """Serialize ``state`` into a JSON-ready document."""

    return {
        "version": state.version,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "language": state.language,
        "points": state.points,
        "unlocked_themes": sorted(state.unlocked_themes),
        "solved": {theme: sorted(words) for theme, words in sorted(state.solved.items())},
        "hints": {
            theme: {word: sorted(levels) for word, levels in sorted(words.items())}
            for theme, words in sorted(state.hints.items())
        },
        "grids": [
            dict(puzzle.to_jsonable(), word=word, language=language)
            for (language, word), puzzle in sorted(state.grids.items())
        ],
    }


def parse_state(document: Mapping[str, Any], validator: Optional[PuzzleValidator] = None) -> SaveState:
    """Rebuild a :class:`SaveState`; grids that fail validation are dropped."""

    if not isinstance(document, Mapping):
        raise SaveStateError("Save document must be a JSON object")
    validator = validator or PuzzleValidator()
    try:
        points = int(document.get("points", 0))
        solved = {
            str(theme): {str(word) for word in words}
            for theme, words in (document.get("solved") or {}).items()
        }
        hints = {
            str(theme): {str(word): {int(level) for level in levels} for word, levels in words.items()}
            for theme, words in (document.get("hints") or {}).items()
        }
        unlocked = {str(theme) for theme in document.get("unlocked_themes") or ()}
        version = int(document.get("version", SAVE_VERSION))
    except (AttributeError, TypeError, ValueError) as exc:
        raise SaveStateError(f"Malformed save document: {exc}") from exc
    if points < 0:
        raise SaveStateError(f"Saved balance is negative ({points})")
    if version > SAVE_VERSION:
        LOGGER.warning("Save version %d is newer than supported %d", version, SAVE_VERSION)

    grids: Dict[GridKey, GridPuzzle] = {}
    for entry in document.get("grids") or ():
        try:
            puzzle = GridPuzzle.from_jsonable(entry)
            word = str(entry.get("word") or puzzle.target_word)
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Dropping unreadable saved grid: %s", exc)
            continue
        result = validator.validate(puzzle)
        if not result.ok:
            LOGGER.warning("Dropping invalid saved grid for %s: %s", word, "; ".join(result.messages))
            continue
        grids[grid_key(puzzle.language, word)] = puzzle

    return SaveState(
        points=points,
        solved=solved,
        hints=hints,
        grids=grids,
        unlocked_themes=unlocked,
        language=str(document.get("language") or BASE_LANGUAGE),
        version=version,
    )


class SaveStore:
    """Reads and writes :class:`SaveState` as one JSON file."""

    def __init__(self, path: Path | str = DEFAULT_SAVE_PATH) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, state: SaveState) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(dump_state(state), ensure_ascii=False, indent=2)
        temp = self.path.with_name(self.path.name + ".tmp")
        try:
            temp.write_text(payload, encoding="utf-8")
            temp.replace(self.path)
        except OSError as exc:
            raise SaveStateError(f"Cannot write save file {self.path}: {exc}") from exc
        LOGGER.info(
            "Progress saved to %s (%d points, %d grids)", self.path, state.points, len(state.grids)
        )
        return self.path

    def load(self) -> SaveState:
        if not self.path.exists():
            LOGGER.info("No save file at %s; starting fresh", self.path)
            return SaveState()
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SaveStateError(f"Cannot read save file {self.path}: {exc}") from exc
        state = parse_state(document)
        LOGGER.info("Loaded save from %s (%d points, %d grids)", self.path, state.points, len(state.grids))
        return state

    def delete(self) -> None:
        if self.path.exists():
            self.path.unlink()
            LOGGER.info("Deleted save file %s", self.path)
