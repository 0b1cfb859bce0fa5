"""Immutable per-language, per-era word catalog."""

from __future__ import annotations

import json
from collections import OrderedDict
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import BASE_LANGUAGE, DIFFICULTY_RANKS, ERA_PRICES, TURKISH_ERA_NAMES
from ..core.exceptions import CatalogLoadError
from ..core.models import Theme, WordRecord
from ..utils.logger import get_logger
from .normalization import display_upper, match_key


LOGGER = get_logger(__name__)

DEFAULT_ERA_NAMES: Dict[str, Mapping[str, str]] = {"tr": TURKISH_ERA_NAMES}


def load_catalog_document(path: Path | str) -> Dict[str, Any]:
    """Read one language's catalog JSON (``{"sets": [...]}``)."""

    source = Path(path)
    try:
        document = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogLoadError(f"Cannot read catalog {source}: {exc}") from exc
    if not isinstance(document, dict) or not isinstance(document.get("sets"), list):
        raise CatalogLoadError(f"Catalog {source} has no 'sets' list")
    return document


def difficulty_rank(raw: Any, index: int, count: int) -> float:
    """Map a catalog difficulty label to ``[0, 1]``.

    Unknown labels fall back to the word's position inside its era, so the
    first third of a list reads as easy and the last third as hard.
    """

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    label = str(raw or "").strip().lower()
    if label in DIFFICULTY_RANKS:
        return DIFFICULTY_RANKS[label]
    try:
        return float(label)
    except ValueError:
        return index / count if count else 0.5


class WordCatalog:
    """Loaded word lists keyed by canonical theme id and language.

    Position ``i`` of a theme's list names the same canonical word in every
    language; construction fails if the documents disagree.
    """

    def __init__(
        self,
        themes: Sequence[Theme],
        records: Mapping[Tuple[str, str], Sequence[WordRecord]],
        languages: Sequence[str],
    ) -> None:
        self._themes: "OrderedDict[str, Theme]" = OrderedDict((t.id, t) for t in themes)
        self._records: Dict[Tuple[str, str], Tuple[WordRecord, ...]] = {
            key: tuple(value) for key, value in records.items()
        }
        self._languages: Tuple[str, ...] = tuple(languages)
        self._index: Dict[str, Dict[str, int]] = {}
        for theme in self._themes.values():
            base = self._records.get((theme.id, BASE_LANGUAGE), ())
            self._index[theme.id] = {rec.canonical: rec.index for rec in base}
        self._validate()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_documents(
        cls,
        documents: Mapping[str, Mapping[str, Any]],
        era_names: Optional[Mapping[str, Mapping[str, str]]] = None,
        prices: Optional[Mapping[str, int]] = None,
    ) -> "WordCatalog":
        """Build a catalog from parsed per-language documents."""

        if BASE_LANGUAGE not in documents:
            raise CatalogLoadError(f"Catalog requires a '{BASE_LANGUAGE}' document")
        era_names = DEFAULT_ERA_NAMES if era_names is None else era_names
        prices = ERA_PRICES if prices is None else prices

        languages = [BASE_LANGUAGE] + [lang for lang in documents if lang != BASE_LANGUAGE]
        order: List[str] = []
        display: Dict[str, Dict[str, str]] = {}
        records: Dict[Tuple[str, str], List[WordRecord]] = {}

        for language in languages:
            mapping = era_names.get(language, {})
            for word_set in documents[language].get("sets", []):
                raw_era = str(word_set.get("era", "")).strip()
                if not raw_era:
                    raise CatalogLoadError(f"[{language}] word set without an era name")
                era = mapping.get(raw_era, raw_era)
                if language == BASE_LANGUAGE:
                    if era not in display:
                        order.append(era)
                        display[era] = {}
                elif era not in display:
                    raise CatalogLoadError(
                        f"[{language}] era {raw_era!r} does not map to a known theme"
                    )
                display[era][language] = raw_era
                bucket = records.setdefault((era, language), [])
                entries = word_set.get("words", [])
                for entry in entries:
                    bucket.append(cls._build_record(entry, era, language, len(bucket), len(entries)))
            LOGGER.info(
                "Loaded %s catalog: %d words",
                language,
                sum(len(v) for (_, lang), v in records.items() if lang == language),
            )

        themes = [
            Theme(
                id=era,
                unlock_price=int(prices.get(era, 0)),
                display_names=MappingProxyType(dict(display[era])),
                words=MappingProxyType(
                    {
                        lang: tuple(r.surface for r in records.get((era, lang), ()))
                        for lang in languages
                    }
                ),
            )
            for era in order
        ]
        return cls(themes, records, languages)

    @classmethod
    def from_files(
        cls,
        paths: Mapping[str, Path | str],
        era_names: Optional[Mapping[str, Mapping[str, str]]] = None,
        prices: Optional[Mapping[str, int]] = None,
    ) -> "WordCatalog":
        documents = {lang: load_catalog_document(path) for lang, path in paths.items()}
        return cls.from_documents(documents, era_names=era_names, prices=prices)

    @staticmethod
    def _build_record(
        entry: Mapping[str, Any], era: str, language: str, index: int, count: int
    ) -> WordRecord:
        translations = entry.get("translations") or {}
        english = str(translations.get(BASE_LANGUAGE) or "").strip()
        if not english:
            raise CatalogLoadError(
                f"[{language}] {era!r} word #{index} has no '{BASE_LANGUAGE}' translation"
            )
        surface = display_upper(str(entry.get("word") or ""), language)
        if not surface:
            surface = display_upper(str(translations.get(language) or english), language)
        return WordRecord(
            surface=surface,
            era=era,
            language=language,
            canonical=display_upper(english, BASE_LANGUAGE),
            index=index,
            translations=MappingProxyType(
                {lang: display_upper(str(text), lang) for lang, text in translations.items() if text}
            ),
            sentences=tuple(str(s) for s in entry.get("sentences") or ()),
            fact=str(entry.get("didYouKnow") or ""),
            difficulty_rank=difficulty_rank(entry.get("difficulty"), index, count),
        )

    def _validate(self) -> None:
        for theme in self._themes.values():
            base = self._records.get((theme.id, BASE_LANGUAGE), ())
            for language in self._languages:
                if language == BASE_LANGUAGE:
                    continue
                # An era left out of a document counts as zero words.
                other = self._records.get((theme.id, language), ())
                if len(other) != len(base):
                    raise CatalogLoadError(
                        f"Theme {theme.id!r} has {len(base)} words in {BASE_LANGUAGE} "
                        f"but {len(other)} in {language}"
                    )
                for left, right in zip(base, other):
                    if match_key(left.canonical) != match_key(right.canonical):
                        raise CatalogLoadError(
                            f"Theme {theme.id!r} position {left.index}: {left.canonical!r} "
                            f"({BASE_LANGUAGE}) vs {right.canonical!r} ({language})"
                        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def languages(self) -> Tuple[str, ...]:
        return self._languages

    @property
    def theme_ids(self) -> Tuple[str, ...]:
        return tuple(self._themes)

    @property
    def first_theme(self) -> str:
        if not self._themes:
            raise CatalogLoadError("Catalog has no themes")
        return next(iter(self._themes))

    def has_theme(self, theme: str) -> bool:
        return theme in self._themes

    def theme(self, theme: str) -> Theme:
        try:
            return self._themes[theme]
        except KeyError:
            raise KeyError(f"Unknown theme {theme!r}") from None

    def themes(self) -> Iterable[Theme]:
        return self._themes.values()

    def records(self, theme: str, language: str) -> Tuple[WordRecord, ...]:
        return self._records.get((theme, language), ())

    def words(self, theme: str, language: str) -> Tuple[str, ...]:
        return tuple(record.surface for record in self.records(theme, language))

    def record(self, theme: str, language: str, index: int) -> Optional[WordRecord]:
        records = self.records(theme, language)
        if 0 <= index < len(records):
            return records[index]
        return None

    def index_of(self, theme: str, canonical: str) -> Optional[int]:
        return self._index.get(theme, {}).get(display_upper(canonical, BASE_LANGUAGE))

    def iter_records(self, language: Optional[str] = None) -> Iterator[WordRecord]:
        for (_, lang), records in self._records.items():
            if language is None or lang == language:
                yield from records

    def __len__(self) -> int:
        return sum(len(v) for (_, lang), v in self._records.items() if lang == BASE_LANGUAGE)
