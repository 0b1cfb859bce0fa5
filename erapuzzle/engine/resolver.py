"""Cross-language word identity.

Every surface form maps to one canonical identity: its English rendering.
Lookups fold case (including Turkish dotted/dotless i) and surrounding
whitespace, so ``canonical_of(translate(canonical_of(w), lang))`` always
returns ``canonical_of(w)``.

Unknown words never raise. They resolve to themselves (and unknown themes to
the catalog's first theme) so play is not blocked, but every miss is logged.
"""

from __future__ import annotations

from typing import Dict, Optional

from ..core.constants import BASE_LANGUAGE
from ..data.catalog import WordCatalog
from ..data.normalization import match_key
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class TranslationResolver:
    """Maps surface words to canonical identities, languages and themes."""

    def __init__(self, catalog: WordCatalog) -> None:
        self.catalog = catalog
        self._canonical: Dict[str, str] = {}
        self._translations: Dict[str, Dict[str, str]] = {}
        self._themes: Dict[str, Dict[str, str]] = {}
        self._build()

    def _build(self) -> None:
        # English first so an English surface always resolves to itself even
        # when another language happens to share the spelling.
        for language in self.catalog.languages:
            by_surface = self._themes.setdefault(language, {})
            for theme_id in self.catalog.theme_ids:
                for record in self.catalog.records(theme_id, language):
                    self._canonical.setdefault(match_key(record.surface), record.canonical)
                    by_surface.setdefault(match_key(record.surface), theme_id)
                    renderings = self._translations.setdefault(record.canonical, {})
                    renderings.setdefault(language, record.surface)
        for record in self.catalog.iter_records():
            renderings = self._translations.setdefault(record.canonical, {})
            for language, text in record.translations.items():
                renderings.setdefault(language, text)
                self._canonical.setdefault(match_key(text), record.canonical)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def canonical_of(self, surface: str) -> str:
        """Return the English identity of ``surface``; unknown input comes back unchanged."""

        canonical = self._canonical.get(match_key(surface))
        if canonical is None:
            LOGGER.warning("No canonical word for %r; using it as-is", surface)
            return surface
        return canonical

    def translate(self, canonical: str, language: str) -> str:
        """Return the ``language`` rendering of ``canonical`` (itself if untranslated)."""

        base = self._canonical.get(match_key(canonical), canonical)
        rendering = self._translations.get(base, {}).get(language)
        if rendering is None:
            LOGGER.warning("No %s translation for %r", language, canonical)
            return canonical
        return rendering

    def is_known(self, surface: str) -> bool:
        return match_key(surface) in self._canonical

    def language_of(self, surface: str) -> Optional[str]:
        """Return the first catalog language whose word lists contain ``surface``."""

        key = match_key(surface)
        for language in self.catalog.languages:
            if key in self._themes.get(language, {}):
                return language
        return None

    def theme_of(self, surface: str, language: str = BASE_LANGUAGE) -> str:
        """Locate the theme of ``surface``.

        Order: exact match in ``language``, then in English (by the surface
        and by its canonical identity), then the catalog's first theme.
        """

        key = match_key(surface)
        theme_id = self._themes.get(language, {}).get(key)
        if theme_id is not None:
            return theme_id
        english = self._themes.get(BASE_LANGUAGE, {})
        theme_id = english.get(key) or english.get(match_key(self._canonical.get(key, "")))
        if theme_id is not None:
            return theme_id
        fallback = self.catalog.first_theme
        LOGGER.warning("Word %r not found in any theme; attributing it to %r", surface, fallback)
        return fallback

    def surface_for(self, theme: str, canonical: str, language: str) -> str:
        """Render ``canonical`` in ``language`` through the theme's positional order."""

        index = self.catalog.index_of(theme, self.canonical_of(canonical))
        if index is not None:
            record = self.catalog.record(theme, language, index)
            if record is not None:
                return record.surface
        return self.translate(canonical, language)
