"""HTTP catalog source for packaged or hosted word lists."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from ..core.exceptions import CatalogLoadError
from ..data.catalog import WordCatalog
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class CatalogClient:
    """Fetches per-language catalog documents over HTTP."""

    def __init__(
        self,
        timeout_seconds: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def fetch_document(self, url: str) -> Dict[str, Any]:
        """GET ``url`` and return the parsed ``{"sets": [...]}`` document."""
        try:
            response = self.session.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
            document = response.json()
        except requests.RequestException as exc:
            raise CatalogLoadError(f"Catalog request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise CatalogLoadError(f"Catalog at {url} is not valid JSON: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("sets"), list):
            LOGGER.warning("Catalog response from %s has no sets: %.200s", url, document)
            raise CatalogLoadError(f"Catalog at {url} has no 'sets' list")
        LOGGER.info("Fetched catalog %s (%d sets)", url, len(document["sets"]))
        return document

    def fetch_catalog(
        self,
        urls: Mapping[str, str],
        era_names: Optional[Mapping[str, Mapping[str, str]]] = None,
        prices: Optional[Mapping[str, int]] = None,
    ) -> WordCatalog:
        documents = {language: self.fetch_document(url) for language, url in urls.items()}
        return WordCatalog.from_documents(documents, era_names=era_names, prices=prices)
