"""Background catalog loading with an explicit Loading/Ready/Failed state."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Callable, List, Optional

from ..core.exceptions import CatalogLoadError, CatalogNotReadyError
from ..utils.logger import get_logger
from .catalog import WordCatalog


LOGGER = get_logger(__name__)

CatalogSource = Callable[[], WordCatalog]
LoadListener = Callable[["LoadState"], None]


class LoadState(str, Enum):
    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"


class CatalogLoader:
    """Runs ``source`` on a worker thread, retrying failures with backoff.

    Until the worker finishes, :meth:`catalog` raises
    :class:`CatalogNotReadyError` so "not loaded yet" is never confused with
    an empty catalog.
    """

    def __init__(
        self,
        source: CatalogSource,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.source = source
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep
        self._state = LoadState.LOADING
        self._catalog: Optional[WordCatalog] = None
        self._error: Optional[BaseException] = None
        self._listeners: List[LoadListener] = []
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def start(self) -> "CatalogLoader":
        with self._lock:
            if self._future is not None:
                return self
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog-loader")
            self._future = self._executor.submit(self._run)
        return self

    def load_now(self) -> WordCatalog:
        """Load synchronously on the calling thread."""

        self._run()
        return self.catalog()

    def wait(self, timeout: Optional[float] = None) -> LoadState:
        future = self._future
        if future is not None:
            try:
                future.result(timeout=timeout)
            except FutureTimeoutError:
                LOGGER.debug("Catalog still loading after %ss", timeout)
        return self._state

    def catalog(self) -> WordCatalog:
        if self._state == LoadState.READY and self._catalog is not None:
            return self._catalog
        if self._state == LoadState.FAILED:
            raise CatalogLoadError(f"Catalog failed to load: {self._error}")
        raise CatalogNotReadyError("Catalog is still loading")

    def add_listener(self, listener: LoadListener) -> None:
        """Call ``listener`` once the load settles (immediately if it already has)."""

        with self._lock:
            settled = self._state != LoadState.LOADING
            if not settled:
                self._listeners.append(listener)
        if settled:
            listener(self._state)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def _run(self) -> None:
        delay = self.backoff_seconds
        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_retries + 2):
            try:
                catalog = self.source()
            except Exception as exc:  # any source failure counts as a failed attempt
                last_error = exc
                LOGGER.warning("Catalog load attempt %d failed: %s", attempt, exc)
                if attempt <= self.max_retries:
                    self._sleep(delay)
                    delay *= 2
                continue
            LOGGER.info("Catalog ready: %d themes, %d words", len(catalog.theme_ids), len(catalog))
            self._settle(LoadState.READY, catalog=catalog)
            return
        LOGGER.error("Catalog load gave up after %d attempts: %s", self.max_retries + 1, last_error)
        self._settle(LoadState.FAILED, error=last_error)

    def _settle(
        self,
        state: LoadState,
        catalog: Optional[WordCatalog] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        with self._lock:
            self._catalog = catalog
            self._error = error
            self._state = state
            listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(state)


def require_catalog(
    loader: CatalogLoader,
    attempts: int = 10,
    interval: float = 0.1,
    sleep: Callable[[float], None] = time.sleep,
) -> WordCatalog:
    """Poll ``loader`` up to ``attempts`` times, then surface a load failure."""

    for attempt in range(attempts):
        try:
            return loader.catalog()
        except CatalogNotReadyError:
            LOGGER.debug("Catalog not ready (poll %d/%d)", attempt + 1, attempts)
            sleep(interval)
    raise CatalogLoadError(f"Catalog still loading after {attempts} polls")
