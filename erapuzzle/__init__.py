"""Era word-puzzle engine: snake grids and cross-language solve tracking.

This package exposes the public API surface via:

- ``erapuzzle.engine.generator.GridGenerator``: places words along snake paths.
- ``erapuzzle.engine.resolver.TranslationResolver``: canonical word identity.
- ``erapuzzle.engine.tracker.SolveStateTracker``: solved words and hints.
- ``erapuzzle.engine.session.PuzzleSession``: wires the pieces for a player.
"""

from .data.catalog import WordCatalog
from .data.loader import CatalogLoader, LoadState
from .engine.economy import HintEconomy, PointsWallet, ThemeUnlocks
from .engine.generator import GeneratorConfig, GridGenerator
from .engine.resolver import TranslationResolver
from .engine.save_store import SaveState, SaveStore
from .engine.session import PuzzleSession, create_session
from .engine.tracker import SolveStateTracker

__all__ = [
    "CatalogLoader",
    "GeneratorConfig",
    "GridGenerator",
    "HintEconomy",
    "LoadState",
    "PointsWallet",
    "PuzzleSession",
    "SaveState",
    "SaveStore",
    "SolveStateTracker",
    "ThemeUnlocks",
    "TranslationResolver",
    "WordCatalog",
    "create_session",
]

__version__ = "0.1.0"
