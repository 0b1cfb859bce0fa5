"""Points wallet, hint pricing and era unlocks.

Purchases are refused, never clamped: a debit larger than the balance raises
:class:`InsufficientPointsError` and leaves the balance untouched.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Set

from ..core.constants import DEFAULT_UNLOCKED_THEMES, HINT_COSTS
from ..core.exceptions import HintUnavailableError, InsufficientPointsError, ThemeLockedError
from ..data.catalog import WordCatalog
from ..utils.logger import get_logger
from .tracker import HINT_LEVELS, SolveStateTracker


LOGGER = get_logger(__name__)

BalanceListener = Callable[[int], None]


class PointsWallet:
    """Non-negative integer balance with change notifications."""

    def __init__(self, points: int = 0) -> None:
        if points < 0:
            raise ValueError("Starting balance cannot be negative")
        self._points = int(points)
        self._listeners: List[BalanceListener] = []

    @property
    def balance(self) -> int:
        return self._points

    def add_listener(self, listener: BalanceListener) -> None:
        self._listeners.append(listener)

    def can_afford(self, amount: int) -> bool:
        return self._points >= amount

    def credit(self, amount: int) -> int:
        if amount < 0:
            raise ValueError(f"Cannot credit a negative amount ({amount})")
        self._points += amount
        self._notify()
        return self._points

    def debit(self, amount: int) -> int:
        if amount < 0:
            raise ValueError(f"Cannot debit a negative amount ({amount})")
        if amount > self._points:
            raise InsufficientPointsError(f"Need {amount} points, have {self._points}")
        self._points -= amount
        self._notify()
        return self._points

    def reset(self, points: int = 0) -> None:
        if points < 0:
            raise ValueError("Balance cannot be negative")
        self._points = int(points)
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self._points)


class HintEconomy:
    """Decides whether a hint level can be bought and charges for it."""

    def __init__(
        self,
        tracker: SolveStateTracker,
        wallet: PointsWallet,
        costs: Optional[Mapping[int, int]] = None,
    ) -> None:
        self.tracker = tracker
        self.wallet = wallet
        self.costs = dict(HINT_COSTS if costs is None else costs)
        unknown = set(self.costs) - HINT_LEVELS
        if unknown:
            raise ValueError(f"Hint costs given for unknown levels {sorted(unknown)}")
        missing = HINT_LEVELS - set(self.costs)
        if missing:
            raise ValueError(f"Hint costs missing for levels {sorted(missing)}")

    def cost(self, level: int) -> int:
        try:
            return self.costs[level]
        except KeyError:
            raise ValueError(f"Unknown hint level {level}") from None

    def is_available(self, theme: str, canonical_word: str, level: int) -> bool:
        # Solved state is checked before hint levels are read.
        if self.tracker.is_solved(theme, canonical_word):
            return False
        if level not in HINT_LEVELS or level not in self.costs:
            return False
        used = self.tracker.hint_levels_used(theme, canonical_word)
        return len(used) == level - 1 and all(lower in used for lower in range(1, level))

    def can_afford(self, level: int) -> bool:
        return level in self.costs and self.wallet.can_afford(self.costs[level])

    def purchase(self, theme: str, canonical_word: str, level: int) -> int:
        """Debit the exact cost of ``level`` and record it; returns the cost."""

        if not self.is_available(theme, canonical_word, level):
            raise HintUnavailableError(
                f"Hint level {level} is not available for {canonical_word!r} in {theme!r}"
            )
        cost = self.cost(level)
        self.wallet.debit(cost)
        self.tracker.use_hint(theme, canonical_word, level)
        LOGGER.info(
            "Bought hint %d for %s (%d points, %d left)",
            level,
            canonical_word,
            cost,
            self.wallet.balance,
        )
        return cost


class ThemeUnlocks:
    """Tracks which eras are playable and sells the locked ones."""

    def __init__(
        self,
        catalog: WordCatalog,
        wallet: PointsWallet,
        default_unlocked: Iterable[str] = DEFAULT_UNLOCKED_THEMES,
    ) -> None:
        self.catalog = catalog
        self.wallet = wallet
        self._defaults = frozenset(default_unlocked)
        self._unlocked: Set[str] = set()
        self.reset()

    @property
    def unlocked(self) -> Set[str]:
        return set(self._unlocked)

    def price(self, theme: str) -> int:
        return self.catalog.theme(theme).unlock_price

    def is_unlocked(self, theme: str) -> bool:
        return theme in self._unlocked

    def can_unlock(self, theme: str) -> bool:
        if not self.catalog.has_theme(theme) or self.is_unlocked(theme):
            return False
        return self.wallet.can_afford(self.price(theme))

    def unlock(self, theme: str) -> int:
        """Debit the era's price and unlock it; returns the amount paid."""

        if not self.catalog.has_theme(theme):
            raise KeyError(f"Unknown theme {theme!r}")
        if self.is_unlocked(theme):
            return 0
        price = self.price(theme)
        if not self.wallet.can_afford(price):
            raise ThemeLockedError(
                f"{theme!r} costs {price} points; balance is {self.wallet.balance}"
            )
        self.wallet.debit(price)
        self._unlocked.add(theme)
        LOGGER.info("Unlocked %s for %d points", theme, price)
        return price

    def restore(self, themes: Iterable[str]) -> None:
        self._unlocked = {theme for theme in themes if self.catalog.has_theme(theme)}
        self._unlocked |= self._free_themes()

    def reset(self) -> None:
        self._unlocked = self._free_themes()

    def _free_themes(self) -> Set[str]:
        return {
            theme.id
            for theme in self.catalog.themes()
            if theme.id in self._defaults or theme.unlock_price == 0
        }
