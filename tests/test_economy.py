import unittest

from erapuzzle.core.exceptions import HintUnavailableError, InsufficientPointsError, ThemeLockedError
from erapuzzle.engine.economy import HintEconomy, PointsWallet, ThemeUnlocks
from erapuzzle.engine.tracker import SolveStateTracker

from sample_catalog import build_catalog

EGYPT = "Ancient Egypt"


class WalletTests(unittest.TestCase):
    def test_credit_and_debit(self) -> None:
        wallet = PointsWallet(100)
        self.assertEqual(wallet.credit(250), 350)
        self.assertEqual(wallet.debit(200), 150)
        self.assertEqual(wallet.balance, 150)

    def test_overdraft_is_refused_not_clamped(self) -> None:
        wallet = PointsWallet(50)
        with self.assertRaises(InsufficientPointsError):
            wallet.debit(100)
        self.assertEqual(wallet.balance, 50)

    def test_negative_amounts_rejected(self) -> None:
        wallet = PointsWallet()
        with self.assertRaises(ValueError):
            wallet.credit(-1)
        with self.assertRaises(ValueError):
            wallet.debit(-1)
        with self.assertRaises(ValueError):
            PointsWallet(-5)

    def test_listeners_see_every_change(self) -> None:
        seen = []
        wallet = PointsWallet()
        wallet.add_listener(seen.append)
        wallet.credit(250)
        wallet.debit(100)
        wallet.reset(0)
        self.assertEqual(seen, [250, 150, 0])


class HintEconomyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tracker = SolveStateTracker(build_catalog())
        self.wallet = PointsWallet(1000)
        self.economy = HintEconomy(self.tracker, self.wallet)

    def test_pyramid_hint_availability(self) -> None:
        self.assertTrue(self.economy.is_available(EGYPT, "PYRAMID", 1))
        self.assertFalse(self.economy.is_available(EGYPT, "PYRAMID", 2))
        self.tracker.use_hint(EGYPT, "PYRAMID", 1)
        self.assertFalse(self.economy.is_available(EGYPT, "PYRAMID", 1))
        self.assertTrue(self.economy.is_available(EGYPT, "PYRAMID", 2))

    def test_solved_word_has_no_hints(self) -> None:
        self.tracker.mark_solved(EGYPT, "PYRAMID")
        self.assertFalse(self.economy.is_available(EGYPT, "PYRAMID", 1))
        with self.assertRaises(HintUnavailableError):
            self.economy.purchase(EGYPT, "PYRAMID", 1)
        self.assertEqual(self.wallet.balance, 1000)

    def test_invalid_level(self) -> None:
        self.assertFalse(self.economy.is_available(EGYPT, "PYRAMID", 3))
        self.assertFalse(self.economy.can_afford(3))
        with self.assertRaises(ValueError):
            self.economy.cost(0)

    def test_purchase_debits_exact_cost(self) -> None:
        self.assertEqual(self.economy.purchase(EGYPT, "PYRAMID", 1), 100)
        self.assertEqual(self.wallet.balance, 900)
        self.assertEqual(self.economy.purchase(EGYPT, "PYRAMID", 2), 200)
        self.assertEqual(self.wallet.balance, 700)
        self.assertEqual(self.tracker.hint_levels_used(EGYPT, "PYRAMID"), {1, 2})
        with self.assertRaises(HintUnavailableError):
            self.economy.purchase(EGYPT, "PYRAMID", 2)

    def test_unaffordable_purchase_leaves_state_alone(self) -> None:
        self.wallet.reset(150)
        self.economy.purchase(EGYPT, "NILE", 1)
        self.assertFalse(self.economy.can_afford(2))
        with self.assertRaises(InsufficientPointsError):
            self.economy.purchase(EGYPT, "NILE", 2)
        self.assertEqual(self.wallet.balance, 50)
        self.assertEqual(self.tracker.hint_levels_used(EGYPT, "NILE"), {1})

    def test_custom_costs(self) -> None:
        economy = HintEconomy(self.tracker, self.wallet, costs={1: 50, 2: 100})
        self.assertEqual(economy.purchase(EGYPT, "PHARAOH", 1), 50)
        self.assertEqual(self.wallet.balance, 950)

    def test_costs_for_unknown_levels_rejected(self) -> None:
        with self.assertRaises(ValueError):
            HintEconomy(self.tracker, self.wallet, costs={1: 10, 2: 20, 3: 30})
        with self.assertRaises(ValueError):
            HintEconomy(self.tracker, self.wallet, costs={1: 10})

    def test_unrecordable_level_never_debits(self) -> None:
        self.economy.costs[3] = 30
        self.economy.purchase(EGYPT, "PHARAOH", 1)
        self.economy.purchase(EGYPT, "PHARAOH", 2)
        self.assertFalse(self.economy.is_available(EGYPT, "PHARAOH", 3))
        with self.assertRaises(HintUnavailableError):
            self.economy.purchase(EGYPT, "PHARAOH", 3)
        self.assertEqual(self.wallet.balance, 700)
        self.assertEqual(self.tracker.hint_levels_used(EGYPT, "PHARAOH"), {1, 2})


class ThemeUnlockTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = build_catalog()
        self.wallet = PointsWallet()
        self.unlocks = ThemeUnlocks(self.catalog, self.wallet)

    def test_free_eras_start_unlocked(self) -> None:
        self.assertTrue(self.unlocks.is_unlocked("Ancient Egypt"))
        self.assertTrue(self.unlocks.is_unlocked("Medieval Europe"))
        self.assertFalse(self.unlocks.is_unlocked("Renaissance"))

    def test_unlock_debits_price(self) -> None:
        self.assertFalse(self.unlocks.can_unlock("Renaissance"))
        with self.assertRaises(ThemeLockedError):
            self.unlocks.unlock("Renaissance")
        self.wallet.credit(1200)
        self.assertTrue(self.unlocks.can_unlock("Renaissance"))
        self.assertEqual(self.unlocks.unlock("Renaissance"), 1000)
        self.assertEqual(self.wallet.balance, 200)
        self.assertTrue(self.unlocks.is_unlocked("Renaissance"))
        self.assertEqual(self.unlocks.unlock("Renaissance"), 0)
        self.assertEqual(self.wallet.balance, 200)

    def test_unknown_theme(self) -> None:
        self.assertFalse(self.unlocks.can_unlock("Atlantis"))
        with self.assertRaises(KeyError):
            self.unlocks.unlock("Atlantis")

    def test_restore_keeps_free_eras(self) -> None:
        self.unlocks.restore(["Renaissance", "Atlantis"])
        self.assertEqual(
            self.unlocks.unlocked, {"Ancient Egypt", "Medieval Europe", "Renaissance"}
        )
        self.unlocks.reset()
        self.assertFalse(self.unlocks.is_unlocked("Renaissance"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
