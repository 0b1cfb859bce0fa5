import random
import unittest
from unittest import mock

from erapuzzle.core.constants import ENGLISH_ALPHABET, TURKISH_ALPHABET
from erapuzzle.core.exceptions import PlacementExhaustedError, WordTooLongError
from erapuzzle.core.models import GridPuzzle
from erapuzzle.engine.generator import GeneratorConfig, GridGenerator, placement_letters
from erapuzzle.engine.validator import PuzzleValidator

from sample_catalog import build_catalog


class PlacementTests(unittest.TestCase):
    def assertValidSnake(self, puzzle: GridPuzzle, word: str) -> None:
        self.assertEqual(len(puzzle.path), len(word))
        self.assertEqual(len(set(puzzle.path)), len(word))
        for (x1, y1), (x2, y2) in zip(puzzle.path, puzzle.path[1:]):
            self.assertEqual(abs(x1 - x2) + abs(y1 - y2), 1)
        for x, y in puzzle.path:
            self.assertTrue(0 <= x < puzzle.size and 0 <= y < puzzle.size)
        self.assertEqual(puzzle.path_word(), word)

    def test_pyramid_fits_six_by_six(self) -> None:
        generator = GridGenerator(GeneratorConfig(size=6, seed=7))
        puzzle = generator.generate("PYRAMID")
        self.assertEqual(puzzle.size, 6)
        self.assertEqual(puzzle.target_word, "PYRAMID")
        self.assertValidSnake(puzzle, "PYRAMID")
        self.assertTrue(PuzzleValidator().validate(puzzle).ok)

    def test_every_cell_holds_one_uppercase_letter(self) -> None:
        puzzle = GridGenerator(GeneratorConfig(seed=3)).generate("Castle")
        self.assertEqual(len(puzzle.cells), 6)
        for row in puzzle.cells:
            self.assertEqual(len(row), 6)
            for letter in row:
                self.assertEqual(len(letter), 1)
                self.assertIn(letter, ENGLISH_ALPHABET)

    def test_different_seeds_still_valid(self) -> None:
        paths = set()
        for seed in range(10):
            puzzle = GridGenerator(GeneratorConfig(seed=seed)).generate("PYRAMID")
            self.assertValidSnake(puzzle, "PYRAMID")
            paths.add(puzzle.path)
        self.assertGreater(len(paths), 1)

    def test_same_seed_is_deterministic(self) -> None:
        first = GridGenerator(GeneratorConfig(seed=42)).generate("PHARAOH")
        second = GridGenerator(GeneratorConfig(seed=42)).generate("PHARAOH")
        self.assertEqual(first, second)

    def test_turkish_word_uses_turkish_alphabet(self) -> None:
        puzzle = GridGenerator(GeneratorConfig(seed=5)).generate("Şövalye", language="tr")
        self.assertEqual(puzzle.target_word, "ŞÖVALYE")
        self.assertEqual(puzzle.language, "tr")
        self.assertValidSnake(puzzle, "ŞÖVALYE")
        for row in puzzle.cells:
            for letter in row:
                self.assertIn(letter, TURKISH_ALPHABET)

    def test_dotted_capital_i_for_turkish(self) -> None:
        puzzle = GridGenerator(GeneratorConfig(seed=1)).generate("piramit", language="tr")
        self.assertEqual(puzzle.target_word, "PİRAMİT")

    def test_word_longer_than_grid_fails_before_search(self) -> None:
        rng = mock.MagicMock(spec=random.Random)
        generator = GridGenerator(GeneratorConfig(size=2), rng=rng)
        with self.assertRaises(WordTooLongError) as ctx:
            generator.generate("PYRAMID")
        self.assertEqual(ctx.exception.word, "PYRAMID")
        self.assertEqual(ctx.exception.size, 2)
        rng.shuffle.assert_not_called()

    def test_word_filling_grid_exactly_is_not_too_long(self) -> None:
        generator = GridGenerator(GeneratorConfig(size=2, seed=0))
        puzzle = generator.generate("NILE")
        self.assertValidSnake(puzzle, "NILE")

    def test_budget_spent_once_per_sweep(self) -> None:
        generator = GridGenerator(GeneratorConfig(size=2, max_attempts=3, seed=0))
        with mock.patch.object(GridGenerator, "_grow_path", return_value=None) as grow:
            with self.assertRaises(PlacementExhaustedError) as ctx:
                generator.generate("AB")
        self.assertEqual(grow.call_count, 3 * 4)
        self.assertEqual(ctx.exception.attempts, 3)

    def test_try_generate_returns_none_when_exhausted(self) -> None:
        generator = GridGenerator(GeneratorConfig(size=3, max_attempts=1, seed=0))
        with mock.patch.object(GridGenerator, "_grow_path", return_value=None):
            with self.assertLogs("erapuzzle.engine.generator", level="WARNING"):
                self.assertIsNone(generator.try_generate("NILE"))

    def test_try_generate_still_raises_for_too_long(self) -> None:
        generator = GridGenerator(GeneratorConfig(size=2))
        with self.assertRaises(WordTooLongError):
            generator.try_generate("PHARAOH")

    def test_empty_word_rejected(self) -> None:
        with self.assertRaises(ValueError):
            GridGenerator().generate("  ")

    def test_invalid_config_rejected(self) -> None:
        with self.assertRaises(ValueError):
            GridGenerator(GeneratorConfig(size=0))
        with self.assertRaises(ValueError):
            GridGenerator(GeneratorConfig(max_attempts=0))

    def test_explicit_size_must_be_positive(self) -> None:
        generator = GridGenerator(GeneratorConfig(seed=3))
        with self.assertRaises(ValueError):
            generator.generate("NILE", size=0)
        with self.assertRaises(ValueError):
            generator.generate("NILE", size=-4)
        self.assertEqual(generator.generate("NILE", size=3).size, 3)

    def test_placement_letters_strip_spaces_and_punctuation(self) -> None:
        self.assertEqual(placement_letters("Nile River"), "NILERIVER")
        self.assertEqual(placement_letters("Jeanne d'Arc"), "JEANNEDARC")


class GenerateAllTests(unittest.TestCase):
    def test_every_word_of_language_gets_a_grid(self) -> None:
        catalog = build_catalog()
        grids = GridGenerator(GeneratorConfig(seed=11)).generate_all(catalog, "tr")
        expected = {word for theme in catalog.theme_ids for word in catalog.words(theme, "tr")}
        self.assertEqual(set(grids), expected)
        validator = PuzzleValidator()
        for puzzle in grids.values():
            self.assertTrue(validator.validate(puzzle).ok)

    def test_too_long_words_are_skipped(self) -> None:
        catalog = build_catalog()
        grids = GridGenerator(GeneratorConfig(size=2, seed=0)).generate_all(catalog, "en")
        self.assertEqual(set(grids), {"NILE"})


class ValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = GridGenerator(GeneratorConfig(seed=9)).generate("KNIGHT")
        self.validator = PuzzleValidator()

    def test_jumping_path_is_rejected(self) -> None:
        path = list(self.puzzle.path)
        path[2], path[4] = path[4], path[2]
        broken = GridPuzzle(
            target_word=self.puzzle.target_word,
            size=self.puzzle.size,
            cells=self.puzzle.cells,
            path=tuple(path),
        )
        result = self.validator.validate(broken)
        self.assertFalse(result.ok)
        self.assertEqual(len(result.messages), 1)

    def test_lowercase_cell_is_rejected(self) -> None:
        rows = [list(row) for row in self.puzzle.cells]
        rows[0][0] = rows[0][0].lower()
        broken = GridPuzzle(
            target_word=self.puzzle.target_word,
            size=self.puzzle.size,
            cells=tuple(tuple(row) for row in rows),
            path=self.puzzle.path,
        )
        self.assertFalse(self.validator.validate(broken).ok)

    def test_jsonable_round_trip_is_verbatim(self) -> None:
        restored = GridPuzzle.from_jsonable(self.puzzle.to_jsonable())
        self.assertEqual(restored, self.puzzle)

    def test_from_jsonable_rejects_ragged_rows(self) -> None:
        payload = self.puzzle.to_jsonable()
        payload["letters"][1] = payload["letters"][1][:-1]
        with self.assertRaises(ValueError):
            GridPuzzle.from_jsonable(payload)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
