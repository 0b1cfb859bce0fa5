"""Custom exception hierarchy for the puzzle engine."""


class PuzzleError(Exception):
    """Base exception for engine failures."""


class CatalogLoadError(PuzzleError):
    """Raised when a word catalog cannot be read or violates its invariants."""


class CatalogNotReadyError(PuzzleError):
    """Raised when the catalog is still loading; callers should retry."""


class PlacementError(PuzzleError):
    """Base class for grid placement failures."""

    def __init__(self, word: str, size: int, message: str) -> None:
        super().__init__(message)
        self.word = word
        self.size = size


class WordTooLongError(PlacementError):
    """Raised when a word cannot fit in the grid at all (configuration error)."""

    def __init__(self, word: str, size: int) -> None:
        super().__init__(
            word,
            size,
            f"Word {word!r} has {len(word)} letters; a {size}x{size} grid holds {size * size}",
        )


class PlacementExhaustedError(PlacementError):
    """Raised when the randomized placement search runs out of attempts."""

    def __init__(self, word: str, size: int, attempts: int) -> None:
        super().__init__(
            word,
            size,
            f"Failed to place {word!r} in a {size}x{size} grid after {attempts} attempts",
        )
        self.attempts = attempts


class HintUnavailableError(PuzzleError):
    """Raised when a hint level cannot be bought for a word."""


class InsufficientPointsError(PuzzleError):
    """Raised when a purchase costs more than the current balance."""


class ThemeLockedError(PuzzleError):
    """Raised when a locked theme is used or cannot be unlocked."""


class SaveStateError(PuzzleError):
    """Raised when a save file cannot be read or written."""


class ValidationError(PuzzleError):
    """Raised when a puzzle grid fails its integrity checks."""
