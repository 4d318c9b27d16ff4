"""Error taxonomy for the pair-association engine."""

from __future__ import annotations

from typing import Any


class BasketPairsError(Exception):
    """Base class for every error raised by basketpairs."""


class EmptyDatasetError(BasketPairsError, ValueError):
    """Raised when rules are scored against zero orders."""

    def __init__(self, message: str = "Cannot score rules: the dataset contains no orders.") -> None:
        super().__init__(message)


class InconsistentCountError(BasketPairsError, ArithmeticError):
    """Raised when a pair references an item that no order contains.

    This only happens when pair and single counts were built from different
    basket sets.
    """

    def __init__(self, pair: tuple[Any, Any], count_a: int, count_b: int) -> None:
        self.pair = pair
        self.count_a = count_a
        self.count_b = count_b
        super().__init__(
            f"Pair {pair!r} has a zero single-order count "
            f"(count[{pair[0]!r}]={count_a}, count[{pair[1]!r}]={count_b})."
        )


class InvalidConfigurationError(BasketPairsError, ValueError):
    """Raised when thresholds or basket-size bounds are out of range."""
