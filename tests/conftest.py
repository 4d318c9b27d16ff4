"""pytest configuration and shared fixtures."""

from __future__ import annotations

import pandas as pd
import pytest


@pytest.fixture
def abc_orders() -> pd.DataFrame:
    """O1: A, B  |  O2: A, B, C  |  O3: A  (B repeated in O2 as quantity 2)."""
    return pd.DataFrame(
        {
            "order_id": ["O1", "O1", "O2", "O2", "O2", "O2", "O3"],
            "pizza_id": ["A", "B", "A", "B", "B", "C", "A"],
            "category": ["Classic", "Veggie", "Classic", "Veggie", "Veggie", "Supreme", "Classic"],
        }
    )


@pytest.fixture
def pizza_orders() -> pd.DataFrame:
    """A small pizza log with numeric ids, repeated rows and one oversized order."""
    rows = [
        (1, 10, "Classic"),
        (1, 11, "Veggie"),
        (1, 11, "Veggie"),
        (2, 10, "Classic"),
        (2, 11, "Veggie"),
        (2, 12, "Supreme"),
        (3, 10, "Classic"),
        (3, 12, "Supreme"),
        (4, 13, "Chicken"),
        (5, 11, "Veggie"),
        (5, 12, "Supreme"),
    ]
    # order 6 holds 11 distinct pizzas
    rows += [(6, item, "Classic" if item % 2 else "Veggie") for item in range(10, 21)]
    return pd.DataFrame(rows, columns=["order_id", "pizza_id", "category"])
