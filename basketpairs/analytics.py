"""Analytics on scored pair tables."""

from __future__ import annotations

import pandas as pd


def find_substitutes(rules_df: pd.DataFrame, max_lift: float = 0.8) -> pd.DataFrame:
    """Finds substitute or cannibalizing products using negative association.

    If items A and B are each bought often but rarely together (lift < 1.0),
    they likely cannibalize each other.

    Args:
        rules_df: Unfiltered scored table, e.g. from `PairMiner.scored_rules`.
                  Thresholded rule tables already drop every pair with lift <= 1.
        max_lift: Upper bound (exclusive) for a pair's lift to count as a substitute.

    Returns:
        pd.DataFrame sorted by most severe cannibalization (lowest lift).
    """
    for col in ("lift", "confidence"):
        if col not in rules_df.columns:
            raise ValueError(f"The input DataFrame must contain a '{col}' column")

    substitutes = rules_df[rules_df["lift"] < max_lift].copy()

    return substitutes.sort_values(by=["lift", "confidence"], ascending=[True, True]).reset_index(drop=True)
