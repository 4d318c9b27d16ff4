"""Support, confidence and lift for item pairs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import EmptyDatasetError, InconsistentCountError
from .pairs import sort_key
from .typing import ItemPair, PairCounts, ScoredRule

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

_ALL_METRICS = [
    "pair_count",
    "support",
    "confidence",
    "reverse_confidence",
    "lift",
]

DEFAULT_METRICS = ["support", "confidence", "lift"]


def score_pair(
    pair: ItemPair,
    pair_counts: Mapping[ItemPair, int],
    single_counts: Mapping[Any, int],
    total_orders: int,
) -> ScoredRule:
    """Score the rule ``pair[0] -> pair[1]``.

    ``lift`` uses the closed form ``n_ab * N / (n_a * n_b)``, which equals
    ``support / (P(a) * P(b))``.

    Raises
    ------
    EmptyDatasetError
        If *total_orders* is zero.
    InconsistentCountError
        If either item has a zero single-order count.
    """
    if total_orders <= 0:
        raise EmptyDatasetError()

    a, b = pair
    n_ab = pair_counts.get(pair, 0)
    n_a = single_counts.get(a, 0)
    n_b = single_counts.get(b, 0)
    if n_a <= 0 or n_b <= 0:
        raise InconsistentCountError(pair, n_a, n_b)

    return ScoredRule(
        product1=a,
        product2=b,
        support=n_ab / total_orders,
        confidence=n_ab / n_a,
        reverse_confidence=n_ab / n_b,
        lift=(n_ab * total_orders) / (n_a * n_b),
        pair_count=n_ab,
    )


def score_rules(counts: PairCounts, on_inconsistent: str = "skip") -> list[ScoredRule]:
    """Score every counted pair.

    Parameters
    ----------
    counts
        Output of :func:`basketpairs.cooccurrence.aggregate`.
    on_inconsistent : {'skip', 'raise'}, default='skip'
        What to do with a pair whose items have no single count: log a
        warning and drop it, or re-raise :class:`InconsistentCountError`.

    Returns
    -------
    list[ScoredRule]
        One rule per pair, in canonical pair order.
    """
    if on_inconsistent not in ("skip", "raise"):
        raise ValueError(f"`on_inconsistent` must be 'skip' or 'raise'. Got: {on_inconsistent!r}")
    if counts.total_orders <= 0:
        raise EmptyDatasetError()

    rules: list[ScoredRule] = []
    skipped = 0
    for pair in sorted(counts.pair_counts, key=lambda p: (sort_key(p[0]), sort_key(p[1]))):
        try:
            rules.append(score_pair(pair, counts.pair_counts, counts.single_counts, counts.total_orders))
        except InconsistentCountError as exc:
            if on_inconsistent == "raise":
                raise
            skipped += 1
            logger.warning("Skipping rule: %s", exc)

    if skipped:
        logger.warning("Skipped %d of %d pairs with inconsistent counts.", skipped, len(counts.pair_counts))
    return rules


def rules_frame(
    rules: Iterable[ScoredRule],
    return_metrics: list[str] | None = None,
) -> pd.DataFrame:
    """Convert scored rules to a DataFrame.

    Parameters
    ----------
    rules
        Scored rules, already in the desired row order.
    return_metrics
        Metric columns to include after ``product1`` and ``product2``.
        Defaults to ``['support', 'confidence', 'lift']``. Available:
        ``'pair_count'``, ``'support'``, ``'confidence'``,
        ``'reverse_confidence'``, ``'lift'``.

    Returns
    -------
    pandas.DataFrame
    """
    import pandas as pd

    if return_metrics is None:
        return_metrics = DEFAULT_METRICS
    unknown = [m for m in return_metrics if m not in _ALL_METRICS]
    if unknown:
        raise ValueError(f"Unknown metric(s) {unknown}. Available metrics: {_ALL_METRICS}")

    columns = ["product1", "product2"] + list(return_metrics)
    rows = [[getattr(rule, col) for col in columns] for rule in rules]
    if not rows:
        return pd.DataFrame(columns=pd.Index(columns))
    return pd.DataFrame(rows, columns=columns)
