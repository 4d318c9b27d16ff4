from __future__ import annotations

from collections import Counter
from typing import Any, NamedTuple

#: Unordered pair of distinct ids, stored in canonical ``a < b`` order.
ItemPair = tuple[Any, Any]

Basket = frozenset


class TransactionRow(NamedTuple):
    """One ``(order, item)`` membership fact from the transaction log."""

    order_id: Any
    item_id: Any
    category: Any = None


class PairCounts(NamedTuple):
    """Aggregated co-occurrence counts over one snapshot of baskets.

    ``pair_counts[(a, b)]`` is the number of distinct orders containing both
    items, ``single_counts[a]`` the number of distinct orders containing *a*.
    """

    pair_counts: Counter
    single_counts: Counter
    total_orders: int


class ScoredRule(NamedTuple):
    """Association rule ``product1 -> product2`` for one canonical pair."""

    product1: Any
    product2: Any
    support: float
    confidence: float
    reverse_confidence: float
    lift: float
    pair_count: int

    @property
    def pair(self) -> ItemPair:
        return (self.product1, self.product2)
