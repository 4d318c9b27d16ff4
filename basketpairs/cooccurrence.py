"""Order-level co-occurrence counting for item pairs and single items."""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidConfigurationError
from .pairs import check_size_window, enumerate_pairs, in_size_window, pair_label, sort_key
from .transactions import BasketIndex
from .typing import Basket, PairCounts

if TYPE_CHECKING:
    import pandas as pd

    from ._compat import DataFrame

_METHODS = ("python", "sparse")


def aggregate(
    baskets: Mapping[Any, Basket] | BasketIndex,
    min_size: int = 0,
    max_size: int | None = None,
    method: str = "python",
    n_shards: int = 1,
    verbose: int = 0,
) -> PairCounts:
    """Count, for every pair and every item, the distinct orders containing it.

    Parameters
    ----------
    baskets
        ``order_id -> basket`` mapping or a :class:`BasketIndex`.
    min_size, max_size
        Basket-size window for pair generation. Single counts always cover
        every basket.
    method : {'python', 'sparse'}, default='python'
        ``'python'`` enumerates pairs per basket; ``'sparse'`` reads them off a
        SciPy co-occurrence matrix. Both give identical counts.
    n_shards : int, default=1
        Partition orders by hash and merge the per-shard counts. Only used by
        the ``'python'`` method.
    verbose
        If > 0, print progress to standard output.

    Returns
    -------
    PairCounts
        ``(pair_counts, single_counts, total_orders)``. With a
        :class:`BasketIndex`, ``total_orders`` is the index's order count,
        which includes orders that had no usable item rows.

    Raises
    ------
    InvalidConfigurationError
        If the size window is empty, *method* is unknown or *n_shards* < 1.
    """
    if method not in _METHODS:
        raise InvalidConfigurationError(f"`method` must be one of {_METHODS}. Got: {method!r}")
    if n_shards < 1:
        raise InvalidConfigurationError(f"`n_shards` must be >= 1. Got {n_shards}.")
    check_size_window(min_size, max_size)

    total_orders: int | None = None
    if isinstance(baskets, BasketIndex):
        total_orders = baskets.total_orders
        baskets = baskets.baskets

    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Aggregating {len(baskets):,} baskets (method={method}, shards={n_shards})...")
        t0 = time.perf_counter()

    if method == "sparse":
        result = _aggregate_sparse(baskets, min_size, max_size)
    elif n_shards == 1:
        result = _aggregate_shard(baskets.values(), min_size, max_size)
    else:
        shards: list[list[Basket]] = [[] for _ in range(n_shards)]
        for order, basket in baskets.items():
            shards[hash(order) % n_shards].append(basket)
        result = merge_counts(_aggregate_shard(shard, min_size, max_size) for shard in shards)

    if total_orders is not None:
        result = result._replace(total_orders=total_orders)

    if verbose:
        print(
            f"[{time.strftime('%X')}] Counted {len(result.pair_counts):,} pairs over "
            f"{len(result.single_counts):,} items in {time.perf_counter() - t0:.2f}s."
        )

    return result


def merge_counts(parts: Iterable[PairCounts]) -> PairCounts:
    """Sum partial counts from disjoint order shards."""
    pair_counts: Counter = Counter()
    single_counts: Counter = Counter()
    total_orders = 0
    for part in parts:
        pair_counts.update(part.pair_counts)
        single_counts.update(part.single_counts)
        total_orders += part.total_orders
    return PairCounts(pair_counts, single_counts, total_orders)


def _aggregate_shard(baskets: Iterable[Basket], min_size: int, max_size: int | None) -> PairCounts:
    pair_counts: Counter = Counter()
    single_counts: Counter = Counter()
    total_orders = 0
    for basket in baskets:
        total_orders += 1
        single_counts.update(basket)
        pair_counts.update(enumerate_pairs(basket, min_size, max_size))
    return PairCounts(pair_counts, single_counts, total_orders)


def _aggregate_sparse(baskets: Mapping[Any, Basket], min_size: int, max_size: int | None) -> PairCounts:
    import numpy as np
    from scipy import sparse as sp

    if not baskets:
        return PairCounts(Counter(), Counter(), 0)

    index = BasketIndex(baskets)
    csr, orders, items = index.to_onehot()
    csr = csr.astype(np.int64)

    single_counts: Counter = Counter()
    for item, count in zip(items, np.asarray(csr.sum(axis=0)).ravel().tolist()):
        if count:
            single_counts[item] = int(count)

    keep = np.array([in_size_window(index.item_counts[o], min_size, max_size) for o in orders], dtype=bool)
    windowed = csr[keep]

    # Columns are in canonical item order, so the strict upper triangle holds a < b.
    cooc = sp.triu(windowed.T @ windowed, k=1).tocoo()
    pair_counts: Counter = Counter()
    for i, j, count in zip(cooc.row.tolist(), cooc.col.tolist(), cooc.data.tolist()):
        if count:
            pair_counts[(items[i], items[j])] = int(count)

    return PairCounts(pair_counts, single_counts, len(orders))


def pair_counts_frame(
    counts: PairCounts | Counter,
    top_n: int | None = None,
    label_sep: str | None = None,
    names: tuple[str, str] = ("product1", "product2"),
) -> pd.DataFrame:
    """Pair counts as a table sorted by ``order_count`` descending.

    Parameters
    ----------
    counts
        Aggregation result, or a bare pair counter.
    top_n
        Keep the first *top_n* rows after sorting.
    label_sep
        When given, return a single ``product_pair`` column rendered as
        ``"a<sep>b"`` instead of two id columns.
    names
        Names of the two id columns.

    Returns
    -------
    pandas.DataFrame
        Columns ``product1, product2, order_count`` (or ``product_pair,
        order_count``).
    """
    import pandas as pd

    pair_counts = counts.pair_counts if isinstance(counts, PairCounts) else counts
    ranked = sorted(
        pair_counts.items(),
        key=lambda kv: (-kv[1], sort_key(kv[0][0]), sort_key(kv[0][1])),
    )
    if top_n is not None:
        ranked = ranked[:top_n]

    if label_sep is not None:
        # product1 -> product_pair, category1 -> category_pair
        column = f"{names[0].rstrip('1')}_pair"
        return pd.DataFrame(
            {
                column: [pair_label(pair, label_sep) for pair, _ in ranked],
                "order_count": [count for _, count in ranked],
            }
        )

    return pd.DataFrame(
        {
            names[0]: [pair[0] for pair, _ in ranked],
            names[1]: [pair[1] for pair, _ in ranked],
            "order_count": [count for _, count in ranked],
        }
    )


def category_pair_counts(
    data: DataFrame | Any,
    order_col: str | None = None,
    item_col: str | None = None,
    category_col: str | None = None,
    top_n: int | None = None,
    label_sep: str | None = None,
    verbose: int = 0,
) -> pd.DataFrame:
    """Count the orders in which each pair of categories is bought together.

    Same grouping and enumeration as the item pipeline, keyed by category.
    No support, confidence or lift is computed for categories.

    Returns
    -------
    pandas.DataFrame
        Columns ``category1, category2, order_count`` (or ``category_pair,
        order_count`` when *label_sep* is given).
    """
    index = BasketIndex.build(
        data, order_col=order_col, item_col=item_col, category_col=category_col, key="category", verbose=verbose
    )
    counts = aggregate(index, verbose=verbose)
    return pair_counts_frame(counts, top_n=top_n, label_sep=label_sep, names=("category1", "category2"))
