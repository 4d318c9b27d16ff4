from __future__ import annotations

import time
import typing
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ._compat import to_pandas
from .pairs import check_size_window, in_size_window, sort_key
from .typing import Basket

if TYPE_CHECKING:
    import pandas as pd

    from ._compat import DataFrame

_KEYS = ("item", "category")


class BasketIndex:
    """Per-order baskets built from a long-format transaction log.

    Each basket is the ``frozenset`` of distinct ids in one order, so an item
    bought twice in the same order is a single membership fact. Use
    :meth:`build` rather than the constructor.

    Attributes
    ----------
    baskets : dict
        ``order_id -> frozenset`` of distinct ids.
    item_counts : dict
        ``order_id -> number of distinct ids``.
    total_orders : int
        Number of distinct non-null order ids in the source rows. Orders whose
        item ids were all missing count here but have no basket.
    """

    def __init__(self, baskets: Mapping[Any, Basket], key: str = "item", total_orders: int | None = None) -> None:
        self.baskets: dict[Any, Basket] = dict(baskets)
        self.item_counts: dict[Any, int] = {order: len(items) for order, items in self.baskets.items()}
        self.key = key
        self._total_orders = len(self.baskets) if total_orders is None else total_orders

    def __repr__(self) -> str:
        return f"BasketIndex(total_orders={self.total_orders}, key={self.key!r})"

    def __len__(self) -> int:
        return len(self.baskets)

    @property
    def total_orders(self) -> int:
        return self._total_orders

    @property
    def items(self) -> list[Any]:
        """Every distinct id across all baskets, in canonical order."""
        seen: set[Any] = set()
        for basket in self.baskets.values():
            seen.update(basket)
        return sorted(seen, key=sort_key)

    @classmethod
    def build(
        cls,
        data: DataFrame | Sequence[Sequence[Any]] | Any,
        order_col: str | None = None,
        item_col: str | None = None,
        category_col: str | None = None,
        key: str = "item",
        verbose: int = 0,
    ) -> BasketIndex:
        """Group transaction rows into per-order baskets.

        Parameters
        ----------
        data
            One of:

            - **Pandas / Polars DataFrame** or **PyArrow Table** with an order
              column, an item column and (optionally) a category column.
            - **Sequence of row tuples** ``(order_id, item_id[, category])``
              such as :class:`~basketpairs.typing.TransactionRow`.
            - **List of lists** where each inner list holds the items of one
              order, e.g. ``[["margherita", "hawaiian"], ["margherita"]]``.
              Orders are numbered by position.

        order_col
            Order column. Defaults to the first column.
        item_col
            Item column. Defaults to the second column.
        category_col
            Category column. Defaults to the third column when present.
        key : {'item', 'category'}, default='item'
            Which id to collect into baskets.
        verbose
            If > 0, print progress to standard output.

        Returns
        -------
        BasketIndex

        Examples
        --------
        >>> import pandas as pd
        >>> df = pd.DataFrame({
        ...     "order_id": [1, 1, 1, 2, 2, 3],
        ...     "pizza_id": [3, 4, 4, 3, 5, 8],
        ... })
        >>> index = BasketIndex.build(df)
        >>> index.total_orders, index.baskets[1]
        (3, frozenset({3, 4}))
        """
        if key not in _KEYS:
            raise ValueError(f"`key` must be one of {_KEYS}. Got: {key!r}")

        import pandas as pd

        data = to_pandas(data)

        if isinstance(data, pd.DataFrame):
            baskets, total_orders = _from_dataframe(data, order_col, item_col, category_col, key=key, verbose=verbose)
        elif isinstance(data, (list, tuple)):
            baskets, total_orders = _from_rows(data, key=key, verbose=verbose)
        else:
            raise TypeError(f"Expected a Pandas/Polars DataFrame, PyArrow Table or sequence of rows, got {type(data)}")

        return cls(baskets, key=key, total_orders=total_orders)

    def filter_size(self, min_size: int = 0, max_size: int | None = None) -> dict[Any, Basket]:
        """Return the baskets whose distinct-item count is within ``[min_size, max_size]``."""
        check_size_window(min_size, max_size)
        return {
            order: basket
            for order, basket in self.baskets.items()
            if in_size_window(self.item_counts[order], min_size, max_size)
        }

    def order_pair_counts(self, min_size: int = 0, max_size: int | None = None) -> pd.DataFrame:
        """Number of unique pairs each order can form.

        Returns
        -------
        pandas.DataFrame
            Columns ``order_id`` and ``unique_product_pairs`` sorted by
            ``order_id``. Orders outside the size window are omitted.
        """
        import pandas as pd

        orders = sorted(self.filter_size(min_size, max_size), key=sort_key)
        counts = [self.item_counts[o] * (self.item_counts[o] - 1) // 2 for o in orders]
        return pd.DataFrame({"order_id": orders, "unique_product_pairs": counts})

    def to_onehot(self) -> tuple[Any, list[Any], list[Any]]:
        """Orders x items boolean CSR matrix.

        Returns
        -------
        tuple[scipy.sparse.csr_matrix, list, list]
            The matrix, the order ids (rows) and the item ids (columns), both
            in canonical order.
        """
        import numpy as np
        from scipy import sparse as sp

        orders = sorted(self.baskets, key=sort_key)
        items = self.items
        item_to_idx = {item: i for i, item in enumerate(items)}

        row_idx: list[int] = []
        col_idx: list[int] = []
        for i, order in enumerate(orders):
            for item in self.baskets[order]:
                row_idx.append(i)
                col_idx.append(item_to_idx[item])

        data = np.ones(len(row_idx), dtype=bool)
        csr = sp.csr_matrix(
            (data, (np.array(row_idx, dtype=np.int64), np.array(col_idx, dtype=np.int64))),
            shape=(len(orders), len(items)),
        )
        return csr, orders, items

    def to_frame(self) -> pd.DataFrame:
        """One-hot encoded baskets as a sparse boolean pandas DataFrame indexed by order."""
        import pandas as pd

        csr, orders, items = self.to_onehot()
        return pd.DataFrame.sparse.from_spmatrix(
            csr,
            index=orders,
            columns=[str(item) for item in items],
        ).astype(pd.SparseDtype("bool", fill_value=False))


def build_baskets(
    data: DataFrame | Sequence[Sequence[Any]] | Any,
    order_col: str | None = None,
    item_col: str | None = None,
    category_col: str | None = None,
    key: str = "item",
    verbose: int = 0,
) -> BasketIndex:
    """Shorthand for :meth:`BasketIndex.build`."""
    return BasketIndex.build(
        data, order_col=order_col, item_col=item_col, category_col=category_col, key=key, verbose=verbose
    )


def _from_rows(
    rows: Sequence[Sequence[Any]], key: str = "item", verbose: int = 0
) -> tuple[dict[Any, Basket], int]:
    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Grouping {len(rows):,} rows into baskets...")
        t0 = time.perf_counter()

    if not rows:
        return {}, 0

    # A sequence of scalars-or-tuples is a row log; a sequence of lists is one basket per order.
    first = rows[0]
    is_row_log = isinstance(first, tuple)

    grouped: dict[Any, set[Any]] = {}
    if is_row_log:
        pos = 1 if key == "item" else 2
        order_ids: set[Any] = set()
        for row in rows:
            if row[0] is None:
                continue
            order_ids.add(row[0])
            if len(row) <= pos:
                raise ValueError(f"Row {row!r} has no {key} field.")
            value = row[pos]
            if value is None:
                continue
            grouped.setdefault(row[0], set()).add(value)
        total_orders = len(order_ids)
    else:
        if key == "category":
            raise ValueError("`key='category'` needs rows with a category field, not a list of baskets.")
        for order, basket in enumerate(rows):
            items = {item for item in basket if item is not None}
            if items:
                grouped[order] = items
        total_orders = len(rows)

    baskets = {order: frozenset(items) for order, items in grouped.items()}

    if verbose:
        print(f"[{time.strftime('%X')}] Built {len(baskets):,} baskets in {time.perf_counter() - t0:.2f}s.")

    return baskets, total_orders


def _from_dataframe(
    df: pd.DataFrame,
    order_col: str | None,
    item_col: str | None,
    category_col: str | None,
    key: str = "item",
    verbose: int = 0,
) -> tuple[dict[Any, Basket], int]:
    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Grouping DataFrame (shape={df.shape}) into baskets...")
        t0 = time.perf_counter()

    cols = list(df.columns)

    if len(cols) < 2:
        raise ValueError(f"DataFrame must have at least 2 columns (order id + item), got {len(cols)}: {cols}")

    ord_col = order_col if order_col is not None else cols[0]
    itm_col = item_col if item_col is not None else cols[1]
    if category_col is None and key == "category":
        if len(cols) < 3:
            raise ValueError(f"No category column given and DataFrame has only {len(cols)} columns: {cols}")
        category_col = cols[2]

    for name in (ord_col, itm_col, category_col):
        if name is not None and name not in df.columns:
            raise ValueError(f"Column '{name}' not found. Available columns: {cols}")

    value_col = itm_col if key == "item" else typing.cast(str, category_col)

    total_orders = int(df[ord_col].nunique(dropna=True))
    pairs = df[[ord_col, value_col]].dropna().drop_duplicates()
    orders = pairs[ord_col].tolist()
    values = pairs[value_col].tolist()

    grouped: dict[Any, set[Any]] = {}
    for order, value in zip(orders, values):
        grouped.setdefault(order, set()).add(value)
    baskets = {order: frozenset(items) for order, items in grouped.items()}

    if verbose:
        print(f"[{time.strftime('%X')}] Built {len(baskets):,} baskets in {time.perf_counter() - t0:.2f}s.")

    return baskets, total_orders
