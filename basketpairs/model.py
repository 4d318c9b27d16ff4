from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from ._compat import frame_kind, from_pandas
from .config import RuleConfig, resolve_config
from .cooccurrence import aggregate, category_pair_counts, pair_counts_frame
from .ranking import filter_and_rank
from .scoring import rules_frame, score_rules
from .transactions import BasketIndex

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl
    from typing_extensions import Self

    from .typing import PairCounts, ScoredRule


class PairMiner:
    """Pair association rules over a transaction log.

    Builds per-order baskets, counts pair and single-item co-occurrence,
    scores every pair and exposes the filtered, ranked rule table along with
    the intermediate count views. Tables come back in the input's backend
    (pandas, Polars or PyArrow).

    Use :meth:`from_transactions` (or :meth:`from_pandas`,
    :meth:`from_polars`, :meth:`from_arrow`) to construct a miner.

    Examples
    --------
    >>> import pandas as pd
    >>> from basketpairs import PairMiner
    >>> df = pd.DataFrame({
    ...     "order_id": [1, 1, 2, 2, 2, 3],
    ...     "pizza_id": ["A", "B", "A", "B", "C", "A"],
    ... })
    >>> miner = PairMiner.from_transactions(df, min_support=0.3)
    >>> miner.association_rules(return_metrics=["support", "lift"])  # doctest: +SKIP
    """

    def __init__(
        self,
        data: Any,
        order_col: str | None = None,
        item_col: str | None = None,
        category_col: str | None = None,
        config: RuleConfig | None = None,
        verbose: int = 0,
        **options: Any,
    ) -> None:
        self.data = data
        self.order_col = order_col
        self.item_col = item_col
        self.category_col = category_col
        self.config = resolve_config(config, **options)
        self.verbose = verbose

        self._orig_df_type = frame_kind(data)
        self._index: BasketIndex | None = None
        self._counts: PairCounts | None = None
        self._rules: list[ScoredRule] | None = None
        self.fitted: bool = False

    def __repr__(self) -> str:
        c = self.config
        return (
            f"PairMiner(min_support={c.min_support}, min_confidence={c.min_confidence}, "
            f"min_lift={c.min_lift}, basket_size=[{c.min_basket_size}, {c.max_basket_size}])"
        )

    def __dir__(self) -> list[str]:
        return [k for k in super().__dir__() if not k.startswith("_")]

    @classmethod
    def from_transactions(
        cls,
        data: Any,
        order_col: str | None = None,
        item_col: str | None = None,
        category_col: str | None = None,
        config: RuleConfig | None = None,
        verbose: int = 0,
        **options: Any,
    ) -> Self:
        """Initialise the miner from a long-format transaction log.

        Parameters
        ----------
        data
            Pandas / Polars DataFrame, PyArrow Table, sequence of
            ``(order_id, item_id[, category])`` rows or list of baskets.
        order_col, item_col, category_col
            Column names; default to the first three columns.
        config
            Base configuration. Keyword *options* override its fields.
        verbose
            If > 0, print progress to standard output.
        **options
            Any :class:`~basketpairs.config.RuleConfig` field, e.g.
            ``min_support=0.05, max_basket_size=10``.
        """
        return cls(
            data,
            order_col=order_col,
            item_col=item_col,
            category_col=category_col,
            config=config,
            verbose=verbose,
            **options,
        )

    @classmethod
    def from_pandas(
        cls,
        df: pd.DataFrame,
        order_col: str | None = None,
        item_col: str | None = None,
        category_col: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(df, order_col, item_col)``."""
        return cls.from_transactions(df, order_col=order_col, item_col=item_col, category_col=category_col, **kwargs)

    @classmethod
    def from_polars(
        cls,
        df: pl.DataFrame,
        order_col: str | None = None,
        item_col: str | None = None,
        category_col: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(df, order_col, item_col)``."""
        return cls.from_transactions(df, order_col=order_col, item_col=item_col, category_col=category_col, **kwargs)

    @classmethod
    def from_arrow(
        cls,
        table: Any,
        order_col: str | None = None,
        item_col: str | None = None,
        category_col: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(table, order_col, item_col)``.

        Parameters
        ----------
        table : pyarrow.Table
            An Arrow table with order and item columns.
        order_col : str, optional
            Name of the order ID column.
        item_col : str, optional
            Name of the item column.
        category_col : str, optional
            Name of the category column.
        **kwargs
            Extra arguments forwarded to ``from_transactions``.
        """
        return cls.from_transactions(
            table, order_col=order_col, item_col=item_col, category_col=category_col, **kwargs
        )

    # ── fit ────────────────────────────────────────────────────────────

    def fit(self) -> Self:
        """Build the basket index and count co-occurrences.

        Calling ``fit`` again on a fitted miner is a no-op. Scoring happens
        on first access to the rule tables.
        """
        if self.fitted:
            return self

        t0 = 0.0
        if self.verbose:
            print(f"[{time.strftime('%X')}] Fitting {self!r}...")
            t0 = time.perf_counter()

        c = self.config
        self._index = BasketIndex.build(
            self.data,
            order_col=self.order_col,
            item_col=self.item_col,
            category_col=self.category_col,
            verbose=self.verbose,
        )
        self._counts = aggregate(
            self._index,
            min_size=c.min_basket_size,
            max_size=c.max_basket_size,
            method=c.method,
            n_shards=c.n_shards,
            verbose=self.verbose,
        )
        self.fitted = True

        if self.verbose:
            print(f"[{time.strftime('%X')}] Fitted in {time.perf_counter() - t0:.2f}s.")

        return self

    def _scored(self) -> list[ScoredRule]:
        if self._rules is None:
            self._rules = score_rules(self.counts)
        return self._rules

    @property
    def index(self) -> BasketIndex:
        self.fit()
        assert self._index is not None
        return self._index

    @property
    def counts(self) -> PairCounts:
        self.fit()
        assert self._counts is not None
        return self._counts

    @property
    def total_orders(self) -> int:
        return self.index.total_orders

    # ── outputs ────────────────────────────────────────────────────────

    def rules(self, **options: Any) -> list[ScoredRule]:
        """Filtered, ranked :class:`~basketpairs.typing.ScoredRule` list.

        Keyword *options* override the miner's thresholds for this call only.

        Raises
        ------
        EmptyDatasetError
            If the transaction log holds no orders.
        """
        config = resolve_config(self.config, **options)
        return filter_and_rank(self._scored(), config=config)

    def association_rules(
        self,
        top_n: int | None = None,
        return_metrics: list[str] | None = None,
        **options: Any,
    ) -> Any:
        """Scored pairs that clear every threshold, best first.

        Parameters
        ----------
        top_n : int | None
            Keep only the first *top_n* rules (applied after sorting).
        return_metrics : list[str] | None
            Metric columns to include. Defaults to ``support``,
            ``confidence`` and ``lift``.
        **options
            Threshold overrides (``min_support``, ``min_confidence``,
            ``min_lift``, ``lift_inclusive``).

        Returns
        -------
        DataFrame
            Columns ``product1``, ``product2`` and the requested metrics,
            sorted by support then lift.
        """
        ranked = self.rules(top_n=top_n, **options)
        return self._convert_to_orig_type(rules_frame(ranked, return_metrics=return_metrics))

    def scored_rules(self, return_metrics: list[str] | None = None) -> Any:
        """Every counted pair with its scores, unfiltered, ranked by support then lift."""
        open_config = RuleConfig(min_support=0.0, min_confidence=0.0, min_lift=0.0, lift_inclusive=True)
        ranked = filter_and_rank(self._scored(), config=open_config)
        return self._convert_to_orig_type(rules_frame(ranked, return_metrics=return_metrics))

    def pair_counts(self, top_n: int | None = None, label_sep: str | None = None) -> Any:
        """Orders per pair within the basket-size window, most frequent first."""
        return self._convert_to_orig_type(pair_counts_frame(self.counts, top_n=top_n, label_sep=label_sep))

    def order_pair_counts(self) -> Any:
        """Number of unique pairs per order within the basket-size window."""
        c = self.config
        return self._convert_to_orig_type(self.index.order_pair_counts(c.min_basket_size, c.max_basket_size))

    def category_pair_counts(self, top_n: int | None = None, label_sep: str | None = None) -> Any:
        """Orders per category pair, most frequent first."""
        df = category_pair_counts(
            self.data,
            order_col=self.order_col,
            item_col=self.item_col,
            category_col=self.category_col,
            top_n=top_n,
            label_sep=label_sep,
            verbose=self.verbose,
        )
        return self._convert_to_orig_type(df)

    def _convert_to_orig_type(self, df: pd.DataFrame) -> Any:
        """Helper to convert the resulting pandas DataFrame back to the input DataFrame type."""
        return from_pandas(df, self._orig_df_type)


def association_pairs(
    data: Any,
    order_col: str | None = None,
    item_col: str | None = None,
    category_col: str | None = None,
    config: RuleConfig | None = None,
    return_metrics: list[str] | None = None,
    verbose: int = 0,
    **options: Any,
) -> Any:
    """Mine, score, filter and rank pair association rules in one call.

    This module-level function relies on :class:`PairMiner`.

    Examples
    --------
    >>> import basketpairs
    >>> rules = basketpairs.association_pairs(
    ...     orders_df, order_col="order_id", item_col="pizza_id",
    ...     max_basket_size=10, top_n=10,
    ... )  # doctest: +SKIP
    """
    miner = PairMiner.from_transactions(
        data,
        order_col=order_col,
        item_col=item_col,
        category_col=category_col,
        config=config,
        verbose=verbose,
        **options,
    )
    return miner.association_rules(return_metrics=return_metrics)
