"""Threshold filtering and deterministic ranking of scored rules."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .config import RuleConfig, resolve_config
from .pairs import sort_key
from .typing import ScoredRule

if TYPE_CHECKING:
    import pandas as pd


def _rank_key(support: float, lift: float, product1: Any, product2: Any) -> tuple:
    return (-support, -lift, sort_key(product1), sort_key(product2))


def _passes(support: float, confidence: float, lift: float, config: RuleConfig) -> bool:
    if support < config.min_support or confidence < config.min_confidence:
        return False
    if config.lift_inclusive:
        return lift >= config.min_lift
    return lift > config.min_lift


def filter_and_rank(
    rules: Iterable[ScoredRule],
    min_support: float | None = None,
    min_confidence: float | None = None,
    min_lift: float | None = None,
    top_n: int | None = None,
    lift_inclusive: bool | None = None,
    config: RuleConfig | None = None,
) -> list[ScoredRule]:
    """Keep the rules that clear every threshold and rank them.

    A rule survives when ``support >= min_support``, ``confidence >=
    min_confidence`` and ``lift > min_lift`` (``lift >= min_lift`` with
    ``lift_inclusive=True``). Survivors are ordered by support, then lift,
    both descending, then by canonical pair. *top_n* truncates the ranked
    list.

    Parameters
    ----------
    rules
        Scored rules. Not modified.
    min_support, min_confidence, min_lift, top_n, lift_inclusive
        Thresholds. Any that is given overrides the matching field of
        *config*; the rest fall back to *config*, or to the
        :class:`~basketpairs.config.RuleConfig` defaults (0.05, 0.3, 1.0,
        no limit, strict lift).
    config
        A :class:`~basketpairs.config.RuleConfig` carrying the base thresholds.

    Returns
    -------
    list[ScoredRule]
        A new list.
    """
    config = resolve_config(
        config,
        min_support=min_support,
        min_confidence=min_confidence,
        min_lift=min_lift,
        top_n=top_n,
        lift_inclusive=lift_inclusive,
    )

    kept = [r for r in rules if _passes(r.support, r.confidence, r.lift, config)]
    kept.sort(key=lambda r: _rank_key(r.support, r.lift, r.product1, r.product2))
    if config.top_n is not None:
        kept = kept[: config.top_n]
    return kept


def rank_frame(
    df: pd.DataFrame,
    min_support: float | None = None,
    min_confidence: float | None = None,
    min_lift: float | None = None,
    top_n: int | None = None,
    lift_inclusive: bool | None = None,
    config: RuleConfig | None = None,
) -> pd.DataFrame:
    """DataFrame counterpart of :func:`filter_and_rank`.

    *df* needs ``product1``, ``product2``, ``support``, ``confidence`` and
    ``lift`` columns, as produced by
    :func:`basketpairs.scoring.rules_frame`.
    """
    for col in ("product1", "product2", "support", "confidence", "lift"):
        if col not in df.columns:
            raise ValueError(f"The input DataFrame must contain a '{col}' column")

    config = resolve_config(
        config,
        min_support=min_support,
        min_confidence=min_confidence,
        min_lift=min_lift,
        top_n=top_n,
        lift_inclusive=lift_inclusive,
    )

    records = zip(
        df["support"].tolist(),
        df["confidence"].tolist(),
        df["lift"].tolist(),
        df["product1"].tolist(),
        df["product2"].tolist(),
    )
    ranked = sorted(
        (
            (_rank_key(support, lift, p1, p2), pos)
            for pos, (support, confidence, lift, p1, p2) in enumerate(records)
            if _passes(support, confidence, lift, config)
        ),
    )
    positions = [pos for _, pos in ranked]
    if config.top_n is not None:
        positions = positions[: config.top_n]
    return df.iloc[positions].reset_index(drop=True)
