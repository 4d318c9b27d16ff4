"""Tests for support / confidence / lift scoring."""

from __future__ import annotations

import logging
import math
from collections import Counter

import pytest

from basketpairs import (
    EmptyDatasetError,
    InconsistentCountError,
    PairCounts,
    aggregate,
    rules_frame,
    score_pair,
    score_rules,
)

# O1: A, B | O2: A, B, C | O3: A
COUNTS = aggregate(
    {
        "O1": frozenset({"A", "B"}),
        "O2": frozenset({"A", "B", "C"}),
        "O3": frozenset({"A"}),
    }
)


class TestScorePair:
    def test_scenario(self) -> None:
        rule = score_pair(("A", "B"), COUNTS.pair_counts, COUNTS.single_counts, COUNTS.total_orders)
        assert rule.pair == ("A", "B")
        assert rule.pair_count == 2
        assert rule.support == pytest.approx(2 / 3)
        assert rule.confidence == pytest.approx(2 / 3)
        assert rule.reverse_confidence == pytest.approx(1.0)
        assert rule.lift == pytest.approx(1.0)

    def test_closed_form_lift(self) -> None:
        # (B, C): n_bc=1, n_b=2, n_c=1, N=3 -> 1 * 3 / (2 * 1)
        rule = score_pair(("B", "C"), COUNTS.pair_counts, COUNTS.single_counts, COUNTS.total_orders)
        assert rule.lift == pytest.approx(1.5)
        assert rule.lift == pytest.approx(rule.support / ((2 / 3) * (1 / 3)))

    def test_confidence_is_support_over_antecedent_share(self) -> None:
        for pair in COUNTS.pair_counts:
            rule = score_pair(pair, COUNTS.pair_counts, COUNTS.single_counts, COUNTS.total_orders)
            share_a = COUNTS.single_counts[pair[0]] / COUNTS.total_orders
            share_b = COUNTS.single_counts[pair[1]] / COUNTS.total_orders
            assert rule.confidence == pytest.approx(rule.support / share_a)
            assert rule.reverse_confidence == pytest.approx(rule.support / share_b)

    def test_empty_dataset(self) -> None:
        with pytest.raises(EmptyDatasetError, match="no orders"):
            score_pair(("A", "B"), Counter(), Counter(), 0)

    def test_empty_dataset_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            score_pair(("A", "B"), Counter(), Counter(), 0)

    def test_inconsistent_count(self) -> None:
        with pytest.raises(InconsistentCountError) as excinfo:
            score_pair(("A", "Z"), Counter({("A", "Z"): 1}), Counter({"A": 2}), 3)
        assert excinfo.value.pair == ("A", "Z")
        assert excinfo.value.count_b == 0


class TestScoreRules:
    def test_all_pairs_scored(self) -> None:
        rules = score_rules(COUNTS)
        assert [r.pair for r in rules] == [("A", "B"), ("A", "C"), ("B", "C")]
        for r in rules:
            assert 0.0 <= r.support <= 1.0
            assert 0.0 <= r.confidence <= 1.0
            assert r.lift >= 0.0
            assert math.isfinite(r.lift)

    def test_empty(self) -> None:
        with pytest.raises(EmptyDatasetError):
            score_rules(PairCounts(Counter(), Counter(), 0))

    def test_skip_inconsistent(self, caplog: pytest.LogCaptureFixture) -> None:
        broken = PairCounts(
            Counter({("A", "B"): 1, ("A", "Z"): 1}),
            Counter({"A": 2, "B": 1}),
            2,
        )
        with caplog.at_level(logging.WARNING, logger="basketpairs.scoring"):
            rules = score_rules(broken)
        assert [r.pair for r in rules] == [("A", "B")]
        assert "Skipping rule" in caplog.text

    def test_raise_inconsistent(self) -> None:
        broken = PairCounts(Counter({("A", "Z"): 1}), Counter({"A": 2}), 2)
        with pytest.raises(InconsistentCountError):
            score_rules(broken, on_inconsistent="raise")

    def test_bad_policy(self) -> None:
        with pytest.raises(ValueError, match="on_inconsistent"):
            score_rules(COUNTS, on_inconsistent="ignore")

    def test_idempotent(self) -> None:
        assert score_rules(COUNTS) == score_rules(COUNTS)


class TestRulesFrame:
    def test_default_columns(self) -> None:
        df = rules_frame(score_rules(COUNTS))
        assert list(df.columns) == ["product1", "product2", "support", "confidence", "lift"]
        assert len(df) == 3

    def test_all_metrics(self) -> None:
        metrics = ["pair_count", "support", "confidence", "reverse_confidence", "lift"]
        df = rules_frame(score_rules(COUNTS), return_metrics=metrics)
        assert list(df.columns) == ["product1", "product2"] + metrics
        assert df["pair_count"].tolist() == [2, 1, 1]

    def test_unknown_metric(self) -> None:
        with pytest.raises(ValueError, match="Unknown metric"):
            rules_frame(score_rules(COUNTS), return_metrics=["conviction"])

    def test_empty(self) -> None:
        df = rules_frame([])
        assert df.empty
        assert list(df.columns) == ["product1", "product2", "support", "confidence", "lift"]
