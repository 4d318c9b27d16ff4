"""Tests for threshold filtering and ranking."""

from __future__ import annotations

import pandas as pd
import pytest

from basketpairs import (
    InvalidConfigurationError,
    RuleConfig,
    ScoredRule,
    aggregate,
    filter_and_rank,
    rank_frame,
    rules_frame,
    score_rules,
)

SCENARIO = score_rules(
    aggregate(
        {
            "O1": frozenset({"A", "B"}),
            "O2": frozenset({"A", "B", "C"}),
            "O3": frozenset({"A"}),
        }
    )
)


def _rule(p1: str, p2: str, support: float, confidence: float, lift: float) -> ScoredRule:
    return ScoredRule(p1, p2, support, confidence, confidence, lift, 1)


RULES = [
    _rule("a", "b", 0.10, 0.50, 1.2),
    _rule("a", "c", 0.20, 0.40, 1.1),
    _rule("b", "c", 0.20, 0.40, 1.5),
    _rule("c", "d", 0.04, 0.90, 3.0),  # support too low
    _rule("d", "e", 0.30, 0.20, 2.0),  # confidence too low
    _rule("e", "f", 0.30, 0.90, 0.9),  # negative association
    _rule("f", "g", 0.10, 0.50, 1.2),  # full tie with (a, b)
]


def test_strict_lift_excludes_independent_pair() -> None:
    kept = filter_and_rank(SCENARIO, min_support=0.05, min_confidence=0.3, min_lift=1.0)
    assert ("A", "B") not in [r.pair for r in kept]
    # (B, C) has lift 1.5 and confidence 0.5
    assert [r.pair for r in kept] == [("B", "C")]


def test_inclusive_lift_keeps_independent_pair() -> None:
    kept = filter_and_rank(SCENARIO, min_support=0.05, min_confidence=0.3, min_lift=1.0, lift_inclusive=True)
    # (A, C) has lift 1.0 and confidence 1/3; equal support is tie-broken by lift
    assert [r.pair for r in kept] == [("A", "B"), ("B", "C"), ("A", "C")]


def test_thresholds_and_order() -> None:
    kept = filter_and_rank(RULES)
    assert [r.pair for r in kept] == [("b", "c"), ("a", "c"), ("a", "b"), ("f", "g")]


def test_top_n_applied_after_sort() -> None:
    kept = filter_and_rank(list(reversed(RULES)), top_n=2)
    assert [r.pair for r in kept] == [("b", "c"), ("a", "c")]


def test_input_not_mutated() -> None:
    rules = list(RULES)
    filter_and_rank(rules, top_n=1)
    assert rules == RULES


def test_config_object() -> None:
    config = RuleConfig(min_support=0.0, min_confidence=0.0, min_lift=0.0, top_n=1)
    kept = filter_and_rank(RULES, config=config)
    assert [r.pair for r in kept] == [("d", "e")]


def test_keywords_override_config() -> None:
    config = RuleConfig(min_support=0.0, min_confidence=0.0, min_lift=0.0)
    kept = filter_and_rank(RULES, config=config, top_n=1)
    assert [r.pair for r in kept] == [("d", "e")]
    # unset keywords keep the config values rather than the defaults
    assert len(filter_and_rank(RULES, config=config)) == len(RULES)


def test_keyword_threshold_overrides_config() -> None:
    config = RuleConfig(min_support=0.0, min_confidence=0.0, min_lift=0.0)
    kept = filter_and_rank(RULES, config=config, min_lift=1.9)
    assert [r.pair for r in kept] == [("d", "e"), ("c", "d")]


def test_invalid_threshold() -> None:
    with pytest.raises(InvalidConfigurationError, match="min_support"):
        filter_and_rank(RULES, min_support=1.5)


def test_empty_input() -> None:
    assert filter_and_rank([]) == []


class TestRankFrame:
    def test_matches_list_ranking(self) -> None:
        df = rules_frame(RULES)
        ranked = rank_frame(df)
        assert list(zip(ranked["product1"], ranked["product2"])) == [
            ("b", "c"),
            ("a", "c"),
            ("a", "b"),
            ("f", "g"),
        ]
        assert ranked.index.tolist() == [0, 1, 2, 3]

    def test_top_n(self) -> None:
        ranked = rank_frame(rules_frame(RULES), top_n=1)
        assert len(ranked) == 1

    def test_keywords_override_config(self) -> None:
        config = RuleConfig(min_support=0.0, min_confidence=0.0, min_lift=0.0)
        ranked = rank_frame(rules_frame(RULES), config=config, top_n=2)
        assert list(zip(ranked["product1"], ranked["product2"])) == [("d", "e"), ("e", "f")]

    def test_missing_column(self) -> None:
        with pytest.raises(ValueError, match="lift"):
            rank_frame(pd.DataFrame({"product1": [], "product2": [], "support": [], "confidence": []}))

    def test_input_not_mutated(self) -> None:
        df = rules_frame(RULES)
        before = df.copy()
        rank_frame(df, top_n=2)
        pd.testing.assert_frame_equal(df, before)
