"""basketpairs – market-basket pair association rules (support, confidence, lift)."""

from .analytics import find_substitutes
from .config import RuleConfig
from .cooccurrence import aggregate, category_pair_counts, merge_counts, pair_counts_frame
from .exceptions import (
    BasketPairsError,
    EmptyDatasetError,
    InconsistentCountError,
    InvalidConfigurationError,
)
from .model import PairMiner, association_pairs
from .pairs import canonical_pair, enumerate_pairs, pair_label
from .ranking import filter_and_rank, rank_frame
from .scoring import rules_frame, score_pair, score_rules
from .transactions import BasketIndex, build_baskets
from .typing import PairCounts, ScoredRule, TransactionRow

__all__ = [
    "association_pairs",
    "PairMiner",
    "RuleConfig",
    "BasketIndex",
    "build_baskets",
    "TransactionRow",
    "canonical_pair",
    "enumerate_pairs",
    "pair_label",
    "aggregate",
    "merge_counts",
    "PairCounts",
    "pair_counts_frame",
    "category_pair_counts",
    "score_pair",
    "score_rules",
    "ScoredRule",
    "rules_frame",
    "filter_and_rank",
    "rank_frame",
    "find_substitutes",
    "BasketPairsError",
    "EmptyDatasetError",
    "InconsistentCountError",
    "InvalidConfigurationError",
]
