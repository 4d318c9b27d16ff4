"""
basketpairs: Getting Started
============================

The simplest possible example: turn a small pizza order log into
per-pair order counts, then score and rank pair association rules.
"""

import pandas as pd

from basketpairs import PairMiner

# A small pizza order log (6 orders, long format, one row per pizza sold)
orders = pd.DataFrame(
    {
        "order_id": [1, 1, 2, 2, 2, 3, 3, 4, 5, 5, 6, 6, 6],
        "pizza_id": [
            "margherita", "hawaiian",
            "margherita", "hawaiian", "pepperoni",
            "margherita", "pepperoni",
            "veggie",
            "hawaiian", "pepperoni",
            "margherita", "hawaiian", "hawaiian",
        ],
        "category": [
            "Classic", "Classic",
            "Classic", "Classic", "Classic",
            "Classic", "Classic",
            "Veggie",
            "Classic", "Classic",
            "Classic", "Classic", "Classic",
        ],
    }
)

print("Input order log:")
print(orders.to_string(index=False))
print()

miner = PairMiner.from_transactions(orders, max_basket_size=10, min_support=0.05, min_confidence=0.3)

# ── 1. Pairs per order ───────────────────────────────────────────────────────
print("Unique pairs per order:")
print(miner.order_pair_counts().to_string(index=False))
print()

# ── 2. Orders per pair ───────────────────────────────────────────────────────
print("Top pairs by order count:")
print(miner.pair_counts(top_n=10, label_sep="-").to_string(index=False))
print()

# ── 3. Scored rules ──────────────────────────────────────────────────────────
print("Association rules (support ≥ 0.05, confidence ≥ 0.3, lift > 1):")
rules = miner.association_rules(return_metrics=["support", "confidence", "reverse_confidence", "lift"])
print(rules.to_string(index=False))
