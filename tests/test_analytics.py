import pandas as pd
import pytest

from basketpairs import PairMiner
from basketpairs.analytics import find_substitutes


def test_find_substitutes():
    # Scored pairs where A and B cannibalize each other
    data = {
        "product1": ["A", "C"],
        "product2": ["B", "D"],
        "support": [0.05, 0.4],
        "confidence": [0.1, 0.8],
        "lift": [0.4, 2.5],  # 0.4 indicates negative correlation (cannibalization)
    }

    rules_df = pd.DataFrame(data)

    subs = find_substitutes(rules_df, max_lift=0.8)

    assert len(subs) == 1
    assert subs.iloc[0]["product1"] == "A"
    assert subs.iloc[0]["product2"] == "B"
    assert subs.iloc[0]["lift"] == 0.4


def test_find_substitutes_from_miner():
    # margherita and hawaiian are each bought in 3 of 5 orders but only once together
    df = pd.DataFrame(
        {
            "order_id": [1, 1, 2, 3, 4, 4, 5],
            "pizza_id": ["margherita", "hawaiian", "margherita", "margherita", "hawaiian", "pepperoni", "hawaiian"],
        }
    )
    scored = PairMiner.from_transactions(df).scored_rules()

    subs = find_substitutes(scored, max_lift=0.8)

    assert list(zip(subs["product1"], subs["product2"])) == [("hawaiian", "margherita")]
    assert subs.iloc[0]["lift"] == pytest.approx(1 * 5 / (3 * 3))


def test_find_substitutes_missing_column():
    with pytest.raises(ValueError, match="lift"):
        find_substitutes(pd.DataFrame({"confidence": [0.5]}))
