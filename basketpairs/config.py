"""Thresholds and basket-size bounds for pair-rule mining."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidConfigurationError

DEFAULT_MIN_BASKET_SIZE = 2
DEFAULT_MAX_BASKET_SIZE: int | None = None
DEFAULT_MIN_SUPPORT = 0.05
DEFAULT_MIN_CONFIDENCE = 0.3
DEFAULT_MIN_LIFT = 1.0

_METHODS = ("python", "sparse")


@dataclass(frozen=True)
class RuleConfig:
    """Options recognised by every stage of the pipeline.

    Parameters
    ----------
    min_basket_size : int, default=2
        Orders with fewer distinct items contribute no pairs.
    max_basket_size : int | None, default=None
        Orders with more distinct items contribute no pairs. ``None`` means
        unbounded; the classic "orders with 2 to 10 items" view uses ``10``.
    min_support : float, default=0.05
        Minimum fraction of all orders containing the pair, in ``[0, 1]``.
    min_confidence : float, default=0.3
        Minimum ``product1 -> product2`` confidence, in ``[0, 1]``.
    min_lift : float, default=1.0
        Lift threshold. Rules must satisfy ``lift > min_lift`` unless
        ``lift_inclusive`` is set, in which case ``lift >= min_lift``.
    top_n : int | None, default=None
        Keep only the first *top_n* rules after filtering and sorting.
    lift_inclusive : bool, default=False
        Switch the lift boundary from strict to inclusive.
    method : {'python', 'sparse'}, default='python'
        Aggregation backend. ``'sparse'`` computes counts from a SciPy
        co-occurrence matrix.
    n_shards : int, default=1
        Number of order partitions aggregated separately and merged.
    """

    min_basket_size: int = DEFAULT_MIN_BASKET_SIZE
    max_basket_size: int | None = DEFAULT_MAX_BASKET_SIZE
    min_support: float = DEFAULT_MIN_SUPPORT
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    min_lift: float = DEFAULT_MIN_LIFT
    top_n: int | None = None
    lift_inclusive: bool = False
    method: str = "python"
    n_shards: int = 1

    def validate(self) -> RuleConfig:
        """Return ``self`` or raise :class:`InvalidConfigurationError`."""
        if self.min_basket_size < 0:
            raise InvalidConfigurationError(f"`min_basket_size` must be >= 0. Got {self.min_basket_size}.")
        if self.max_basket_size is not None:
            if self.max_basket_size < 0:
                raise InvalidConfigurationError(f"`max_basket_size` must be >= 0. Got {self.max_basket_size}.")
            if self.min_basket_size > self.max_basket_size:
                raise InvalidConfigurationError(
                    f"`min_basket_size` ({self.min_basket_size}) cannot exceed "
                    f"`max_basket_size` ({self.max_basket_size})."
                )
        for name in ("min_support", "min_confidence"):
            value = getattr(self, name)
            if math.isnan(value) or not 0.0 <= value <= 1.0:
                raise InvalidConfigurationError(f"`{name}` must be within the interval `[0, 1]`. Got {value}.")
        if math.isnan(self.min_lift) or self.min_lift < 0.0:
            raise InvalidConfigurationError(f"`min_lift` must be a non-negative number. Got {self.min_lift}.")
        if self.top_n is not None and self.top_n < 1:
            raise InvalidConfigurationError(f"`top_n` must be a positive integer or None. Got {self.top_n}.")
        if self.method not in _METHODS:
            raise InvalidConfigurationError(f"`method` must be one of {_METHODS}. Got: {self.method!r}")
        if self.n_shards < 1:
            raise InvalidConfigurationError(f"`n_shards` must be >= 1. Got {self.n_shards}.")
        return self

    def replace(self, **changes: Any) -> RuleConfig:
        """Return a validated copy with *changes* applied."""
        return dataclasses.replace(self, **changes).validate()


def resolve_config(config: RuleConfig | None = None, **options: Any) -> RuleConfig:
    """Merge keyword *options* over *config* (or the defaults) and validate.

    Options set to ``None`` are ignored so callers can forward their own
    keyword defaults unchanged. ``max_basket_size`` and ``top_n`` can only be
    reset to ``None`` through an explicit :class:`RuleConfig`.
    """
    base = config if config is not None else RuleConfig()
    unknown = set(options) - {f.name for f in dataclasses.fields(RuleConfig)}
    if unknown:
        raise TypeError(f"Unknown option(s): {sorted(unknown)}")
    changes = {k: v for k, v in options.items() if v is not None}
    return base.replace(**changes)
