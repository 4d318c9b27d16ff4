"""Canonical item pairs and per-basket pair enumeration."""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from typing import Any

from .exceptions import InvalidConfigurationError
from .typing import ItemPair


def sort_key(item: Any) -> tuple[bool, Any]:
    """Total order over item ids: numbers first (numerically), then strings."""
    return (isinstance(item, str), item)


def canonical_pair(a: Any, b: Any) -> ItemPair:
    """Return the ``(a, b)`` pair with its members in canonical order.

    Raises
    ------
    ValueError
        If *a* and *b* are the same item.
    """
    if a == b:
        raise ValueError(f"A pair needs two distinct items, got {a!r} twice.")
    return (a, b) if sort_key(a) < sort_key(b) else (b, a)


def pair_label(pair: ItemPair, sep: str = "-") -> str:
    """Render a pair as ``"a-b"`` for reporting columns."""
    return f"{pair[0]}{sep}{pair[1]}"


def check_size_window(min_size: int = 0, max_size: int | None = None) -> None:
    """Raise :class:`InvalidConfigurationError` for an empty or negative basket-size window."""
    if min_size < 0:
        raise InvalidConfigurationError(f"`min_size` must be >= 0. Got {min_size}.")
    if max_size is not None and min_size > max_size:
        raise InvalidConfigurationError(f"`min_size` ({min_size}) cannot exceed `max_size` ({max_size}).")


def in_size_window(n: int, min_size: int = 0, max_size: int | None = None) -> bool:
    return n >= min_size and (max_size is None or n <= max_size)


def enumerate_pairs(
    basket: Iterable[Any],
    min_size: int = 0,
    max_size: int | None = None,
) -> set[ItemPair]:
    """Return every unordered pair of distinct items in *basket*.

    Duplicates in *basket* are collapsed first. A basket of ``n`` distinct
    items yields ``n * (n - 1) / 2`` pairs, each in canonical order. Baskets
    whose size falls outside ``[min_size, max_size]`` yield nothing.

    Examples
    --------
    >>> sorted(enumerate_pairs({3, 1, 2}))
    [(1, 2), (1, 3), (2, 3)]
    >>> enumerate_pairs({"a", "b", "c"}, max_size=2)
    set()

    Raises
    ------
    InvalidConfigurationError
        If ``min_size > max_size`` or ``min_size < 0``.
    """
    check_size_window(min_size, max_size)
    items = sorted(set(basket), key=sort_key)
    if not in_size_window(len(items), min_size, max_size):
        return set()
    # sorted input makes every combination canonical already
    return set(itertools.combinations(items, 2))
