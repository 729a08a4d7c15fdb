"""
pick3/analysis/query.py
Sort / filter / limit over already computed report rows.
"""
from __future__ import annotations

from typing import Any, Callable

Row = dict[str, Any]

ORDERS = ("asc", "desc")


def _missing_last(value: int | None) -> int:
    return value if value is not None else -1


COMBINATION_SORT_KEYS: dict[str, Callable[[Row], Any]] = {
    "id": lambda r: _missing_last(r.get("id")),
    "frequency": lambda r: r["frequency"]["count"],
    "pattern": lambda r: r["pattern"],
    "cascade": lambda r: r["cascade_number"],
    "last_occurrence": lambda r: _missing_last(r["frequency"]["last_occurrence_index"]),
}

PAIR_SORT_KEYS: dict[str, Callable[[Row], Any]] = {
    "pair": lambda r: (r["first"], r["second"]),
    "frequency": lambda r: r["frequency"],
    "percentage": lambda r: r["percentage"],
    "possible_completions": lambda r: r["possible_completions"],
}


def _select(
    rows: list[Row],
    keys: dict[str, Callable[[Row], Any]],
    sort_by: str,
    order: str,
    limit: int | None,
) -> list[Row]:
    if sort_by not in keys:
        raise ValueError(f"Unknown sort key {sort_by!r}; expected one of {sorted(keys)}")
    if order not in ORDERS:
        raise ValueError(f"Unknown order {order!r}; expected 'asc' or 'desc'")
    out = sorted(rows, key=keys[sort_by], reverse=order == "desc")
    return out[:limit] if limit is not None else out


def query_combinations(
    results: list[Row],
    sort_by: str = "id",
    order: str = "asc",
    pattern: str | None = None,
    category: str | None = None,
    limit: int | None = None,
) -> list[Row]:
    """Rows from FrequencyAggregator.analyze()["results"]; category filters the full-combination frequency."""
    rows = [
        r for r in results
        if (pattern is None or r["pattern"] == pattern)
        and (category is None or r["frequency"]["category"] == category)
    ]
    return _select(rows, COMBINATION_SORT_KEYS, sort_by, order, limit)


def query_pairs(
    pairs: list[Row],
    sort_by: str = "frequency",
    order: str = "desc",
    category: str | None = None,
    limit: int | None = None,
) -> list[Row]:
    """Rows from PairTransitionAnalyzer.analyze()["pairs"]."""
    rows = [p for p in pairs if category is None or p["category"] == category]
    return _select(rows, PAIR_SORT_KEYS, sort_by, order, limit)
